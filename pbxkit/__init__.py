from pbxkit.config import Config
from pbxkit.errors import NotFoundError, ParseError, PbxError
from pbxkit.xcode import (
    PBXCapabilityType,
    SequentialGuidGenerator,
    SourceTree,
    XcodeProject,
)
