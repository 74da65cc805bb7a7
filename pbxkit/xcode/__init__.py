from pbxkit.xcode.capabilities import (
    PBXCapabilityType,
    add_capability,
    get_capabilities,
    remove_capability,
    set_team_id,
)
from pbxkit.xcode.extensions import add_watch_app, add_watch_extension
from pbxkit.xcode.guid import SequentialGuidGenerator, random_guid
from pbxkit.xcode.model import DstSubfolderSpec, ProductType, SourceTree
from pbxkit.xcode.project import XcodeProject
