from pathlib import Path

import pytest

from pbxkit.xcode.guid import SequentialGuidGenerator
from pbxkit.xcode.project import XcodeProject

FIXTURES = Path(__file__).parent / "fixtures"

APP_TARGET = "1D6058900D05DD3D006BFB54"
PROJECT_GUID = "29B97313FDCFA39411CA2CEA"
MAIN_GROUP = "29B97314FDCFA39411CA2CEA"
SOURCES_PHASE = "1D60588E0D05DD3D006BFB54"
RESOURCES_PHASE = "1D60588D0D05DD3D006BFB54"
FRAMEWORKS_PHASE = "1D60588F0D05DD3D006BFB54"
MAIN_MM = "29B97316FDCFA39411CA2CEA"
CLASSES_FILE = "AA0000000000000000000001"


def guid(n: int) -> str:
    return f"CCCCCCCC00000000{n:08d}"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def reserialize(project: XcodeProject) -> XcodeProject:
    return XcodeProject.read_from_string(
        project.write_to_string(), guid_generator=project.guid_generator
    )


@pytest.fixture
def base_text() -> str:
    return read_fixture("base.pbxproj")


@pytest.fixture
def project(base_text) -> XcodeProject:
    return XcodeProject.read_from_string(base_text, guid_generator=SequentialGuidGenerator())


@pytest.fixture
def target(project) -> str:
    return project.target_guid_by_name("App")
