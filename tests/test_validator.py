import pytest

from conftest import APP_TARGET, CLASSES_FILE, MAIN_GROUP, MAIN_MM, PROJECT_GUID, SOURCES_PHASE
from pbxkit.errors import ParseError
from pbxkit.xcode.guid import SequentialGuidGenerator
from pbxkit.xcode.model import PBXGroup, PBXProject, UnknownObject
from pbxkit.xcode.project import XcodeProject

MAIN_MM_BUILD = "1D60589B0D05DD56006BFB54"


def load(text):
    return XcodeProject.read_from_string(text, guid_generator=SequentialGuidGenerator())


def test_dangling_child_is_pruned(base_text):
    text = base_text.replace(
        f"\t\t\t\t{CLASSES_FILE} /* file */,\n",
        f"\t\t\t\t{CLASSES_FILE} /* file */,\n\t\t\t\tEE0000000000000000000001 /* gone */,\n",
    )
    project = load(text)
    assert len(project.repairs) == 1
    assert "EE0000000000000000000001" in project.repairs[0]
    assert project.write_to_string() == base_text


def test_build_file_without_file_is_removed(base_text, caplog):
    text = base_text.replace(
        f"fileRef = {MAIN_MM} /* main.mm */", "fileRef = EE0000000000000000000002 /* main.mm */"
    )
    project = load(text)
    assert project.find_object(MAIN_MM_BUILD) is None
    assert MAIN_MM_BUILD not in project.find_object(SOURCES_PHASE).files
    assert any("EE0000000000000000000002" in r for r in project.repairs)
    assert "EE0000000000000000000002" in caplog.text


def test_duplicate_list_entries_removed(base_text):
    text = base_text.replace(
        f"\t\t\t\t{MAIN_MM_BUILD} /* main.mm in Sources */,\n",
        f"\t\t\t\t{MAIN_MM_BUILD} /* main.mm in Sources */,\n" * 2,
    )
    project = load(text)
    assert project.repairs
    assert project.write_to_string() == base_text


def test_duplicate_build_files_in_phase(base_text):
    duplicate = (
        "\t\tEE0000000000000000000003 /* main.mm in Sources */ = "
        f"{{isa = PBXBuildFile; fileRef = {MAIN_MM} /* main.mm */; }};\n"
    )
    text = base_text.replace("/* End PBXBuildFile section */", duplicate + "/* End PBXBuildFile section */")
    text = text.replace(
        f"\t\t\t\t{MAIN_MM_BUILD} /* main.mm in Sources */,\n",
        f"\t\t\t\t{MAIN_MM_BUILD} /* main.mm in Sources */,\n\t\t\t\tEE0000000000000000000003 /* main.mm in Sources */,\n",
    )
    project = load(text)
    assert project.find_object("EE0000000000000000000003") is None
    assert project.write_to_string() == base_text


def test_shared_child_kept_in_first_group(base_text):
    text = base_text.replace(
        "\t\t\t\t8D1107310486CEB800E47090 /* Info.plist */,\n",
        "\t\t\t\t8D1107310486CEB800E47090 /* Info.plist */,\n\t\t\t\t" + MAIN_MM + " /* main.mm */,\n",
    )
    project = load(text)
    assert len(project.repairs) == 1
    assert MAIN_MM in project.object("080E96DDFE201D6D7F000001", PBXGroup).children
    assert MAIN_MM not in project.object(MAIN_GROUP, PBXGroup).children


def test_duplicate_configuration_names(base_text):
    text = base_text.replace(
        "\t\t\t\tC01FCF5008A954540054247B /* Release */,\n",
        "\t\t\t\tC01FCF5008A954540054247B /* Release */,\n\t\t\t\tC01FCF4F08A954540054247B /* Debug */,\n",
    ).replace("\t\t\tname = Release;\n\t\t};\n/* End XCBuildConfiguration", "\t\t\tname = Debug;\n\t\t};\n/* End XCBuildConfiguration")
    project = load(text)
    assert project.repairs
    names = project.build_config_names()
    assert names == ["Debug"]


def test_root_object_repointed(base_text):
    text = base_text.replace(
        f"rootObject = {PROJECT_GUID} /* Project object */;",
        "rootObject = EE0000000000000000000004;",
    )
    project = load(text)
    assert project.project_guid() == PROJECT_GUID
    assert len(project.repairs) == 1
    assert project.write_to_string() == base_text


def test_missing_main_group_created(base_text):
    text = base_text.replace(
        f"mainGroup = {MAIN_GROUP} /* CustomTemplate */;", "mainGroup = EE0000000000000000000005;"
    )
    project = load(text)
    main_group = project.project.mainGroup
    assert main_group not in (None, MAIN_GROUP)
    assert isinstance(project.find_object(main_group), PBXGroup)
    file_guid = project.add_file("a.m", "a.m")
    assert file_guid in project.object(main_group, PBXGroup).children


def test_missing_configuration_list_created(base_text):
    text = base_text.replace(
        "\t\t\tbuildConfigurationList = C01FCF4E08A954540054247B /* Build configuration list for PBXProject \"App\" */;\n"
        "\t\t\tcompatibilityVersion",
        "\t\t\tcompatibilityVersion",
    )
    project = load(text)
    assert project.build_config_names() == ["Debug", "Release"]
    assert any("configuration list" in r for r in project.repairs)


def test_unknown_objects_preserved(base_text):
    text = base_text.replace(
        "/* Begin PBXFileReference section */",
        "/* Begin PBXMystery section */\n"
        f"\t\tDD0000000000000000000001 = {{isa = PBXMystery; ref = EE0000000000000000000006; }};\n"
        "/* End PBXMystery section */\n\n/* Begin PBXFileReference section */",
    )
    project = load(text)
    assert project.repairs == []
    assert isinstance(project.find_object("DD0000000000000000000001"), UnknownObject)
    assert "ref = EE0000000000000000000006;" in project.write_to_string()


def test_target_dependency_without_target_removed(base_text):
    text = base_text.replace(
        "/* Begin PBXGroup section */",
        "/* Begin PBXTargetDependency section */\n"
        "\t\tDD0000000000000000000002 = {\n\t\t\tisa = PBXTargetDependency;\n"
        "\t\t\ttarget = EE0000000000000000000007;\n\t\t};\n"
        "/* End PBXTargetDependency section */\n\n/* Begin PBXGroup section */",
    ).replace(
        "\t\t\tdependencies = (\n\t\t\t);",
        "\t\t\tdependencies = (\n\t\t\t\tDD0000000000000000000002,\n\t\t\t);",
    )
    project = load(text)
    assert project.find_object("DD0000000000000000000002") is None
    assert project.dependencies_of(APP_TARGET) == []
    assert project.write_to_string() == base_text


def test_no_objects_is_a_parse_error():
    with pytest.raises(ParseError):
        load("{ archiveVersion = 1; rootObject = X; }")


def test_no_project_object_is_a_parse_error():
    with pytest.raises(ParseError):
        load("{ objects = { A = { isa = PBXGroup; }; }; rootObject = A; }")


def test_clean_project_needs_no_repairs(project):
    assert project.repairs == []
    assert isinstance(project.project, PBXProject)
