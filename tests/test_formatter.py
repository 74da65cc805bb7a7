import pytest

from conftest import CLASSES_FILE, MAIN_MM, SOURCES_PHASE, guid, reserialize
from pbxkit.xcode.elements import PBXArray, PBXDict, PBXElement, PBXString
from pbxkit.xcode.formatter import compute_comments, format_xcode_project, sorted_keys
from pbxkit.xcode.guid import SequentialGuidGenerator
from pbxkit.xcode.model import PBXFileReference
from pbxkit.xcode.project import XcodeProject


def test_round_trip_is_byte_identical(project, base_text):
    assert project.repairs == []
    assert project.write_to_string() == base_text


def test_file_round_trip(project, base_text, tmp_path):
    bundle = tmp_path / "App.xcodeproj"
    bundle.mkdir()
    path = bundle / "project.pbxproj"
    project.write_to_file(str(path))
    assert path.read_text(encoding="utf-8") == base_text
    loaded = XcodeProject.read_from_file(str(path))
    assert loaded.name == "App"
    assert format_xcode_project(loaded) == base_text


def test_new_guid_skips_identifiers_in_use(base_text):
    taken = iter([MAIN_MM, CLASSES_FILE, "DD0000000000000000000001"])
    project = XcodeProject.read_from_string(base_text, guid_generator=lambda: next(taken))
    assert project.new_guid() == "DD0000000000000000000001"


def test_reformat_is_a_fixed_point(project):
    project.add_file_to_build(project.target_guid_by_name("App"), project.add_file("a.m", "Classes/a.m"))
    text = project.write_to_string()
    assert reserialize(project).write_to_string() == text


def test_unformatted_input_is_normalized(base_text):
    squashed = " ".join(line.strip() for line in base_text.splitlines())
    project = XcodeProject.read_from_string(squashed.replace("// !$*UTF8*$!", ""))
    assert project.write_to_string() == base_text


def test_project_name_from_configuration_list_comment(project):
    assert project.name == "App"


def test_build_file_written_on_one_line(project, target):
    file_guid = project.add_file("x.c", "Classes/x.c")
    build_guid = project.add_file_to_build_with_flags(target, file_guid, "-DFOO=1 -w")
    text = project.write_to_string()
    assert (
        f"\t\t{build_guid} /* x.c in Sources */ = {{isa = PBXBuildFile; "
        f"fileRef = {file_guid} /* x.c */; "
        f'settings = {{COMPILER_FLAGS = "-DFOO=1 -w"; }}; }};\n'
    ) in text


def test_new_file_reference_line(project):
    file_guid = project.add_file("src/util.h", "Classes/util.h")
    assert (
        f"\t\t{file_guid} /* util.h */ = {{isa = PBXFileReference; fileEncoding = 4; "
        "lastKnownFileType = sourcecode.c.h; name = util.h; path = src/util.h; "
        "sourceTree = SOURCE_ROOT; };\n"
    ) in project.write_to_string()


def test_comments_follow_renames(project, target):
    project.object(MAIN_MM, PBXFileReference).name = "entry.mm"
    text = project.write_to_string()
    assert f"{MAIN_MM} /* entry.mm */" in text
    assert "/* entry.mm in Sources */" in text
    assert "/* main.mm" not in text


def test_compute_comments(project):
    comments = compute_comments(project.objects, "Demo")
    assert comments[MAIN_MM] == "main.mm"
    assert comments[CLASSES_FILE] == "file"
    assert comments[SOURCES_PHASE] == "Sources"
    assert comments["1D60589B0D05DD56006BFB54"] == "main.mm in Sources"
    assert comments["C01FCF4E08A954540054247B"] == 'Build configuration list for PBXProject "Demo"'
    assert comments["1D6058960D05DD3E006BFB54"] == 'Build configuration list for PBXNativeTarget "App"'
    assert comments[project.project_guid()] == "Project object"


def test_dependency_objects_are_commented(project, target):
    other = project.add_target("Lib", "a", "com.apple.product-type.library.static")
    dependency = project.add_target_dependency(target, other)
    text = project.write_to_string()
    assert f"{dependency} /* PBXTargetDependency */" in text
    assert "/* PBXContainerItemProxy */" in text


def test_unknown_isa_is_written_in_its_own_section(base_text):
    text = base_text.replace(
        "/* Begin PBXFileReference section */",
        "/* Begin PBXFancyThing section */\n"
        "\t\tDD0000000000000000000001 = {\n\t\t\tisa = PBXFancyThing;\n\t\t\tz = 1;\n\t\t\ta = (\n\t\t\t);\n\t\t};\n"
        "/* End PBXFancyThing section */\n\n"
        "/* Begin PBXFileReference section */",
    )
    project = XcodeProject.read_from_string(text, guid_generator=SequentialGuidGenerator())
    out = project.write_to_string()
    assert (
        "/* Begin PBXFancyThing section */\n"
        "\t\tDD0000000000000000000001 = {\n\t\t\tisa = PBXFancyThing;\n\t\t\ta = (\n\t\t\t);\n\t\t\tz = 1;\n\t\t};\n"
        "/* End PBXFancyThing section */\n"
    ) in out


def test_sorted_keys_puts_isa_first():
    data = PBXDict()
    for key in ("path", "isa", "children", "Zeta"):
        data.set_string(key, "x")
    assert sorted_keys(data) == ["isa", "Zeta", "children", "path"]


def test_quoted_source_values_stay_quoted(base_text):
    text = base_text.replace("SDKROOT = iphoneos;", 'SDKROOT = "iphoneos";', 1)
    project = XcodeProject.read_from_string(text)
    assert 'SDKROOT = "iphoneos";' in project.write_to_string()


def test_unsupported_element_raises(project):
    project.project.attributes["Broken"] = PBXElement()
    with pytest.raises(TypeError):
        project.write_to_string()


def test_nested_arrays_and_dicts(project):
    attributes = project.project.attributes
    nested = attributes.create_dict("Nested")
    nested.create_array("list").add_string("a b")
    nested.get_array("list").add_dict().set_string("k", "v")
    text = project.write_to_string()
    assert (
        "\t\t\t\tNested = {\n"
        "\t\t\t\t\tlist = (\n"
        '\t\t\t\t\t\t"a b",\n'
        "\t\t\t\t\t\t{\n"
        "\t\t\t\t\t\t\tk = v;\n"
        "\t\t\t\t\t\t},\n"
        "\t\t\t\t\t);\n"
        "\t\t\t\t};\n"
    ) in text
    assert isinstance(attributes.get("Nested"), PBXDict)
    assert isinstance(nested.get("list"), PBXArray)
    assert isinstance(nested.get_array("list").values[0], PBXString)


def test_sequential_guids_in_output(project):
    project.add_file("a.m", "Classes/a.m")
    assert guid(1) in project.write_to_string()
