import pytest

from pbxkit.details import paths
from pbxkit.details.as_iterator import str_iter
from pbxkit.xcode.elements import PBXDict
from pbxkit.xcode.file_types import BuildCategory, FileType, category_for_file_type, file_type_info
from pbxkit.xcode.guid import SequentialGuidGenerator, random_guid
from pbxkit.xcode.model import (
    GUIDList,
    PBXBuildFile,
    PBXGroup,
    PBXProject,
    UnknownObject,
    view_for,
)


def test_guids():
    value = random_guid()
    assert len(value) == 24
    assert value == value.upper()
    generator = SequentialGuidGenerator("ABCDABCDABCDABCD")
    assert [generator(), generator()] == ["ABCDABCDABCDABCD00000001", "ABCDABCDABCDABCD00000002"]
    generator.reset()
    assert generator() == "ABCDABCDABCDABCD00000001"
    with pytest.raises(ValueError):
        SequentialGuidGenerator("short")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a/b.M", ".m"),
        ("a.tar.gz", ".gz"),
        (".gitignore", ""),
        ("dir.d/file", ""),
        ("Foo.framework/", ".framework"),
    ],
)
def test_get_extension(path, expected):
    assert paths.get_extension(path) == expected


def test_path_helpers():
    assert paths.combine("a", "b") == "a/b"
    assert paths.combine("", "b") == "b"
    assert paths.combine("a/", "b") == "a/b"
    assert paths.combine("a", "/abs") == "/abs"
    assert paths.split("a\\b//c/") == ["a", "b", "c"]
    assert paths.get_directory("a/b/c.m") == "a/b"
    assert paths.get_directory("c.m") == ""
    assert paths.get_filename("a/b/c.m") == "c.m"
    assert paths.split_extension("App.xcodeproj") == ("App", ".xcodeproj")


def test_file_types():
    assert file_type_info("main.m") == (FileType.OBJC, BuildCategory.SOURCE, False)
    assert file_type_info("x.H").category == BuildCategory.HEADER
    assert file_type_info("App.app").explicit
    assert file_type_info("Base.xcconfig").category == BuildCategory.NOT_BUILDABLE
    assert file_type_info("README").category == BuildCategory.RESOURCE
    assert file_type_info("whatever.cc", is_folder=True).file_type == FileType.FOLDER
    assert category_for_file_type("sourcecode.swift") == BuildCategory.SOURCE
    assert category_for_file_type(None) == BuildCategory.RESOURCE
    assert FileType.PLIST.is_text
    assert not FileType.PNG.is_text


def test_guid_list_is_lazy():
    data = PBXDict()
    refs = GUIDList(data, "children")
    assert len(refs) == 0
    assert not refs.exists()
    assert "children" not in data
    refs.add("A")
    refs.add("A")
    refs.add("B")
    assert list(refs) == ["A", "B"]
    assert refs.remove("A")
    assert not refs.remove("A")
    refs.replace(["C", "B"])
    assert list(refs) == ["C", "B"]


def test_views_write_through():
    group = PBXGroup.create("G", "Name", "path")
    group.children.add("X")
    view = view_for("G", group.data)
    assert isinstance(view, PBXGroup)
    assert list(view.children) == ["X"]
    view.name = None
    assert "name" not in group.data
    assert group.display_name == "path"


def test_unknown_isa():
    data = PBXDict()
    data.set_string("isa", "PBXSomethingNew")
    assert isinstance(view_for("U", data), UnknownObject)


def test_build_file_settings():
    build_file = PBXBuildFile.create("B", "F", compile_flags="-w", weak=True)
    assert build_file.compiler_flags == "-w"
    assert build_file.weak
    build_file.remove_attribute("Weak")
    build_file.compiler_flags = None
    assert build_file.settings is None
    assert list(build_file.references()) == [("fileRef", "F")]
    assert build_file.detach("F")
    assert build_file.fileRef is None


def test_project_references_detach():
    project = PBXProject.new("P")
    project.add_project_reference("G", "R")
    assert project.project_references() == [("G", "R")]
    assert ("projectReferences", "R") in list(project.references())
    assert project.detach("R")
    assert project.project_references() == []
    assert "projectReferences" not in project.data


def test_str_iter():
    assert list(str_iter("a")) == ["a"]
    assert list(str_iter(["a", "b", "a"])) == ["a", "b"]
    with pytest.raises(TypeError):
        list(str_iter(3))
