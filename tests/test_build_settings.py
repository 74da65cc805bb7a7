import pytest

from pbxkit.errors import NotFoundError
from pbxkit.xcode import build_settings
from pbxkit.xcode.elements import PBXArray, PBXDict, PBXString

TARGET_DEBUG = "1D6058940D05DD3E006BFB54"
TARGET_RELEASE = "1D6058950D05DD3E006BFB54"
PROJECT_DEBUG = "C01FCF4F08A954540054247B"


def settings_of(project, config_guid):
    return project.find_object(config_guid).build_settings


def test_get_property(project, target):
    assert project.get_build_property_for_config(TARGET_DEBUG, "PRODUCT_NAME") == "App"
    assert project.get_build_property_for_any_config(target, "INFOPLIST_FILE") == "Info.plist"
    assert project.get_build_property_for_any_config(target, "MISSING") is None


def test_set_property_applies_to_every_configuration(project, target):
    project.set_build_property(target, "ENABLE_BITCODE", "NO")
    assert project.get_build_property_for_config(TARGET_DEBUG, "ENABLE_BITCODE") == "NO"
    assert project.get_build_property_for_config(TARGET_RELEASE, "ENABLE_BITCODE") == "NO"
    assert project.get_build_property_for_config(PROJECT_DEBUG, "ENABLE_BITCODE") is None


def test_set_property_on_single_configuration(project):
    project.set_build_property(TARGET_DEBUG, "GCC_OPTIMIZATION_LEVEL", "0")
    assert project.get_build_property_for_config(TARGET_DEBUG, "GCC_OPTIMIZATION_LEVEL") == "0"
    assert project.get_build_property_for_config(TARGET_RELEASE, "GCC_OPTIMIZATION_LEVEL") is None


def test_set_property_on_several_owners(project, target):
    project.set_build_property([target, project.project_guid()], "SWIFT_VERSION", "5.0")
    assert project.get_build_property_for_config(PROJECT_DEBUG, "SWIFT_VERSION") == "5.0"
    assert project.get_build_property_for_config(TARGET_RELEASE, "SWIFT_VERSION") == "5.0"


def test_add_property_keeps_order_and_duplicates(project, target):
    for value in ("a", "a", "b"):
        project.add_build_property(target, "OTHER_LDFLAGS", value)
    values = settings_of(project, TARGET_DEBUG).get_array("OTHER_LDFLAGS").strings()
    assert values == ["a", "a", "b"]


def test_add_property_single_value_is_a_string(project, target):
    project.add_build_property(target, "OTHER_CFLAGS", "-w")
    assert isinstance(settings_of(project, TARGET_DEBUG).get("OTHER_CFLAGS"), PBXString)
    project.add_build_property(target, "OTHER_CFLAGS", "-g")
    assert isinstance(settings_of(project, TARGET_DEBUG).get("OTHER_CFLAGS"), PBXArray)
    assert project.get_build_property_for_config(TARGET_DEBUG, "OTHER_CFLAGS") == "-w -g"


def test_library_search_paths_are_quoted_and_deduplicated(project, target):
    project.add_build_property(target, "LIBRARY_SEARCH_PATHS", "/path/with space")
    project.add_build_property(target, "LIBRARY_SEARCH_PATHS", '"/path/with space"')
    project.add_build_property(target, "LIBRARY_SEARCH_PATHS", "/plain")
    values = settings_of(project, TARGET_DEBUG).get_array("LIBRARY_SEARCH_PATHS").strings()
    assert values == ['"/path/with space"', "/plain"]

    project.remove_build_property_value(target, "LIBRARY_SEARCH_PATHS", "/path/with space")
    assert project.get_build_property_for_config(TARGET_DEBUG, "LIBRARY_SEARCH_PATHS") == "/plain"


def test_framework_search_paths_are_quoted_but_keep_duplicates(project, target):
    project.add_build_property(target, "FRAMEWORK_SEARCH_PATHS", "a")
    project.add_build_property(target, "FRAMEWORK_SEARCH_PATHS", "a")
    project.add_build_property(target, "FRAMEWORK_SEARCH_PATHS", "b")
    assert project.get_build_property_for_config(TARGET_DEBUG, "FRAMEWORK_SEARCH_PATHS") == "a a b"

    project.add_build_property(target, "FRAMEWORK_SEARCH_PATHS", "/Lib Dir")
    values = settings_of(project, TARGET_DEBUG).get_array("FRAMEWORK_SEARCH_PATHS").strings()
    assert values[-1] == '"/Lib Dir"'


def test_update_property_removes_then_adds(project, target):
    project.update_build_property(target, "FOO", ["x", "y"], None)
    project.update_build_property(target, "FOO", ["z", "x"], ["y", "x"])
    values = settings_of(project, TARGET_DEBUG).get_array("FOO").strings()
    assert values == ["z", "x"]


def test_update_property_remove_only(project, target):
    project.update_build_property(target, "FOO", ["x", "y"], None)
    project.update_build_property(target, "FOO", None, ["x", "y"])
    assert "FOO" not in settings_of(project, TARGET_DEBUG)


def test_remove_property(project, target):
    project.remove_build_property(target, "INFOPLIST_FILE")
    assert project.get_build_property_for_any_config(target, "INFOPLIST_FILE") is None
    # Removing twice is harmless
    project.remove_build_property(target, "INFOPLIST_FILE")


def test_remove_property_value_of_missing_key(project, target):
    project.remove_build_property_value(target, "NOPE", "x")
    assert "NOPE" not in settings_of(project, TARGET_DEBUG)


def test_runpath_search_paths_always_a_list(project, target):
    project.add_build_property(target, "LD_RUNPATH_SEARCH_PATHS", "@executable_path/Frameworks")
    value = settings_of(project, TARGET_DEBUG).get("LD_RUNPATH_SEARCH_PATHS")
    assert isinstance(value, PBXArray)
    assert value.strings() == ["@executable_path/Frameworks"]


def test_unknown_owner_raises(project):
    with pytest.raises(NotFoundError):
        project.set_build_property("FFFFFFFFFFFFFFFFFFFFFFFF", "A", "B")


def test_normalize_value():
    assert build_settings.normalize_value("FRAMEWORK_SEARCH_PATHS", "a b") == '"a b"'
    assert build_settings.normalize_value("FRAMEWORK_SEARCH_PATHS", '"a b"') == '"a b"'
    assert build_settings.normalize_value("HEADER_SEARCH_PATHS", "a b") == "a b"
    assert build_settings.normalize_value("LIBRARY_SEARCH_PATHS", "ab") == "ab"


def test_store_values_shapes():
    settings = PBXDict()
    build_settings.store_values(settings, "K", ["one"])
    assert settings.get_string("K") == "one"
    build_settings.store_values(settings, "K", ["one", "two"])
    assert settings.get_array("K").strings() == ["one", "two"]
    build_settings.store_values(settings, "K", [])
    assert "K" not in settings


def test_set_value_replaces_array():
    settings = PBXDict()
    build_settings.store_values(settings, "K", ["a", "b"])
    build_settings.set_value(settings, "K", "c")
    assert settings.get_string("K") == "c"


def test_update_property_on_existing_list(project, target):
    project.update_build_property(target, "FOO", ["y", "z"], None)
    project.update_build_property(target, "FOO", ["x"], ["y"])
    assert settings_of(project, TARGET_RELEASE).get_array("FOO").strings() == ["z", "x"]


def test_library_search_path_with_space_added_once(project, target):
    project.add_build_property(target, "LIBRARY_SEARCH_PATHS", "test test")
    project.add_build_property(target, "LIBRARY_SEARCH_PATHS", '"test test"')
    assert project.get_build_property_for_config(TARGET_DEBUG, "LIBRARY_SEARCH_PATHS") == '"test test"'
