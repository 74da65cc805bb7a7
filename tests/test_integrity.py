from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import read_fixture, reserialize
from pbxkit.xcode.extensions import add_watch_app, add_watch_extension
from pbxkit.xcode.guid import SequentialGuidGenerator
from pbxkit.xcode.model import PBXObject, ProductType
from pbxkit.xcode.project import XcodeProject


def assert_integrity(project):
    objects = project.objects
    assert project.root.get_string("rootObject") in objects
    for view in project.objects_of(PBXObject):
        for key, ref in view.references():
            assert ref in objects, f"{view.guid}.{key} points to missing {ref}"
    assert XcodeProject.read_from_string(project.write_to_string()).repairs == []


def app(project):
    return project.target_guid_by_name("App")


def extra_targets(project):
    return [name for name in project.target_names() if name != "App"]


def add_file(project, n, files):
    file_guid = project.add_file(f"src/f{n}.m", f"Classes/gen/d{n % 3}/f{n}.m")
    files.append(file_guid)
    targets = project.target_names()
    project.add_file_to_build(project.target_guid_by_name(targets[-1]), file_guid)
    return project


def remove_file(project, n, files):
    alive = [f for f in files if project.find_object(f) is not None]
    if alive:
        project.remove_file(alive[0])
    return project


def remove_directory(project, n, files):
    project.remove_files_by_project_path_recursive(f"Classes/gen/d{n % 3}")
    return project


def add_target(project, n, files):
    lib = project.add_target(f"Lib{n}", "a", ProductType.STATIC_LIBRARY.value)
    project.add_sources_build_phase(lib)
    return project


def remove_target(project, n, files):
    names = extra_targets(project)
    if names:
        project.remove_target(project.target_guid_by_name(names[-1]))
    return project


def add_dependency(project, n, files):
    names = extra_targets(project)
    if names:
        project.add_target_dependency(app(project), project.target_guid_by_name(names[0]))
    return project


def add_watch(project, n, files):
    ext = add_watch_extension(project, app(project), f"Ext{n}", f"com.example.ext{n}", f"Ext{n}/Info.plist")
    add_watch_app(project, app(project), ext, f"Watch{n}", f"com.example.watch{n}", f"Watch{n}/Info.plist")
    return project


def reload(project, n, files):
    loaded = reserialize(project)
    assert loaded.repairs == []
    return loaded


STEPS = [
    add_file,
    remove_file,
    remove_directory,
    add_target,
    remove_target,
    add_dependency,
    add_watch,
    reload,
]


def run_steps(steps):
    project = XcodeProject.read_from_string(
        read_fixture("base.pbxproj"), guid_generator=SequentialGuidGenerator()
    )
    files = []
    for n, step in enumerate(steps):
        project = step(project, n, files)
        assert_integrity(project)
    text = project.write_to_string()
    assert reserialize(project).write_to_string() == text


def test_every_step_keeps_references_intact():
    run_steps(STEPS + STEPS[::-1])


def test_removing_watch_targets_keeps_references_intact():
    run_steps([add_watch, add_file, add_dependency, remove_target, remove_target, remove_target, reload])


@settings(max_examples=40, deadline=None)
@given(st.lists(st.sampled_from(STEPS), max_size=25))
def test_edit_sequences_keep_references_intact(steps):
    run_steps(steps)
