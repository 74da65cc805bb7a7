# Load-time repair of project documents.
#
# Hand-edited or merge-damaged projects often contain references to objects
# that no longer exist, entries listed twice, or a missing main group. The
# repair pass fixes those in place before the graph is handed out and returns
# one message per change, each of which is also logged at WARNING.

import logging
from typing import Callable, Dict, List, Set

from pbxkit.errors import ParseError
from pbxkit.xcode.elements import PBXDict
from pbxkit.xcode.model import (
    GROUP_CLASSES,
    GUIDList,
    PBXBuildFile,
    PBXBuildPhase,
    PBXGroup,
    PBXObject,
    PBXProject,
    PBXTargetDependency,
    SourceTree,
    UnknownObject,
    XCBuildConfiguration,
    XCConfigurationList,
    view_for,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAMES = ("Debug", "Release")


class _Repairs:
    def __init__(self, objects: PBXDict):
        self.objects = objects
        self.messages: List[str] = []

    def report(self, message: str, *args) -> None:
        text = message % args if args else message
        logger.warning("%s", text)
        self.messages.append(text)

    def views(self) -> List[PBXObject]:
        return [
            view_for(guid, data)
            for guid, data in list(self.objects.items())
            if isinstance(data, PBXDict)
        ]

    def delete(self, guid: str) -> None:
        self.objects.remove(guid)


def repair_project(root: PBXDict, new_guid: Callable[[], str]) -> List[str]:
    """
    Restore the reference invariants of a freshly parsed document.

    Args:
        root: The parsed root dictionary, modified in place.
        new_guid: Identifier source for objects that have to be created.

    Returns:
        One message per repair that was made.

    Raises:
        ParseError: If the document has no objects mapping or no project object.
    """
    objects = root.get_dict("objects")
    if objects is None:
        raise ParseError("project document has no objects mapping")
    repairs = _Repairs(objects)

    project = _repair_root_object(root, repairs)
    _delete_broken_objects(repairs)
    _prune_dangling_references(repairs)
    _drop_shared_children(repairs)
    _drop_duplicate_build_files(repairs)
    _drop_duplicate_configurations(repairs)
    _create_missing_project_parts(project, repairs, new_guid)
    return repairs.messages


def _repair_root_object(root: PBXDict, repairs: _Repairs) -> PBXProject:
    projects = [v for v in repairs.views() if isinstance(v, PBXProject)]
    if not projects:
        raise ParseError("project document has no PBXProject object")
    root_guid = root.get_string("rootObject")
    for project in projects:
        if project.guid == root_guid:
            return project
    project = sorted(projects, key=lambda p: p.guid)[0]
    if len(projects) > 1:
        repairs.report(
            "rootObject %s does not resolve, using first of %d projects %s",
            root_guid,
            len(projects),
            project.guid,
        )
    else:
        repairs.report("rootObject %s does not resolve, using %s", root_guid, project.guid)
    root.set_string("rootObject", project.guid)
    return project


def _delete_broken_objects(repairs: _Repairs) -> None:
    objects = repairs.objects
    for view in repairs.views():
        if isinstance(view, PBXBuildFile):
            if view.fileRef in objects or view.productRef is not None:
                continue
            repairs.report(
                "build file %s references missing file %s, removed", view.guid, view.fileRef
            )
            repairs.delete(view.guid)
        elif isinstance(view, PBXTargetDependency):
            if view.target in objects or view.targetProxy in objects:
                continue
            repairs.report("target dependency %s has no target or proxy, removed", view.guid)
            repairs.delete(view.guid)


def _prune_dangling_references(repairs: _Repairs) -> None:
    objects = repairs.objects
    for view in repairs.views():
        if isinstance(view, UnknownObject):
            continue
        for key in view.reference_keys:
            value = view.data.get_string(key)
            if value is not None and value not in objects:
                repairs.report("%s.%s references missing object %s, removed", view.guid, key, value)
                view.data.remove(key)
        for key in view.reference_list_keys:
            refs = GUIDList(view.data, key)
            if not refs.exists():
                continue
            seen: Set[str] = set()
            kept: List[str] = []
            for value in refs:
                if value not in objects:
                    repairs.report("%s.%s references missing object %s, removed", view.guid, key, value)
                elif value in seen:
                    repairs.report("%s.%s lists %s twice, duplicate removed", view.guid, key, value)
                else:
                    seen.add(value)
                    kept.append(value)
            if len(kept) != len(refs):
                refs.replace(kept)
        if isinstance(view, PBXProject):
            for product_group, project_ref in view.project_references():
                for value in (product_group, project_ref):
                    if value is not None and value not in objects:
                        repairs.report(
                            "%s.projectReferences references missing object %s, removed",
                            view.guid,
                            value,
                        )
                        view.remove_project_references(value)


def _drop_shared_children(repairs: _Repairs) -> None:
    owner: Dict[str, str] = {}
    for view in repairs.views():
        if not isinstance(view, GROUP_CLASSES):
            continue
        for child in list(view.children):
            if child in owner:
                repairs.report(
                    "%s is a child of both %s and %s, removed from %s",
                    child,
                    owner[child],
                    view.guid,
                    view.guid,
                )
                view.children.remove(child)
            else:
                owner[child] = view.guid


def _drop_duplicate_build_files(repairs: _Repairs) -> None:
    objects = repairs.objects
    for view in repairs.views():
        if not isinstance(view, PBXBuildPhase):
            continue
        seen: Set[str] = set()
        for build_guid in list(view.files):
            data = objects.get(build_guid)
            if not isinstance(data, PBXDict):
                continue
            file_ref = data.get_string("fileRef")
            if file_ref is None:
                continue
            if file_ref in seen:
                repairs.report(
                    "phase %s builds %s twice, removed build file %s",
                    view.guid,
                    file_ref,
                    build_guid,
                )
                view.files.remove(build_guid)
                repairs.delete(build_guid)
            else:
                seen.add(file_ref)


def _drop_duplicate_configurations(repairs: _Repairs) -> None:
    objects = repairs.objects
    for view in repairs.views():
        if not isinstance(view, XCConfigurationList):
            continue
        seen: Set[str] = set()
        for config_guid in list(view.buildConfigurations):
            data = objects.get(config_guid)
            name = data.get_string("name") if isinstance(data, PBXDict) else None
            if name is None:
                continue
            if name in seen:
                repairs.report(
                    "configuration list %s has two configurations named %s, removed %s",
                    view.guid,
                    name,
                    config_guid,
                )
                view.buildConfigurations.remove(config_guid)
                repairs.delete(config_guid)
            else:
                seen.add(name)


def _create_missing_project_parts(
    project: PBXProject, repairs: _Repairs, new_guid: Callable[[], str]
) -> None:
    objects = repairs.objects
    if not isinstance(objects.get(project.mainGroup or ""), PBXDict):
        group = PBXGroup.create(new_guid(), None, None, SourceTree.GROUP)
        objects[group.guid] = group.data
        project.mainGroup = group.guid
        repairs.report("project has no main group, created %s", group.guid)
    if not isinstance(objects.get(project.buildConfigurationList or ""), PBXDict):
        config_list = XCConfigurationList.create(new_guid(), DEFAULT_CONFIG_NAMES[-1])
        objects[config_list.guid] = config_list.data
        for name in DEFAULT_CONFIG_NAMES:
            config = XCBuildConfiguration.create(new_guid(), name)
            objects[config.guid] = config.data
            config_list.buildConfigurations.add(config.guid)
        project.buildConfigurationList = config_list.guid
        repairs.report("project has no configuration list, created %s", config_list.guid)
