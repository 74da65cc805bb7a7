# Xcode project graph.
#
# XcodeProject owns one parsed document and exposes the edits a build tool
# needs: files and groups, build phases, targets, build settings and the
# references between them. Every edit keeps the document's references
# consistent, so whatever is written back can be opened by Xcode.

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Type

from pbxkit.details import paths
from pbxkit.details.as_iterator import StrOrIterable, str_iter
from pbxkit.errors import NotFoundError
from pbxkit.xcode import build_settings
from pbxkit.xcode.elements import PBXArray, PBXDict
from pbxkit.xcode.file_types import BuildCategory, category_for_file_type, file_type_info
from pbxkit.xcode.formatter import format_xcode_project
from pbxkit.xcode.guid import GuidGenerator, random_guid
from pbxkit.xcode.model import (
    GROUP_CLASSES,
    DstSubfolderSpec,
    ObjectT,
    PBXBuildFile,
    PBXBuildPhase,
    PBXContainerItemProxy,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFrameworksBuildPhase,
    PBXGroup,
    PBXHeadersBuildPhase,
    PBXNativeTarget,
    PBXObject,
    PBXProject,
    PBXReferenceProxy,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXTarget,
    PBXTargetDependency,
    PhaseT,
    ProxyType,
    SourceTree,
    XCBuildConfiguration,
    XCConfigurationList,
    view_for,
)
from pbxkit.xcode.parser import parse_document
from pbxkit.xcode.validator import repair_project

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "Project"
PROJECT_FILE_NAME = "project.pbxproj"
EMBED_APP_EXTENSIONS = "Embed App Extensions"

_CONFIG_LIST_COMMENT = re.compile(r'^Build configuration list for PBXProject "(.*)"$')

_PHASE_FOR_CATEGORY: Dict[BuildCategory, Type[PBXBuildPhase]] = {
    BuildCategory.SOURCE: PBXSourcesBuildPhase,
    BuildCategory.HEADER: PBXHeadersBuildPhase,
    BuildCategory.RESOURCE: PBXResourcesBuildPhase,
    BuildCategory.FRAMEWORK: PBXFrameworksBuildPhase,
}

RealPath = Tuple[str, str]  # (source tree, path)


@dataclass
class PathIndex:
    files_by_project_path: Dict[str, str] = field(default_factory=dict)
    groups_by_project_path: Dict[str, str] = field(default_factory=dict)
    project_path_by_guid: Dict[str, str] = field(default_factory=dict)
    files_by_real_path: Dict[RealPath, str] = field(default_factory=dict)
    parent_by_guid: Dict[str, str] = field(default_factory=dict)


def infer_project_name(root: PBXDict) -> Optional[str]:
    """Project name as recorded in the comment of the project's configuration list."""
    objects = root.get_dict("objects")
    if objects is None:
        return None
    candidates = list(objects.key_comments.values())
    for data in objects.values.values():
        if isinstance(data, PBXDict) and data.get_string("isa") == PBXProject.isa:
            config_list = data.get("buildConfigurationList")
            comment = getattr(config_list, "comment", None)
            if comment:
                candidates.insert(0, comment)
    for comment in candidates:
        match = _CONFIG_LIST_COMMENT.match(comment)
        if match:
            return match.group(1)
    return None


def project_name_from_path(path: str) -> Optional[str]:
    """Name of the project for paths like Name.xcodeproj/project.pbxproj."""
    path = paths.fix_slashes(os.fspath(path))
    if paths.get_filename(path) == PROJECT_FILE_NAME:
        path = paths.get_directory(path)
    stem, ext = paths.split_extension(paths.get_filename(path))
    if ext == ".xcodeproj" and stem:
        return stem
    return None


def _normalize_real_path(path: str, tree: SourceTree) -> Tuple[str, SourceTree]:
    path = paths.fix_slashes(path)
    if tree == SourceTree.SOURCE_ROOT and paths.is_absolute(path):
        tree = SourceTree.ABSOLUTE
    return path, tree


class XcodeProject:
    """
    A loaded project document and the operations that edit it.

    Objects are addressed by their identifiers. Lookups that do not find what
    they are asked for return None; operations handed an identifier that does
    not resolve raise NotFoundError.
    """

    def __init__(
        self,
        root: PBXDict,
        guid_generator: Optional[GuidGenerator] = None,
        name: str = DEFAULT_PROJECT_NAME,
    ):
        self.root = root
        self.guid_generator: GuidGenerator = guid_generator or random_guid
        self.name = name
        self.repairs: List[str] = []
        self._index: Optional[PathIndex] = None

    # Reading and writing

    @classmethod
    def read_from_string(
        cls,
        text: str,
        guid_generator: Optional[GuidGenerator] = None,
        name: Optional[str] = None,
    ) -> "XcodeProject":
        root = parse_document(text)
        project = cls(root, guid_generator, name or infer_project_name(root) or DEFAULT_PROJECT_NAME)
        project.repairs = repair_project(root, project.new_guid)
        logger.info(
            "loaded project %s with %d objects, %d repairs",
            project.name,
            len(project.objects),
            len(project.repairs),
        )
        return project

    @classmethod
    def read_from_file(
        cls,
        path: str,
        guid_generator: Optional[GuidGenerator] = None,
        name: Optional[str] = None,
    ) -> "XcodeProject":
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        root = parse_document(text)
        name = name or infer_project_name(root) or project_name_from_path(path)
        project = cls(root, guid_generator, name or DEFAULT_PROJECT_NAME)
        project.repairs = repair_project(root, project.new_guid)
        logger.info(
            "loaded %s with %d objects, %d repairs", path, len(project.objects), len(project.repairs)
        )
        return project

    def write_to_string(self) -> str:
        return format_xcode_project(self)

    def write_to_file(self, path: str) -> None:
        text = self.write_to_string()
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("wrote %s", path)

    # Objects

    @property
    def objects(self) -> PBXDict:
        return self.root.create_dict("objects")

    @property
    def project(self) -> PBXProject:
        return self.object(self.root.get_string("rootObject") or "", PBXProject)

    def project_guid(self) -> str:
        return self.project.guid

    def new_guid(self) -> str:
        while True:
            guid = self.guid_generator()
            if guid not in self.objects:
                return guid

    def find_object(self, guid: str) -> Optional[PBXObject]:
        data = self.objects.get(guid)
        if not isinstance(data, PBXDict):
            return None
        return view_for(guid, data)

    def object(self, guid: str, cls: Type[ObjectT]) -> ObjectT:
        view = self.find_object(guid)
        if not isinstance(view, cls):
            raise NotFoundError(f"{guid} is not a {cls.__name__}")
        return view

    def objects_of(self, cls: Type[ObjectT]) -> List[ObjectT]:
        return [
            view
            for view in (view_for(guid, data) for guid, data in self.objects.items() if isinstance(data, PBXDict))
            if isinstance(view, cls)
        ]

    def add_object(self, view: ObjectT) -> ObjectT:
        self.objects[view.guid] = view.data
        logger.debug("created %s %s", view.isa, view.guid)
        return view

    def remove_object(self, guid: str) -> None:
        """Delete an object and every reference to it held by known objects."""
        self.objects.remove(guid)
        for view in self.objects_of(PBXObject):
            view.detach(guid)
        self._index = None
        logger.debug("removed %s", guid)

    # Path index

    def _path_index(self) -> PathIndex:
        if self._index is None:
            self._index = self._build_path_index()
        return self._index

    def _build_path_index(self) -> PathIndex:
        index = PathIndex()
        visited = set()
        main_group = self.find_object(self.project.mainGroup or "")

        def walk(group: PBXGroup, project_path: str, real: RealPath) -> None:
            for child_guid in group.children:
                if child_guid in visited:
                    continue
                child = self.find_object(child_guid)
                if child is None:
                    continue
                visited.add(child_guid)
                index.parent_by_guid[child_guid] = group.guid
                child_name = child.display_name or ""
                child_project_path = paths.combine(project_path, child_name)
                child_real = self._real_path_of(child, real)
                index.project_path_by_guid.setdefault(child_guid, child_project_path)
                if isinstance(child, GROUP_CLASSES):
                    index.groups_by_project_path.setdefault(child_project_path, child_guid)
                    walk(child, child_project_path, child_real)
                else:
                    index.files_by_project_path.setdefault(child_project_path, child_guid)
                    if isinstance(child, PBXFileReference):
                        index.files_by_real_path.setdefault(child_real, child_guid)

        if isinstance(main_group, PBXGroup):
            visited.add(main_group.guid)
            index.groups_by_project_path[""] = main_group.guid
            walk(main_group, "", (SourceTree.SOURCE_ROOT.value, main_group.path or ""))

        # File references outside the group tree can still be found by real path
        for ref in self.objects_of(PBXFileReference):
            if ref.guid not in visited:
                real = self._real_path_of(ref, (SourceTree.SOURCE_ROOT.value, ""))
                index.files_by_real_path.setdefault(real, ref.guid)
        return index

    @staticmethod
    def _real_path_of(view: PBXObject, parent_real: RealPath) -> RealPath:
        tree = view.data.get_string("sourceTree") or SourceTree.GROUP.value
        path = view.data.get_string("path") or ""
        if tree == SourceTree.GROUP.value:
            return parent_real[0], paths.combine(parent_real[1], path)
        return tree, path

    def _invalidate(self) -> None:
        self._index = None

    # File lookups

    def find_file_guid_by_real_path(
        self, path: str, source_tree: SourceTree = SourceTree.SOURCE_ROOT
    ) -> Optional[str]:
        path, tree = _normalize_real_path(path, source_tree)
        return self._path_index().files_by_real_path.get((tree.value, path))

    def find_file_guid_by_project_path(self, path: str) -> Optional[str]:
        return self._path_index().files_by_project_path.get(paths.fix_slashes(path))

    def find_group_guid_by_project_path(self, path: str) -> Optional[str]:
        return self._path_index().groups_by_project_path.get(paths.fix_slashes(path).strip("/"))

    def contains_file_by_real_path(
        self, path: str, source_tree: SourceTree = SourceTree.SOURCE_ROOT
    ) -> bool:
        return self.find_file_guid_by_real_path(path, source_tree) is not None

    def contains_file_by_project_path(self, path: str) -> bool:
        return self.find_file_guid_by_project_path(path) is not None

    def get_group_children_files(self, project_path: str) -> List[str]:
        """Names of the files, not groups, directly inside a group."""
        group_guid = self.find_group_guid_by_project_path(project_path)
        if group_guid is None:
            raise NotFoundError(f"no group at project path {project_path!r}")
        group = self.object(group_guid, PBXGroup)
        result = []
        for child_guid in group.children:
            child = self.find_object(child_guid)
            if child is not None and not isinstance(child, GROUP_CLASSES):
                result.append(child.display_name or "")
        return result

    def project_path_of(self, guid: str) -> Optional[str]:
        return self._path_index().project_path_by_guid.get(guid)

    # Files and groups

    def add_file(
        self,
        real_path: str,
        project_path: str,
        source_tree: SourceTree = SourceTree.SOURCE_ROOT,
    ) -> str:
        """
        Add a file reference and the groups leading to it.

        Args:
            real_path: Location of the file, relative to source_tree.
            project_path: Location in the project navigator, e.g. "Classes/main.m".
            source_tree: What real_path is relative to; GROUP is not accepted.

        Returns:
            The identifier of the new file reference, or of the existing one
            when either path is already known.
        """
        return self._add_file(real_path, project_path, source_tree, is_folder=False)

    def add_folder_reference(
        self,
        real_path: str,
        project_path: str,
        source_tree: SourceTree = SourceTree.SOURCE_ROOT,
    ) -> str:
        return self._add_file(real_path, project_path, source_tree, is_folder=True)

    def _add_file(
        self, real_path: str, project_path: str, source_tree: SourceTree, is_folder: bool
    ) -> str:
        real_path = paths.fix_slashes(real_path)
        project_path = paths.fix_slashes(project_path)
        if source_tree == SourceTree.GROUP:
            raise ValueError("files can not be added relative to their group")
        if not is_folder and paths.get_extension(real_path) != paths.get_extension(project_path):
            raise ValueError(
                f"extensions of {real_path!r} and {project_path!r} do not match"
            )

        existing = self.find_file_guid_by_project_path(project_path)
        if existing is None:
            existing = self.find_file_guid_by_real_path(real_path, source_tree)
        if existing is not None:
            return existing

        real_path, tree = _normalize_real_path(real_path, source_tree)
        info = file_type_info(real_path, is_folder)
        ref = PBXFileReference.new(self.new_guid())
        name = paths.get_filename(project_path)
        if name != real_path:
            ref.name = name
        ref.path = real_path
        ref.sourceTree = tree.value
        if info.explicit:
            ref.explicitFileType = info.file_type.value
            ref.includeInIndex = "0"
        else:
            ref.lastKnownFileType = info.file_type.value
            if info.file_type.is_text:
                ref.fileEncoding = "4"
        self.add_object(ref)

        group = self.create_source_group(paths.get_directory(project_path))
        group.children.add(ref.guid)
        self._invalidate()
        logger.debug("added %s as %s", real_path, project_path)
        return ref.guid

    def create_source_group(self, project_path: str) -> PBXGroup:
        """Find or create the group at project_path, creating missing parents."""
        group = self.object(self.project.mainGroup or "", PBXGroup)
        for segment in paths.split(project_path):
            child = self._child_group(group, segment)
            if child is None:
                child = self.add_object(PBXGroup.create(self.new_guid(), segment, segment))
                group.children.add(child.guid)
                self._invalidate()
            group = child
        return group

    def _child_group(self, group: PBXGroup, name: str) -> Optional[PBXGroup]:
        for child_guid in group.children:
            child = self.find_object(child_guid)
            if isinstance(child, GROUP_CLASSES) and child.display_name == name:
                return child
        return None

    def remove_file(self, file_guid: str) -> None:
        """Remove a file from the project, its groups and every build phase."""
        self.object(file_guid, PBXObject)
        parent = self._path_index().parent_by_guid.get(file_guid)
        for build_file in self.objects_of(PBXBuildFile):
            if build_file.fileRef == file_guid:
                self.remove_object(build_file.guid)
        self.remove_object(file_guid)
        if parent is not None:
            self._remove_group_if_empty(parent)

    def _remove_group_if_empty(self, group_guid: str) -> None:
        kept = (self.project.mainGroup, self.project.productRefGroup)
        while group_guid not in kept:
            group = self.find_object(group_guid)
            if not isinstance(group, PBXGroup) or len(group.children) > 0:
                return
            parent = self._path_index().parent_by_guid.get(group_guid)
            self.remove_object(group_guid)
            if parent is None:
                return
            group_guid = parent

    def remove_files_by_project_path_recursive(self, project_path: str) -> None:
        group_guid = self.find_group_guid_by_project_path(project_path)
        if group_guid is None:
            logger.debug("no group at %s, nothing to remove", project_path)
            return
        parent = self._path_index().parent_by_guid.get(group_guid)
        self._remove_group_recursive(group_guid)
        if parent is not None:
            self._remove_group_if_empty(parent)

    def _remove_group_recursive(self, group_guid: str) -> None:
        group = self.object(group_guid, PBXGroup)
        for child_guid in list(group.children):
            child = self.find_object(child_guid)
            if isinstance(child, GROUP_CLASSES):
                self._remove_group_recursive(child_guid)
            elif child is not None:
                for build_file in self.objects_of(PBXBuildFile):
                    if build_file.fileRef == child_guid:
                        self.remove_object(build_file.guid)
                self.remove_object(child_guid)
        if group_guid != self.project.mainGroup:
            self.remove_object(group_guid)

    # Build phases

    def _target(self, target_guid: str) -> PBXTarget:
        return self.object(target_guid, PBXTarget)

    def build_phases(self, target_guid: str) -> List[PBXBuildPhase]:
        phases = []
        for phase_guid in self._target(target_guid).buildPhases:
            phase = self.find_object(phase_guid)
            if isinstance(phase, PBXBuildPhase):
                phases.append(phase)
        return phases

    def get_build_phase(self, target_guid: str, cls: Type[PhaseT]) -> Optional[PhaseT]:
        for phase in self.build_phases(target_guid):
            if type(phase) is cls:
                return phase
        return None

    def _add_build_phase(self, target_guid: str, cls: Type[PhaseT]) -> str:
        existing = self.get_build_phase(target_guid, cls)
        if existing is not None:
            return existing.guid
        phase = self.add_object(cls.create(self.new_guid()))
        self._target(target_guid).buildPhases.add(phase.guid)
        return phase.guid

    def add_sources_build_phase(self, target_guid: str) -> str:
        return self._add_build_phase(target_guid, PBXSourcesBuildPhase)

    def add_resources_build_phase(self, target_guid: str) -> str:
        return self._add_build_phase(target_guid, PBXResourcesBuildPhase)

    def add_frameworks_build_phase(self, target_guid: str) -> str:
        return self._add_build_phase(target_guid, PBXFrameworksBuildPhase)

    def add_headers_build_phase(self, target_guid: str) -> str:
        return self._add_build_phase(target_guid, PBXHeadersBuildPhase)

    def add_copy_files_build_phase(
        self, target_guid: str, name: str, dst_path: str, subfolder_spec: str
    ) -> str:
        subfolder_spec = str(subfolder_spec)
        for phase in self.build_phases(target_guid):
            if (
                isinstance(phase, PBXCopyFilesBuildPhase)
                and phase.name == name
                and phase.dstPath == dst_path
                and phase.dstSubfolderSpec == subfolder_spec
            ):
                return phase.guid
        phase = PBXCopyFilesBuildPhase.create(self.new_guid())
        phase.name = name
        phase.dstPath = dst_path
        phase.dstSubfolderSpec = subfolder_spec
        self.add_object(phase)
        self._target(target_guid).buildPhases.add(phase.guid)
        return phase.guid

    def add_shell_script_build_phase(
        self, target_guid: str, name: str, shell_path: str, shell_script: str
    ) -> str:
        for phase in self.build_phases(target_guid):
            if (
                isinstance(phase, PBXShellScriptBuildPhase)
                and phase.name == name
                and phase.shellPath == shell_path
                and phase.shellScript == shell_script
            ):
                return phase.guid
        phase = PBXShellScriptBuildPhase.create(self.new_guid())
        phase.name = name
        phase.data.create_array("inputPaths")
        phase.data.create_array("outputPaths")
        phase.shellPath = shell_path
        phase.shellScript = shell_script
        self.add_object(phase)
        self._target(target_guid).buildPhases.add(phase.guid)
        return phase.guid

    # Building files

    def _build_category(self, file_view: PBXObject) -> BuildCategory:
        if isinstance(file_view, PBXFileReference) and file_view.is_folder_reference:
            return BuildCategory.RESOURCE
        path = file_view.data.get_string("path") or file_view.data.get_string("name") or ""
        if paths.get_extension(path):
            return file_type_info(path).category
        file_type = file_view.data.get_string("lastKnownFileType") or file_view.data.get_string(
            "explicitFileType"
        ) or file_view.data.get_string("fileType")
        return category_for_file_type(file_type)

    def _phase_for_category(self, target_guid: str, category: BuildCategory) -> PBXBuildPhase:
        if category == BuildCategory.COPY_FILES:
            for phase in self.build_phases(target_guid):
                if (
                    isinstance(phase, PBXCopyFilesBuildPhase)
                    and phase.dstSubfolderSpec == str(DstSubfolderSpec.PLUGINS.value)
                ):
                    return phase
            phase_guid = self.add_copy_files_build_phase(
                target_guid, EMBED_APP_EXTENSIONS, "", str(DstSubfolderSpec.PLUGINS.value)
            )
        else:
            phase_guid = self._add_build_phase(target_guid, _PHASE_FOR_CATEGORY[category])
        return self.object(phase_guid, PBXBuildPhase)

    def build_file_for(self, target_guid: str, file_guid: str) -> Optional[PBXBuildFile]:
        """The build file through which target builds file, if any."""
        for phase in self.build_phases(target_guid):
            for build_guid in phase.files:
                build_file = self.find_object(build_guid)
                if isinstance(build_file, PBXBuildFile) and build_file.fileRef == file_guid:
                    return build_file
        return None

    def _add_build_file(
        self,
        target_guid: str,
        file_guid: str,
        phase: Optional[PBXBuildPhase] = None,
        compile_flags: Optional[str] = None,
        weak: bool = False,
    ) -> Optional[str]:
        file_view = self.object(file_guid, PBXObject)
        if phase is None:
            category = self._build_category(file_view)
            if category == BuildCategory.NOT_BUILDABLE:
                logger.debug("%s is not buildable, not adding it to a target", file_guid)
                return None
            phase = self._phase_for_category(target_guid, category)
        for build_guid in phase.files:
            build_file = self.find_object(build_guid)
            if isinstance(build_file, PBXBuildFile) and build_file.fileRef == file_guid:
                return build_guid
        build_file = self.add_object(
            PBXBuildFile.create(self.new_guid(), file_guid, compile_flags, weak)
        )
        phase.files.add(build_file.guid)
        return build_file.guid

    def add_file_to_build(self, target_guid: str, file_guid: str) -> Optional[str]:
        return self._add_build_file(target_guid, file_guid)

    def add_file_to_build_with_flags(
        self, target_guid: str, file_guid: str, compile_flags: str
    ) -> Optional[str]:
        return self._add_build_file(target_guid, file_guid, compile_flags=compile_flags)

    def add_file_to_build_section(
        self, target_guid: str, phase_guid: str, file_guid: str
    ) -> Optional[str]:
        phase = self.object(phase_guid, PBXBuildPhase)
        if phase_guid not in self._target(target_guid).buildPhases:
            raise NotFoundError(f"{phase_guid} is not a build phase of {target_guid}")
        return self._add_build_file(target_guid, file_guid, phase=phase)

    def remove_file_from_build(self, target_guid: str, file_guid: str) -> None:
        for phase in self.build_phases(target_guid):
            for build_guid in list(phase.files):
                build_file = self.find_object(build_guid)
                if isinstance(build_file, PBXBuildFile) and build_file.fileRef == file_guid:
                    self.remove_object(build_guid)

    def set_compile_flags_for_file(
        self, target_guid: str, file_guid: str, compile_flags: Optional[Iterable[str]]
    ) -> None:
        build_file = self.build_file_for(target_guid, file_guid)
        if build_file is None:
            logger.warning("%s is not built by %s, flags not set", file_guid, target_guid)
            return
        build_file.compiler_flags = " ".join(compile_flags) if compile_flags else None

    def get_compile_flags_for_file(self, target_guid: str, file_guid: str) -> Optional[List[str]]:
        build_file = self.build_file_for(target_guid, file_guid)
        if build_file is None:
            return None
        return (build_file.compiler_flags or "").split()

    # Frameworks

    @staticmethod
    def _framework_real_path(framework: str) -> str:
        if paths.get_extension(framework) in (".tbd", ".dylib"):
            return "usr/lib/" + framework
        return "System/Library/Frameworks/" + framework

    def _framework_guid(self, framework: str) -> Optional[str]:
        return self.find_file_guid_by_real_path(
            self._framework_real_path(framework), SourceTree.SDKROOT
        )

    def add_framework_to_project(self, target_guid: str, framework: str, weak: bool) -> None:
        self._target(target_guid)
        file_guid = self.add_file(
            self._framework_real_path(framework), "Frameworks/" + framework, SourceTree.SDKROOT
        )
        phase = self._phase_for_category(target_guid, BuildCategory.FRAMEWORK)
        self._add_build_file(target_guid, file_guid, phase=phase, weak=weak)

    def remove_framework_from_project(self, target_guid: str, framework: str) -> None:
        file_guid = self._framework_guid(framework)
        if file_guid is not None:
            self.remove_file_from_build(target_guid, file_guid)

    def contains_framework(self, target_guid: str, framework: str) -> bool:
        file_guid = self._framework_guid(framework)
        return file_guid is not None and self.build_file_for(target_guid, file_guid) is not None

    # Asset tags

    def _known_asset_tags(self, create: bool = False) -> Optional[PBXArray]:
        if create:
            return self.project.attributes.create_array("knownAssetTags")
        attributes = self.project.data.get_dict("attributes")
        return attributes.get_array("knownAssetTags") if attributes is not None else None

    def add_asset_tag_for_file(self, target_guid: str, file_guid: str, tag: str) -> None:
        build_file = self.build_file_for(target_guid, file_guid)
        if build_file is None:
            raise NotFoundError(f"{file_guid} is not built by {target_guid}")
        build_file.add_asset_tag(tag)
        known = self._known_asset_tags(create=True)
        if not known.contains_string(tag):
            known.add_string(tag)

    def remove_asset_tag_for_file(self, target_guid: str, file_guid: str, tag: str) -> None:
        build_file = self.build_file_for(target_guid, file_guid)
        if build_file is not None:
            build_file.remove_asset_tag(tag)

    def add_asset_tag_to_default_install(self, target_guid: str, tag: str) -> None:
        known = self._known_asset_tags()
        if known is None or not known.contains_string(tag):
            logger.warning("asset tag %s is not used by any file, not installing it", tag)
            return
        self.update_build_property(target_guid, "ON_DEMAND_RESOURCES_INITIAL_INSTALL_TAGS", [tag], [tag])

    def remove_asset_tag_from_default_install(self, target_guid: str, tag: str) -> None:
        self.update_build_property(target_guid, "ON_DEMAND_RESOURCES_INITIAL_INSTALL_TAGS", None, [tag])

    def remove_asset_tag(self, tag: str) -> None:
        """Remove a tag from every file, every configuration and the known tag list."""
        for build_file in self.objects_of(PBXBuildFile):
            build_file.remove_asset_tag(tag)
        for config in self.objects_of(XCBuildConfiguration):
            build_settings.remove_value(
                config.build_settings, "ON_DEMAND_RESOURCES_INITIAL_INSTALL_TAGS", tag
            )
        known = self._known_asset_tags()
        if known is not None:
            known.remove_string(tag)

    # Targets

    def targets(self) -> List[PBXTarget]:
        result = []
        for guid in self.project.targets:
            target = self.find_object(guid)
            if isinstance(target, PBXTarget):
                result.append(target)
        return result

    def target_names(self) -> List[str]:
        return [t.name or "" for t in self.targets()]

    def target_guid_by_name(self, name: str) -> Optional[str]:
        for target in self.targets():
            if target.name == name:
                return target.guid
        return None

    def get_target_product_file_ref(self, target_guid: str) -> Optional[str]:
        target = self._target(target_guid)
        return target.productReference if isinstance(target, PBXNativeTarget) else None

    def target_attributes(self, target_guid: str) -> PBXDict:
        """The target's entry in the project's TargetAttributes, created on demand."""
        self._target(target_guid)
        return self.project.attributes.create_dict("TargetAttributes").create_dict(target_guid)

    def add_target(self, name: str, extension: str, product_type: str) -> str:
        """
        Add a native target with an empty configuration for every project configuration.

        Args:
            name: Target and product name.
            extension: Product extension, e.g. ".app" or "app".
            product_type: Product type identifier, see ProductType.

        Returns:
            The identifier of the new target.
        """
        config_list = self.add_object(XCConfigurationList.create(self.new_guid()))

        full_name = name + "." + extension.lstrip(".")
        products_path = self.project_path_of(self.project.productRefGroup or "") or "Products"
        product_guid = self.add_file(
            full_name, paths.combine(products_path, full_name), SourceTree.BUILT_PRODUCTS_DIR
        )
        product = self.object(product_guid, PBXFileReference)
        if product.explicitFileType is None:
            product.explicitFileType = product.lastKnownFileType
            product.lastKnownFileType = None
            product.fileEncoding = None
        product.includeInIndex = "0"

        target = self.add_object(
            PBXNativeTarget.create(self.new_guid(), name, product_guid, product_type, config_list.guid)
        )
        self.project.targets.add(target.guid)
        for config_name in self.build_config_names():
            self.add_build_config_for_target(target.guid, config_name)
        logger.debug("added target %s", name)
        return target.guid

    def remove_target(self, target_guid: str) -> None:
        """Remove a target with its phases, configurations, dependencies and product."""
        target = self._target(target_guid)
        for phase in self.build_phases(target_guid):
            for build_guid in list(phase.files):
                if self.find_object(build_guid) is not None:
                    self.remove_object(build_guid)
            self.remove_object(phase.guid)

        config_list = self.find_object(target.buildConfigurationList or "")
        if isinstance(config_list, XCConfigurationList):
            for config_guid in list(config_list.buildConfigurations):
                self.remove_object(config_guid)
            self.remove_object(config_list.guid)

        for dependency_guid in list(target.dependencies):
            self.remove_dependency(dependency_guid)
        for dependency in self.objects_of(PBXTargetDependency):
            if dependency.target == target_guid:
                self.remove_dependency(dependency.guid)

        product_guid = self.get_target_product_file_ref(target_guid)
        if product_guid is not None and self.find_object(product_guid) is not None:
            self.remove_file(product_guid)

        attributes = self.project.data.get_dict("attributes")
        target_attributes = attributes.get_dict("TargetAttributes") if attributes is not None else None
        if target_attributes is not None:
            target_attributes.remove(target_guid)

        self.remove_object(target_guid)
        logger.debug("removed target %s", target.name)

    def remove_dependency(self, dependency_guid: str) -> None:
        """Remove a target dependency and its container proxy."""
        dependency = self.find_object(dependency_guid)
        if not isinstance(dependency, PBXTargetDependency):
            return
        proxy_guid = dependency.targetProxy
        self.remove_object(dependency_guid)
        if proxy_guid and self.find_object(proxy_guid) is not None:
            self.remove_object(proxy_guid)

    # Dependencies

    def dependencies_of(self, target_guid: str) -> List[PBXTargetDependency]:
        result = []
        for dependency_guid in self._target(target_guid).dependencies:
            dependency = self.find_object(dependency_guid)
            if isinstance(dependency, PBXTargetDependency):
                result.append(dependency)
        return result

    def add_target_dependency(self, target_guid: str, dependency_guid: str) -> str:
        target = self._target(target_guid)
        dependency_target = self._target(dependency_guid)
        for existing_guid in target.dependencies:
            existing = self.find_object(existing_guid)
            if isinstance(existing, PBXTargetDependency) and existing.target == dependency_guid:
                return existing_guid

        proxy = self.add_object(
            PBXContainerItemProxy.create(
                self.new_guid(),
                self.project_guid(),
                ProxyType.TARGET_DEPENDENCY,
                dependency_guid,
                dependency_target.name or "",
            )
        )
        dependency = self.add_object(
            PBXTargetDependency.create(self.new_guid(), dependency_guid, proxy.guid)
        )
        target.dependencies.add(dependency.guid)
        return dependency.guid

    def add_external_project_dependency(
        self,
        path: str,
        project_path: str,
        source_tree: SourceTree = SourceTree.SOURCE_ROOT,
    ) -> str:
        """
        Reference another .xcodeproj so its products can be linked.

        Args:
            path: Location of the .xcodeproj, relative to source_tree.
            project_path: Location in the project navigator.
            source_tree: What path is relative to.

        Returns:
            The identifier of the file reference to the external project.
        """
        existing = self.find_file_guid_by_real_path(path, source_tree)
        if existing is not None and any(
            ref == existing for _, ref in self.project.project_references()
        ):
            return existing

        file_guid = self.add_file(path, project_path, source_tree)
        # Every referenced project gets its own products group outside the group tree
        product_group = self.add_object(PBXGroup.create(self.new_guid(), "Products", None))
        self.project.add_project_reference(product_group.guid, file_guid)
        return file_guid

    def add_external_library_dependency(
        self,
        target_guid: str,
        filename: str,
        remote_guid: str,
        project_path: str,
        remote_info: str,
    ) -> str:
        """Link a library built by a referenced external project into a target."""
        self._target(target_guid)
        project_guid = self.find_file_guid_by_real_path(project_path)
        if project_guid is None:
            raise NotFoundError(f"no external project at {project_path!r}")
        product_group_guid = None
        for product_group, project_ref in self.project.project_references():
            if project_ref == project_guid:
                product_group_guid = product_group
                break
        if product_group_guid is None:
            raise NotFoundError(f"{project_path!r} is not a referenced project")
        product_group = self.object(product_group_guid, PBXGroup)

        info = file_type_info(filename)
        if info.category == BuildCategory.NOT_BUILDABLE:
            raise ValueError(f"{filename!r} can not be linked")

        proxy = self.add_object(
            PBXContainerItemProxy.create(
                self.new_guid(), project_guid, ProxyType.PRODUCT_REFERENCE, remote_guid, remote_info
            )
        )
        library = self.add_object(
            PBXReferenceProxy.create(
                self.new_guid(), filename, info.file_type.value, proxy.guid, SourceTree.BUILT_PRODUCTS_DIR
            )
        )
        self._add_build_file(target_guid, library.guid)
        product_group.children.add(library.guid)
        return library.guid

    # Build configurations

    def _config_list(self, owner_guid: str) -> XCConfigurationList:
        owner = self.find_object(owner_guid)
        if not isinstance(owner, (PBXTarget, PBXProject)):
            raise NotFoundError(f"{owner_guid} is not a target or project")
        return self.object(owner.buildConfigurationList or "", XCConfigurationList)

    def _configs(self, config_list: XCConfigurationList) -> List[XCBuildConfiguration]:
        result = []
        for config_guid in config_list.buildConfigurations:
            config = self.find_object(config_guid)
            if isinstance(config, XCBuildConfiguration):
                result.append(config)
        return result

    def _configs_for(self, owners: StrOrIterable) -> List[XCBuildConfiguration]:
        result = []
        for owner_guid in str_iter(owners):
            owner = self.find_object(owner_guid)
            if isinstance(owner, XCBuildConfiguration):
                result.append(owner)
            else:
                result.extend(self._configs(self._config_list(owner_guid)))
        return result

    def build_config_names(self) -> List[str]:
        return [c.name or "" for c in self._configs(self._config_list(self.project_guid()))]

    def build_config_by_name(self, owner_guid: str, name: str) -> Optional[str]:
        for config in self._configs(self._config_list(owner_guid)):
            if config.name == name:
                return config.guid
        return None

    def add_build_config_for_target(self, target_guid: str, name: str) -> str:
        existing = self.build_config_by_name(target_guid, name)
        if existing is not None:
            return existing
        config = self.add_object(XCBuildConfiguration.create(self.new_guid(), name))
        self._config_list(target_guid).buildConfigurations.add(config.guid)
        return config.guid

    def add_build_config(self, name: str) -> None:
        """Add a configuration to the project and to every target."""
        self.add_build_config_for_target(self.project_guid(), name)
        for target in self.targets():
            self.add_build_config_for_target(target.guid, name)

    def remove_build_config(self, name: str) -> None:
        for owner_guid in [self.project_guid()] + [t.guid for t in self.targets()]:
            config_guid = self.build_config_by_name(owner_guid, name)
            if config_guid is not None:
                self.remove_object(config_guid)

    # Build settings

    def set_build_property(self, owners: StrOrIterable, key: str, value: str) -> None:
        for config in self._configs_for(owners):
            build_settings.set_value(config.build_settings, key, value)

    def add_build_property(self, owners: StrOrIterable, key: str, value: str) -> None:
        for config in self._configs_for(owners):
            build_settings.add_value(config.build_settings, key, value)

    def update_build_property(
        self,
        owners: StrOrIterable,
        key: str,
        add_values: Optional[Iterable[str]],
        remove_values: Optional[Iterable[str]],
    ) -> None:
        add_values = list(add_values) if add_values is not None else None
        remove_values = list(remove_values) if remove_values is not None else None
        for config in self._configs_for(owners):
            build_settings.update_values(config.build_settings, key, add_values, remove_values)

    def remove_build_property(self, owners: StrOrIterable, key: str) -> None:
        for config in self._configs_for(owners):
            build_settings.remove_key(config.build_settings, key)

    def remove_build_property_value(self, owners: StrOrIterable, key: str, value: str) -> None:
        for config in self._configs_for(owners):
            build_settings.remove_value(config.build_settings, key, value)

    def get_build_property_for_config(self, config_guid: str, key: str) -> Optional[str]:
        config = self.object(config_guid, XCBuildConfiguration)
        return build_settings.get_value_string(config.build_settings, key)

    def get_build_property_for_any_config(self, owner_guid: str, key: str) -> Optional[str]:
        for config in self._configs_for(owner_guid):
            value = build_settings.get_value_string(config.build_settings, key)
            if value is not None:
                return value
        return None
