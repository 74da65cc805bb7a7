"""
Xcode project file formatter.

This module turns the element tree of a project back into .pbxproj text laid
out exactly the way Xcode writes it: tab indentation, ``isa`` first and the
remaining keys sorted, the objects mapping split into per-class sections, and
single-line entries for build files and file references. Identifiers in the
positions Xcode annotates get a ``/* comment */`` computed from the graph.
"""

from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional

from pbxkit.xcode.elements import PBXArray, PBXDict, PBXElement, PBXString
from pbxkit.xcode.model import (
    COMPACT_CLASSES,
    PBXBuildFile,
    PBXBuildPhase,
    PBXContainerItemProxy,
    PBXProject,
    PBXTarget,
    PBXTargetDependency,
    XCConfigurationList,
    view_for,
)
from pbxkit.xcode.quoting import quote_string

if TYPE_CHECKING:
    from pbxkit.xcode.project import XcodeProject


HEADER = "// !$*UTF8*$!"

_TARGET_KEYS = frozenset(
    {
        "buildPhases/*",
        "buildRules/*",
        "dependencies/*",
        "productReference",
        "buildConfigurationList",
    }
)
_PHASE_KEYS = frozenset({"files/*"})
_GROUP_KEYS = frozenset({"children/*"})

# Key paths, per object class, whose identifier values are annotated.
# "*" stands for every element of an array.
COMMENTED_KEYS: Dict[str, FrozenSet[str]] = {
    "PBXBuildFile": frozenset({"fileRef"}),
    "PBXGroup": _GROUP_KEYS,
    "PBXVariantGroup": _GROUP_KEYS,
    "XCVersionGroup": _GROUP_KEYS | {"currentVersion"},
    "PBXNativeTarget": _TARGET_KEYS,
    "PBXAggregateTarget": _TARGET_KEYS,
    "PBXLegacyTarget": _TARGET_KEYS,
    "PBXProject": frozenset(
        {
            "mainGroup",
            "productRefGroup",
            "buildConfigurationList",
            "targets/*",
            "projectReferences/*/ProductGroup",
            "projectReferences/*/ProjectRef",
        }
    ),
    "XCConfigurationList": frozenset({"buildConfigurations/*"}),
    "PBXSourcesBuildPhase": _PHASE_KEYS,
    "PBXResourcesBuildPhase": _PHASE_KEYS,
    "PBXFrameworksBuildPhase": _PHASE_KEYS,
    "PBXHeadersBuildPhase": _PHASE_KEYS,
    "PBXCopyFilesBuildPhase": _PHASE_KEYS,
    "PBXShellScriptBuildPhase": _PHASE_KEYS,
    "PBXContainerItemProxy": frozenset({"containerPortal"}),
    "PBXReferenceProxy": frozenset({"remoteRef"}),
    "PBXTargetDependency": frozenset({"target", "targetProxy"}),
    "XCBuildConfiguration": frozenset({"baseConfigurationReference"}),
}

ROOT_COMMENTED_KEYS = frozenset({"rootObject"})


def compute_comments(objects: PBXDict, project_name: str) -> Dict[str, str]:
    """
    Compute the annotation for every object that has one.

    Args:
        objects: The document's objects mapping.
        project_name: Name used for the project's configuration list.

    Returns:
        A mapping from identifier to comment text.
    """
    views = {
        guid: view_for(guid, data)
        for guid, data in objects.items()
        if isinstance(data, PBXDict)
    }
    comments: Dict[str, str] = {}

    for guid, view in views.items():
        name = view.display_name
        if name:
            comments[guid] = name

    phase_of_build_file: Dict[str, str] = {}
    for view in views.values():
        if isinstance(view, PBXBuildPhase):
            for build_file in view.files:
                phase_of_build_file.setdefault(build_file, view.display_name or "")

    for guid, view in views.items():
        if isinstance(view, PBXBuildFile):
            file_name = comments.get(view.fileRef or "")
            phase = phase_of_build_file.get(guid)
            if file_name and phase:
                comments[guid] = f"{file_name} in {phase}"
            elif file_name:
                comments[guid] = file_name
        elif isinstance(view, (PBXTarget, PBXProject)):
            config_list = view.buildConfigurationList
            owner = project_name if isinstance(view, PBXProject) else view.name
            if config_list and isinstance(views.get(config_list), XCConfigurationList):
                comments[config_list] = (
                    f'Build configuration list for {view.isa} "{owner or ""}"'
                )
        elif isinstance(view, PBXTargetDependency):
            comments[guid] = PBXTargetDependency.isa
        elif isinstance(view, PBXContainerItemProxy):
            comments[guid] = PBXContainerItemProxy.isa

    return comments


def format_xcode_project(project: "XcodeProject") -> str:
    """
    Convert a project to its .pbxproj text.

    Args:
        project: The project whose element tree should be written.

    Returns:
        The document text, ending with a newline.
    """
    root = project.root
    objects = root.get_dict("objects") or PBXDict()
    comments = compute_comments(objects, project.name)
    formatter = _Formatter(comments)
    return HEADER + "\n" + formatter.format_root(root) + "\n"


def sorted_keys(value_dict: PBXDict) -> List[str]:
    """``isa`` first, everything else in ordinal order."""
    keys = sorted(k for k in value_dict.keys() if k != "isa")
    if "isa" in value_dict:
        keys.insert(0, "isa")
    return keys


def _clean_comment(comment: str) -> str:
    return comment.replace("*/", "* /")


def _child_path(path: str, key: str) -> str:
    return f"{path}/{key}" if path else key


class _Formatter:
    def __init__(self, comments: Dict[str, str]):
        self.comments = comments

    def comment_for(self, value: PBXString, commented: bool) -> Optional[str]:
        if commented and value.value in self.comments:
            return self.comments[value.value]
        return value.comment

    def format_root(self, root: PBXDict) -> str:
        result = "{\n"
        for key in sorted_keys(root):
            value = root[key]
            if key == "objects" and isinstance(value, PBXDict):
                formatted = self.format_objects(value)
            else:
                formatted = self.format_value(
                    value, 1, key, commented=key in ROOT_COMMENTED_KEYS
                )
            result += f"\t{quote_string(key)} = {formatted};\n"
        return result + "}"

    def format_objects(self, objects: PBXDict) -> str:
        """
        Format the objects mapping as per-class sections.

        Args:
            objects: Identifier to object dictionary mapping.

        Returns:
            The mapping text, starting at the opening brace.
        """
        sections: Dict[str, List[str]] = {}
        for guid in objects.keys():
            data = objects[guid]
            isa = data.get_string("isa") if isinstance(data, PBXDict) else None
            sections.setdefault(isa or "", []).append(guid)

        result = "{\n"
        for isa in sorted(sections):
            if isa:
                result += f"\n/* Begin {isa} section */\n"
            for guid in sorted(sections[isa]):
                result += "\t\t" + self.format_object(guid, objects, isa) + "\n"
            if isa:
                result += f"/* End {isa} section */\n"
        return result + "\t}"

    def format_object(self, guid: str, objects: PBXDict, isa: str) -> str:
        data = objects[guid]
        comment = self.comments.get(guid) or objects.key_comments.get(guid)
        key = quote_string(guid)
        if comment:
            key += f" /* {_clean_comment(comment)} */"
        commented = COMMENTED_KEYS.get(isa, frozenset())
        if isa in COMPACT_CLASSES and isinstance(data, PBXDict):
            formatted = self.format_compact_dict(data, "", commented)
        else:
            formatted = self.format_value(data, 2, guid, "", commented)
        return f"{key} = {formatted};"

    def format_value(
        self,
        value: PBXElement,
        indent_level: int,
        key: Optional[str] = None,
        path: str = "",
        commented_paths: FrozenSet[str] = frozenset(),
        commented: bool = False,
    ) -> str:
        """
        Format a value based on its type.

        Args:
            value: The element to format.
            indent_level: The current indentation level.
            key: The dictionary key the value is stored under, for quoting.
            path: Key path of the value inside its object.
            commented_paths: Key paths of the enclosing object that get comments.
            commented: Whether this string value gets a comment.

        Returns:
            A string representing the formatted value.
        """
        if isinstance(value, PBXString):
            return self.format_string(value, key, commented)
        if isinstance(value, PBXDict):
            return self.format_dict(value, indent_level, path, commented_paths)
        if isinstance(value, PBXArray):
            return self.format_list(value, indent_level, path, commented_paths)
        raise TypeError(f"Unsupported type: {type(value).__name__} for value: {value}")

    def format_string(self, value: PBXString, key: Optional[str], commented: bool) -> str:
        text = quote_string(value.value, key, force=value.quoted)
        comment = self.comment_for(value, commented)
        if comment:
            text += f" /* {_clean_comment(comment)} */"
        return text

    def format_dict(
        self,
        value_dict: PBXDict,
        indent_level: int,
        path: str,
        commented_paths: FrozenSet[str],
    ) -> str:
        indent = "\t" * indent_level
        inner_indent = "\t" * (indent_level + 1)

        # Empty dictionaries keep their braces on separate lines, as in Xcode
        if len(value_dict) == 0:
            return "{\n" + indent + "}"

        result = "{\n"
        for key in sorted_keys(value_dict):
            child_path = _child_path(path, key)
            formatted = self.format_value(
                value_dict[key],
                indent_level + 1,
                key,
                child_path,
                commented_paths,
                commented=child_path in commented_paths,
            )
            result += f"{inner_indent}{self.format_key(value_dict, key)} = {formatted};\n"
        return result + f"{indent}}}"

    def format_list(
        self,
        value_list: PBXArray,
        indent_level: int,
        path: str,
        commented_paths: FrozenSet[str],
    ) -> str:
        indent = "\t" * indent_level
        inner_indent = "\t" * (indent_level + 1)
        child_path = _child_path(path, "*")

        if len(value_list) == 0:
            return "(\n" + indent + ")"

        result = "(\n"
        for item in value_list:
            formatted = self.format_value(
                item,
                indent_level + 1,
                None,
                child_path,
                commented_paths,
                commented=child_path in commented_paths,
            )
            result += f"{inner_indent}{formatted},\n"
        return result + f"{indent})"

    def format_key(self, value_dict: PBXDict, key: str) -> str:
        text = quote_string(key)
        comment = value_dict.key_comments.get(key)
        if comment:
            text += f" /* {_clean_comment(comment)} */"
        return text

    def format_compact_dict(
        self, value_dict: PBXDict, path: str, commented_paths: FrozenSet[str]
    ) -> str:
        result = "{"
        for key in sorted_keys(value_dict):
            child_path = _child_path(path, key)
            formatted = self.format_compact_value(
                value_dict[key], key, child_path, commented_paths
            )
            result += f"{self.format_key(value_dict, key)} = {formatted}; "
        return result + "}"

    def format_compact_value(
        self,
        value: PBXElement,
        key: Optional[str],
        path: str,
        commented_paths: FrozenSet[str],
    ) -> str:
        if isinstance(value, PBXString):
            return self.format_string(value, key, path in commented_paths)
        if isinstance(value, PBXDict):
            return self.format_compact_dict(value, path, commented_paths)
        if isinstance(value, PBXArray):
            child_path = _child_path(path, "*")
            items = "".join(
                self.format_compact_value(item, None, child_path, commented_paths) + ", "
                for item in value
            )
            return f"({items})"
        raise TypeError(f"Unsupported type: {type(value).__name__} for value: {value}")
