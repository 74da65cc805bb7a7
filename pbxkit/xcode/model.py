# Xcode project file model.
#
# This module defines typed views over the objects stored in a parsed .pbxproj
# tree. A view is just an identifier plus the object's own PBXDict; reading or
# assigning a field goes straight to the tree, so nothing can drift between
# the typed model and what gets written back out. Objects refer to each other
# only by identifier, resolved through the project's single objects mapping.

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from pbxkit.xcode.elements import PBXArray, PBXDict, PBXString
from pbxkit.xcode.guid import XcodeID


# Source Tree values used in PBXFileReference and PBXGroup
class SourceTree(Enum):
    ABSOLUTE = "<absolute>"
    GROUP = "<group>"
    SOURCE_ROOT = "SOURCE_ROOT"
    BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"
    DEVELOPER_DIR = "DEVELOPER_DIR"
    SDKROOT = "SDKROOT"


# Destination subfolder specifications used in PBXCopyFilesBuildPhase
class DstSubfolderSpec(Enum):
    ABSOLUTE_PATH = 0  # Absolute path
    WRAPPER = 1  # App bundle
    EXECUTABLES = 6  # Executables
    RESOURCES = 7  # Resources
    FRAMEWORKS = 10  # Frameworks
    SHARED_FRAMEWORKS = 11  # Shared Frameworks
    SHARED_SUPPORT = 12  # Shared Support
    PLUGINS = 13  # Plug-ins and app extensions
    JAVA_RESOURCES = 15  # Java Resources
    PRODUCTS_DIRECTORY = 16  # Products Directory, used for watch content


# Product types used in PBXNativeTarget
class ProductType(Enum):
    APPLICATION = "com.apple.product-type.application"
    FRAMEWORK = "com.apple.product-type.framework"
    STATIC_LIBRARY = "com.apple.product-type.library.static"
    DYNAMIC_LIBRARY = "com.apple.product-type.library.dynamic"
    BUNDLE = "com.apple.product-type.bundle"
    TOOL = "com.apple.product-type.tool"
    UNIT_TEST_BUNDLE = "com.apple.product-type.bundle.unit-test"
    APP_EXTENSION = "com.apple.product-type.app-extension"
    WATCH2_APP = "com.apple.product-type.application.watchapp2"
    WATCH2_EXTENSION = "com.apple.product-type.watchkit2-extension"


# Boolean-like values used in build settings
class YesNo(Enum):
    YES = "YES"
    NO = "NO"
    YES_ERROR = "YES_ERROR"
    YES_AGGRESSIVE = "YES_AGGRESSIVE"


class ProxyType(Enum):
    TARGET_DEPENDENCY = 1  # For target dependencies
    PRODUCT_REFERENCE = 2  # For product references

    def to_xcode(self) -> str:
        return str(self.value)


DEFAULT_BUILD_ACTION_MASK = "2147483647"


class _StringField:
    def __init__(self, key: str):
        self.key = key

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return obj.data.get_string(self.key)

    def __set__(self, obj, value: Optional[str]) -> None:
        obj.data.set_string(self.key, value)


class _ListField:
    def __init__(self, key: str):
        self.key = key

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        return GUIDList(obj.data, self.key)


class GUIDList:
    """Identifier list stored under one key of an object.

    The underlying array is only created on the first insertion so that merely
    reading a missing list never changes the document.
    """

    def __init__(self, data: PBXDict, key: str):
        self.data = data
        self.key = key

    def _array(self) -> Optional[PBXArray]:
        return self.data.get_array(self.key)

    def __iter__(self) -> Iterator[str]:
        array = self._array()
        return iter(array.strings() if array is not None else [])

    def __len__(self) -> int:
        array = self._array()
        return len(array.strings()) if array is not None else 0

    def __contains__(self, guid: str) -> bool:
        array = self._array()
        return array is not None and array.contains_string(guid)

    def exists(self) -> bool:
        return self._array() is not None

    def add(self, guid: str) -> None:
        array = self.data.create_array(self.key)
        if not array.contains_string(guid):
            array.add_string(guid)

    def remove(self, guid: str) -> bool:
        array = self._array()
        if array is None:
            return False
        return array.remove_string(guid) > 0

    def replace(self, guids: List[str]) -> None:
        array = self.data.create_array(self.key)
        by_value = {v.value: v for v in array.values if isinstance(v, PBXString)}
        array.values = [by_value.get(g, PBXString(g)) for g in guids]


# Base class for all Xcode objects
@dataclass(eq=False)
class PBXObject:
    isa: ClassVar[str] = ""
    # Keys holding one identifier / a list of identifiers of other objects in
    # this document. Used by the repair pass and when detaching removed objects.
    reference_keys: ClassVar[Tuple[str, ...]] = ()
    reference_list_keys: ClassVar[Tuple[str, ...]] = ()

    guid: XcodeID
    data: PBXDict

    @classmethod
    def new(cls: Type["ObjectT"], guid: str) -> "ObjectT":
        data = PBXDict()
        data.set_string("isa", cls.isa)
        return cls(XcodeID(guid), data)

    @property
    def display_name(self) -> Optional[str]:
        return None

    def references(self) -> Iterator[Tuple[str, str]]:
        """Yield (key, identifier) for every reference this object holds."""
        for key in self.reference_keys:
            value = self.data.get_string(key)
            if value is not None:
                yield key, value
        for key in self.reference_list_keys:
            for value in GUIDList(self.data, key):
                yield key, value

    def detach(self, guid: str) -> bool:
        """Drop every reference to guid held by this object."""
        changed = False
        for key in self.reference_keys:
            if self.data.get_string(key) == guid:
                self.data.remove(key)
                changed = True
        for key in self.reference_list_keys:
            if GUIDList(self.data, key).remove(guid):
                changed = True
        return changed


ObjectT = TypeVar("ObjectT", bound=PBXObject)


class UnknownObject(PBXObject):
    pass


class PBXBuildFile(PBXObject):
    isa = "PBXBuildFile"
    reference_keys = ("fileRef",)

    fileRef = _StringField("fileRef")
    productRef = _StringField("productRef")

    @classmethod
    def create(
        cls,
        guid: str,
        file_ref: str,
        compile_flags: Optional[str] = None,
        weak: bool = False,
    ) -> "PBXBuildFile":
        build_file = cls.new(guid)
        build_file.fileRef = file_ref
        if compile_flags:
            build_file.compiler_flags = compile_flags
        if weak:
            build_file.add_attribute("Weak")
        return build_file

    @property
    def settings(self) -> Optional[PBXDict]:
        return self.data.get_dict("settings")

    def _settings_list(self, key: str) -> List[str]:
        settings = self.settings
        if settings is None:
            return []
        array = settings.get_array(key)
        return array.strings() if array is not None else []

    def _add_to_settings_list(self, key: str, value: str) -> None:
        array = self.data.create_dict("settings").create_array(key)
        if not array.contains_string(value):
            array.add_string(value)

    def _remove_from_settings_list(self, key: str, value: str) -> bool:
        settings = self.settings
        if settings is None:
            return False
        array = settings.get_array(key)
        if array is None or not array.remove_string(value):
            return False
        if len(array) == 0:
            settings.remove(key)
        self._drop_empty_settings()
        return True

    def _drop_empty_settings(self) -> None:
        settings = self.settings
        if settings is not None and len(settings) == 0:
            self.data.remove("settings")

    @property
    def compiler_flags(self) -> Optional[str]:
        settings = self.settings
        return settings.get_string("COMPILER_FLAGS") if settings is not None else None

    @compiler_flags.setter
    def compiler_flags(self, flags: Optional[str]) -> None:
        if flags:
            self.data.create_dict("settings").set_string("COMPILER_FLAGS", flags)
        elif self.settings is not None:
            self.settings.remove("COMPILER_FLAGS")
            self._drop_empty_settings()

    @property
    def attributes(self) -> List[str]:
        return self._settings_list("ATTRIBUTES")

    def add_attribute(self, attribute: str) -> None:
        self._add_to_settings_list("ATTRIBUTES", attribute)

    def remove_attribute(self, attribute: str) -> bool:
        return self._remove_from_settings_list("ATTRIBUTES", attribute)

    @property
    def weak(self) -> bool:
        return "Weak" in self.attributes

    @property
    def asset_tags(self) -> List[str]:
        return self._settings_list("ASSET_TAGS")

    def add_asset_tag(self, tag: str) -> None:
        self._add_to_settings_list("ASSET_TAGS", tag)

    def remove_asset_tag(self, tag: str) -> bool:
        return self._remove_from_settings_list("ASSET_TAGS", tag)


class PBXFileReference(PBXObject):
    isa = "PBXFileReference"

    name = _StringField("name")
    path = _StringField("path")
    sourceTree = _StringField("sourceTree")
    lastKnownFileType = _StringField("lastKnownFileType")
    explicitFileType = _StringField("explicitFileType")
    includeInIndex = _StringField("includeInIndex")
    fileEncoding = _StringField("fileEncoding")

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.path

    @property
    def file_type(self) -> Optional[str]:
        return self.explicitFileType or self.lastKnownFileType

    @property
    def is_folder_reference(self) -> bool:
        return self.file_type == "folder"


class PBXGroup(PBXObject):
    isa = "PBXGroup"
    reference_list_keys = ("children",)

    children = _ListField("children")
    name = _StringField("name")
    path = _StringField("path")
    sourceTree = _StringField("sourceTree")

    @classmethod
    def create(
        cls,
        guid: str,
        name: Optional[str],
        path: Optional[str],
        tree: SourceTree = SourceTree.GROUP,
    ) -> "PBXGroup":
        group = cls.new(guid)
        group.data.create_array("children")
        if name is not None and name != path:
            group.name = name
        group.path = path
        group.sourceTree = tree.value
        return group

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.path


class PBXVariantGroup(PBXGroup):
    isa = "PBXVariantGroup"


class XCVersionGroup(PBXGroup):
    isa = "XCVersionGroup"
    reference_keys = ("currentVersion",)

    currentVersion = _StringField("currentVersion")


class PBXBuildPhase(PBXObject):
    reference_list_keys = ("files",)
    default_name: ClassVar[str] = ""

    files = _ListField("files")
    buildActionMask = _StringField("buildActionMask")
    runOnlyForDeploymentPostprocessing = _StringField("runOnlyForDeploymentPostprocessing")

    @classmethod
    def create(cls: Type["PhaseT"], guid: str) -> "PhaseT":
        phase = cls.new(guid)
        phase.buildActionMask = DEFAULT_BUILD_ACTION_MASK
        phase.data.create_array("files")
        phase.runOnlyForDeploymentPostprocessing = "0"
        return phase

    @property
    def display_name(self) -> Optional[str]:
        return self.default_name


PhaseT = TypeVar("PhaseT", bound=PBXBuildPhase)


class PBXSourcesBuildPhase(PBXBuildPhase):
    isa = "PBXSourcesBuildPhase"
    default_name = "Sources"


class PBXResourcesBuildPhase(PBXBuildPhase):
    isa = "PBXResourcesBuildPhase"
    default_name = "Resources"


class PBXFrameworksBuildPhase(PBXBuildPhase):
    isa = "PBXFrameworksBuildPhase"
    default_name = "Frameworks"


class PBXHeadersBuildPhase(PBXBuildPhase):
    isa = "PBXHeadersBuildPhase"
    default_name = "Headers"


class PBXCopyFilesBuildPhase(PBXBuildPhase):
    isa = "PBXCopyFilesBuildPhase"
    default_name = "CopyFiles"

    name = _StringField("name")
    dstPath = _StringField("dstPath")
    dstSubfolderSpec = _StringField("dstSubfolderSpec")

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.default_name


class PBXShellScriptBuildPhase(PBXBuildPhase):
    isa = "PBXShellScriptBuildPhase"
    default_name = "ShellScript"

    name = _StringField("name")
    shellPath = _StringField("shellPath")
    shellScript = _StringField("shellScript")

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.default_name


class PBXTarget(PBXObject):
    reference_keys = ("buildConfigurationList",)
    reference_list_keys = ("buildPhases", "buildRules", "dependencies")

    name = _StringField("name")
    productName = _StringField("productName")
    buildConfigurationList = _StringField("buildConfigurationList")
    buildPhases = _ListField("buildPhases")
    buildRules = _ListField("buildRules")
    dependencies = _ListField("dependencies")

    @property
    def display_name(self) -> Optional[str]:
        return self.name


class PBXNativeTarget(PBXTarget):
    isa = "PBXNativeTarget"
    reference_keys = ("buildConfigurationList", "productReference")

    productReference = _StringField("productReference")
    productType = _StringField("productType")

    @classmethod
    def create(
        cls, guid: str, name: str, product_ref: str, product_type: str, config_list: str
    ) -> "PBXNativeTarget":
        target = cls.new(guid)
        target.buildConfigurationList = config_list
        target.data.create_array("buildPhases")
        target.data.create_array("buildRules")
        target.data.create_array("dependencies")
        target.name = name
        target.productName = name
        target.productReference = product_ref
        target.productType = product_type
        return target


class PBXAggregateTarget(PBXTarget):
    isa = "PBXAggregateTarget"


class PBXLegacyTarget(PBXTarget):
    isa = "PBXLegacyTarget"


class XCBuildConfiguration(PBXObject):
    isa = "XCBuildConfiguration"
    reference_keys = ("baseConfigurationReference",)

    name = _StringField("name")
    baseConfigurationReference = _StringField("baseConfigurationReference")

    @classmethod
    def create(cls, guid: str, name: str) -> "XCBuildConfiguration":
        config = cls.new(guid)
        config.data.create_dict("buildSettings")
        config.name = name
        return config

    @property
    def build_settings(self) -> PBXDict:
        return self.data.create_dict("buildSettings")

    @property
    def display_name(self) -> Optional[str]:
        return self.name


class XCConfigurationList(PBXObject):
    isa = "XCConfigurationList"
    reference_list_keys = ("buildConfigurations",)

    buildConfigurations = _ListField("buildConfigurations")
    defaultConfigurationIsVisible = _StringField("defaultConfigurationIsVisible")
    defaultConfigurationName = _StringField("defaultConfigurationName")

    @classmethod
    def create(cls, guid: str, default_name: str = "Release") -> "XCConfigurationList":
        config_list = cls.new(guid)
        config_list.data.create_array("buildConfigurations")
        config_list.defaultConfigurationIsVisible = "0"
        config_list.defaultConfigurationName = default_name
        return config_list


class PBXTargetDependency(PBXObject):
    isa = "PBXTargetDependency"
    reference_keys = ("target", "targetProxy")

    name = _StringField("name")
    target = _StringField("target")
    targetProxy = _StringField("targetProxy")

    @classmethod
    def create(cls, guid: str, target: str, proxy: str) -> "PBXTargetDependency":
        dependency = cls.new(guid)
        dependency.target = target
        dependency.targetProxy = proxy
        return dependency


class PBXContainerItemProxy(PBXObject):
    isa = "PBXContainerItemProxy"
    reference_keys = ("containerPortal",)

    containerPortal = _StringField("containerPortal")
    proxyType = _StringField("proxyType")
    remoteGlobalIDString = _StringField("remoteGlobalIDString")
    remoteInfo = _StringField("remoteInfo")

    @classmethod
    def create(
        cls, guid: str, portal: str, proxy_type: ProxyType, remote_guid: str, remote_info: str
    ) -> "PBXContainerItemProxy":
        proxy = cls.new(guid)
        proxy.containerPortal = portal
        proxy.proxyType = proxy_type.to_xcode()
        proxy.remoteGlobalIDString = remote_guid
        proxy.remoteInfo = remote_info
        return proxy


class PBXReferenceProxy(PBXObject):
    isa = "PBXReferenceProxy"
    reference_keys = ("remoteRef",)

    name = _StringField("name")
    path = _StringField("path")
    fileType = _StringField("fileType")
    remoteRef = _StringField("remoteRef")
    sourceTree = _StringField("sourceTree")

    @classmethod
    def create(
        cls, guid: str, path: str, file_type: str, remote_ref: str, tree: SourceTree
    ) -> "PBXReferenceProxy":
        proxy = cls.new(guid)
        proxy.fileType = file_type
        proxy.path = path
        proxy.remoteRef = remote_ref
        proxy.sourceTree = tree.value
        return proxy

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.path


class PBXProject(PBXObject):
    isa = "PBXProject"
    reference_keys = ("buildConfigurationList", "mainGroup", "productRefGroup")
    reference_list_keys = ("targets",)

    buildConfigurationList = _StringField("buildConfigurationList")
    mainGroup = _StringField("mainGroup")
    productRefGroup = _StringField("productRefGroup")
    targets = _ListField("targets")

    @property
    def display_name(self) -> Optional[str]:
        return "Project object"

    @property
    def attributes(self) -> PBXDict:
        return self.data.create_dict("attributes")

    def project_references(self) -> List[Tuple[Optional[str], Optional[str]]]:
        """(ProductGroup, ProjectRef) pairs of referenced external projects."""
        array = self.data.get_array("projectReferences")
        if array is None:
            return []
        return [
            (entry.get_string("ProductGroup"), entry.get_string("ProjectRef"))
            for entry in array
            if isinstance(entry, PBXDict)
        ]

    def add_project_reference(self, product_group: str, project_ref: str) -> None:
        entry = self.data.create_array("projectReferences").add_dict()
        entry.set_string("ProductGroup", product_group)
        entry.set_string("ProjectRef", project_ref)

    def remove_project_references(self, guid: str) -> bool:
        array = self.data.get_array("projectReferences")
        if array is None:
            return False
        before = len(array.values)
        array.values = [
            entry
            for entry in array.values
            if not (
                isinstance(entry, PBXDict)
                and guid in (entry.get_string("ProductGroup"), entry.get_string("ProjectRef"))
            )
        ]
        if not array.values:
            self.data.remove("projectReferences")
        return len(array.values) != before

    def references(self) -> Iterator[Tuple[str, str]]:
        yield from super().references()
        for product_group, project_ref in self.project_references():
            if product_group is not None:
                yield "projectReferences", product_group
            if project_ref is not None:
                yield "projectReferences", project_ref

    def detach(self, guid: str) -> bool:
        changed = super().detach(guid)
        return self.remove_project_references(guid) or changed


BUILD_PHASE_CLASSES: Tuple[Type[PBXBuildPhase], ...] = (
    PBXSourcesBuildPhase,
    PBXResourcesBuildPhase,
    PBXFrameworksBuildPhase,
    PBXHeadersBuildPhase,
    PBXCopyFilesBuildPhase,
    PBXShellScriptBuildPhase,
)

TARGET_CLASSES: Tuple[Type[PBXTarget], ...] = (
    PBXNativeTarget,
    PBXAggregateTarget,
    PBXLegacyTarget,
)

GROUP_CLASSES: Tuple[Type[PBXGroup], ...] = (PBXGroup, PBXVariantGroup, XCVersionGroup)

OBJECT_CLASSES: Dict[str, Type[PBXObject]] = {
    cls.isa: cls
    for cls in (
        PBXBuildFile,
        PBXFileReference,
        *GROUP_CLASSES,
        *BUILD_PHASE_CLASSES,
        *TARGET_CLASSES,
        XCBuildConfiguration,
        XCConfigurationList,
        PBXTargetDependency,
        PBXContainerItemProxy,
        PBXReferenceProxy,
        PBXProject,
    )
}

# Objects written on a single line, as Xcode does
COMPACT_CLASSES = frozenset({PBXBuildFile.isa, PBXFileReference.isa})


def view_for(guid: str, data: PBXDict) -> PBXObject:
    cls = OBJECT_CLASSES.get(data.get_string("isa") or "", UnknownObject)
    return cls(XcodeID(guid), data)
