# Watch app and extension targets.
#
# A watchOS app is two targets: the WatchKit extension holding the code and
# the watch app bundle that embeds it. The host iOS app embeds the watch app
# in "Embed Watch Content". Before a watch app exists the extension is
# embedded by the host directly.

import logging
from typing import Dict, List, Union

from pbxkit.xcode.model import (
    DstSubfolderSpec,
    PBXBuildFile,
    PBXCopyFilesBuildPhase,
    ProductType,
    YesNo,
)
from pbxkit.xcode.project import EMBED_APP_EXTENSIONS, XcodeProject

logger = logging.getLogger(__name__)

EMBED_WATCH_CONTENT = "Embed Watch Content"
WATCH_CONTENT_PATH = "$(CONTENTS_FOLDER_PATH)/Watch"
WATCHOS_DEPLOYMENT_TARGET = "3.1"

SettingValue = Union[str, List[str]]

_WATCH_COMMON: Dict[str, SettingValue] = {
    "ARCHS": "$(ARCHS_STANDARD)",
    "CLANG_ANALYZER_NONNULL": YesNo.YES.value,
    "CLANG_WARN_DOCUMENTATION_COMMENTS": YesNo.YES.value,
    "CLANG_WARN_INFINITE_RECURSION": YesNo.YES.value,
    "CLANG_WARN_SUSPICIOUS_MOVE": YesNo.YES.value,
    "GCC_NO_COMMON_BLOCKS": YesNo.YES.value,
    "PRODUCT_NAME": "${TARGET_NAME}",
    "SDKROOT": "watchos",
    "SKIP_INSTALL": YesNo.YES.value,
    "SUPPORTED_PLATFORMS": "watchos watchsimulator",
    "TARGETED_DEVICE_FAMILY": "4",
    "WATCHOS_DEPLOYMENT_TARGET": WATCHOS_DEPLOYMENT_TARGET,
}

_DEBUG: Dict[str, SettingValue] = {
    "DEBUG_INFORMATION_FORMAT": "dwarf",
    "ENABLE_TESTABILITY": YesNo.YES.value,
    "MTL_ENABLE_DEBUG_INFO": YesNo.YES.value,
    "ONLY_ACTIVE_ARCH": YesNo.YES.value,
}

_RELEASE: Dict[str, SettingValue] = {
    "DEBUG_INFORMATION_FORMAT": "dwarf-with-dsym",
    "MTL_ENABLE_DEBUG_INFO": YesNo.NO.value,
    "VALIDATE_PRODUCT": YesNo.YES.value,
}

_EXTENSION: Dict[str, SettingValue] = {
    "ASSETCATALOG_COMPILER_COMPLICATION_NAME": "Complication",
    "LD_RUNPATH_SEARCH_PATHS": [
        "$(inherited)",
        "@executable_path/Frameworks",
        "@executable_path/../../Frameworks",
    ],
}

_APP: Dict[str, SettingValue] = {
    "ASSETCATALOG_COMPILER_APPICON_NAME": "AppIcon",
    "IBSC_MODULE": "${PRODUCT_NAME:c99extidentifier}_Extension",
}


def _apply_settings(
    project: XcodeProject, config_guid: str, settings: Dict[str, SettingValue]
) -> None:
    for key, value in settings.items():
        if isinstance(value, list):
            project.remove_build_property(config_guid, key)
            project.update_build_property(config_guid, key, value, None)
        else:
            project.set_build_property(config_guid, key, value)


def _configure_watch_target(
    project: XcodeProject,
    target_guid: str,
    settings: Dict[str, SettingValue],
    bundle_id: str,
    info_plist: str,
) -> None:
    for config_name in project.build_config_names():
        config_guid = project.build_config_by_name(target_guid, config_name)
        if config_guid is None:
            continue
        _apply_settings(project, config_guid, _WATCH_COMMON)
        _apply_settings(project, config_guid, _DEBUG if "Debug" in config_name else _RELEASE)
        _apply_settings(project, config_guid, settings)
        project.set_build_property(config_guid, "PRODUCT_BUNDLE_IDENTIFIER", bundle_id)
        project.set_build_property(config_guid, "INFOPLIST_FILE", info_plist)


def _embed(
    project: XcodeProject,
    target_guid: str,
    phase_name: str,
    dst_path: str,
    spec: DstSubfolderSpec,
    product_of: str,
) -> None:
    phase_guid = project.add_copy_files_build_phase(
        target_guid, phase_name, dst_path, str(spec.value)
    )
    product = project.get_target_product_file_ref(product_of)
    build_guid = project.add_file_to_build_section(target_guid, phase_guid, product)
    if build_guid is not None:
        project.object(build_guid, PBXBuildFile).add_attribute("RemoveHeadersOnCopy")


def add_watch_extension(
    project: XcodeProject, host_guid: str, name: str, bundle_id: str, info_plist: str
) -> str:
    """
    Add a WatchKit extension target embedded by the host app.

    Args:
        project: The project to modify.
        host_guid: The iOS app target.
        name: Name of the extension target.
        bundle_id: Bundle identifier of the extension.
        info_plist: Path of the extension's Info.plist.

    Returns:
        The identifier of the new target.
    """
    target_guid = project.add_target(name, ".appex", ProductType.WATCH2_EXTENSION.value)
    _configure_watch_target(project, target_guid, _EXTENSION, bundle_id, info_plist)
    project.add_sources_build_phase(target_guid)
    project.add_resources_build_phase(target_guid)
    project.add_frameworks_build_phase(target_guid)

    _embed(project, host_guid, EMBED_APP_EXTENSIONS, "", DstSubfolderSpec.PLUGINS, target_guid)
    project.add_target_dependency(host_guid, target_guid)
    logger.debug("added watch extension %s", name)
    return target_guid


def add_watch_app(
    project: XcodeProject,
    host_guid: str,
    extension_guid: str,
    name: str,
    bundle_id: str,
    info_plist: str,
) -> str:
    """
    Add a watch app target embedding an existing WatchKit extension.

    The extension is moved from the host's embed phase into the watch app and
    the host embeds the watch app instead.
    """
    target_guid = project.add_target(name, ".app", ProductType.WATCH2_APP.value)
    _configure_watch_target(project, target_guid, _APP, bundle_id, info_plist)
    project.add_resources_build_phase(target_guid)

    _unembed_from_host(project, host_guid, extension_guid)
    _embed(project, target_guid, EMBED_APP_EXTENSIONS, "", DstSubfolderSpec.PLUGINS, extension_guid)
    _embed(
        project,
        host_guid,
        EMBED_WATCH_CONTENT,
        WATCH_CONTENT_PATH,
        DstSubfolderSpec.PRODUCTS_DIRECTORY,
        target_guid,
    )
    project.add_target_dependency(target_guid, extension_guid)
    project.add_target_dependency(host_guid, target_guid)
    logger.debug("added watch app %s", name)
    return target_guid


def _unembed_from_host(project: XcodeProject, host_guid: str, extension_guid: str) -> None:
    product = project.get_target_product_file_ref(extension_guid)
    for phase in project.build_phases(host_guid):
        if not isinstance(phase, PBXCopyFilesBuildPhase):
            continue
        removed = False
        for build_guid in list(phase.files):
            build_file = project.find_object(build_guid)
            if isinstance(build_file, PBXBuildFile) and build_file.fileRef == product:
                project.remove_object(build_guid)
                removed = True
        if removed and len(phase.files) == 0:
            project.remove_object(phase.guid)

    for dependency in project.dependencies_of(host_guid):
        if dependency.target == extension_guid:
            project.remove_dependency(dependency.guid)
