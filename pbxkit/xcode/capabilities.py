# Target capabilities.
#
# Xcode records an enabled capability in the project's TargetAttributes as
# SystemCapabilities.<id>.enabled = 1. Most capabilities also need a system
# framework linked, an entitlements file, or both.

import logging
from enum import Enum
from typing import List, NamedTuple, Optional

from pbxkit.details import paths
from pbxkit.xcode.elements import PBXDict
from pbxkit.xcode.model import SourceTree
from pbxkit.xcode.project import XcodeProject

logger = logging.getLogger(__name__)

CODE_SIGN_ENTITLEMENTS = "CODE_SIGN_ENTITLEMENTS"
DEVELOPMENT_TEAM = "DEVELOPMENT_TEAM"


class CapabilityInfo(NamedTuple):
    id: str
    requires_entitlements: bool
    framework: Optional[str] = None
    # Only linked when the caller asks for it
    optional_framework: bool = False


class PBXCapabilityType(Enum):
    GameCenter = CapabilityInfo("com.apple.GameCenter", False, "GameKit.framework")
    iCloud = CapabilityInfo("com.apple.iCloud", True, "CloudKit.framework", optional_framework=True)
    InAppPurchase = CapabilityInfo("com.apple.InAppPurchase", False)
    ApplePay = CapabilityInfo("com.apple.ApplePay", True)
    PushNotifications = CapabilityInfo("com.apple.Push", True)
    Wallet = CapabilityInfo("com.apple.Wallet", True, "PassKit.framework")
    PersonalVPN = CapabilityInfo("com.apple.VPNLite", True, "NetworkExtension.framework")
    BackgroundModes = CapabilityInfo("com.apple.BackgroundModes", False)
    InterAppAudio = CapabilityInfo("com.apple.InterAppAudio", True, "AudioToolbox.framework")
    KeychainSharing = CapabilityInfo("com.apple.Keychain", True)
    AssociatedDomains = CapabilityInfo("com.apple.SafariKeychain", True)
    AppGroups = CapabilityInfo("com.apple.ApplicationGroups.iOS", True)
    Maps = CapabilityInfo("com.apple.Maps.iOS", False, "MapKit.framework")
    HealthKit = CapabilityInfo("com.apple.HealthKit", True, "HealthKit.framework")
    HomeKit = CapabilityInfo("com.apple.HomeKit", True, "HomeKit.framework")
    WirelessAccessoryConfiguration = CapabilityInfo(
        "com.apple.WAC", True, "ExternalAccessory.framework"
    )
    DataProtection = CapabilityInfo("com.apple.DataProtection", True)
    Siri = CapabilityInfo("com.apple.Siri", True)
    AccessWiFiInformation = CapabilityInfo("com.apple.AccessWiFi", True)

    @property
    def id(self) -> str:
        return self.value.id

    @staticmethod
    def from_id(capability_id: str) -> Optional["PBXCapabilityType"]:
        for capability in PBXCapabilityType:
            if capability.id == capability_id:
                return capability
        return None


def _system_capabilities(
    project: XcodeProject, target_guid: str, create: bool
) -> Optional[PBXDict]:
    if create:
        return project.target_attributes(target_guid).create_dict("SystemCapabilities")
    attributes = _existing_attributes(project, target_guid)
    return attributes.get_dict("SystemCapabilities") if attributes is not None else None


def _existing_attributes(project: XcodeProject, target_guid: str) -> Optional[PBXDict]:
    attributes = project.project.data.get_dict("attributes")
    if attributes is None:
        return None
    target_attributes = attributes.get_dict("TargetAttributes")
    return target_attributes.get_dict(target_guid) if target_attributes is not None else None


def get_capabilities(project: XcodeProject, target_guid: str) -> List[PBXCapabilityType]:
    capabilities = _system_capabilities(project, target_guid, create=False)
    if capabilities is None:
        return []
    result = []
    for capability_id in capabilities.keys():
        entry = capabilities.get_dict(capability_id)
        capability = PBXCapabilityType.from_id(capability_id)
        if capability is not None and entry is not None and entry.get_string("enabled") == "1":
            result.append(capability)
    return result


def add_capability(
    project: XcodeProject,
    target_guid: str,
    capability: PBXCapabilityType,
    entitlements_path: Optional[str] = None,
    add_optional_framework: bool = False,
) -> bool:
    """
    Enable a capability for a target.

    Args:
        project: The project to modify.
        target_guid: Target to enable the capability for.
        capability: The capability.
        entitlements_path: Entitlements file, required for capabilities that
            need one unless the target already has one.
        add_optional_framework: Also link frameworks the capability only
            optionally uses.

    Returns:
        False if the capability was already enabled, True otherwise.

    Raises:
        ValueError: If the capability needs entitlements and there are none.
    """
    current_entitlements = project.get_build_property_for_any_config(
        target_guid, CODE_SIGN_ENTITLEMENTS
    )
    if capability.value.requires_entitlements and not (entitlements_path or current_entitlements):
        raise ValueError(f"capability {capability.name} requires an entitlements file")

    if capability in get_capabilities(project, target_guid):
        logger.warning("capability %s is already enabled for %s", capability.name, target_guid)
        return False

    capabilities = _system_capabilities(project, target_guid, create=True)
    capabilities.create_dict(capability.id).set_string("enabled", "1")

    info = capability.value
    if info.framework and (not info.optional_framework or add_optional_framework):
        project.add_framework_to_project(target_guid, info.framework, False)

    if entitlements_path:
        entitlements_path = paths.fix_slashes(entitlements_path)
        if current_entitlements and current_entitlements != entitlements_path:
            logger.warning(
                "%s already uses entitlements %s, ignoring %s",
                target_guid,
                current_entitlements,
                entitlements_path,
            )
        elif not current_entitlements:
            project.add_file(entitlements_path, entitlements_path, SourceTree.SOURCE_ROOT)
            project.set_build_property(target_guid, CODE_SIGN_ENTITLEMENTS, entitlements_path)
    logger.debug("enabled %s for %s", capability.name, target_guid)
    return True


def remove_capability(
    project: XcodeProject, target_guid: str, capability: PBXCapabilityType
) -> bool:
    """Disable a capability. Linked frameworks and entitlements are left alone."""
    capabilities = _system_capabilities(project, target_guid, create=False)
    if capabilities is None or capabilities.get(capability.id) is None:
        return False
    capabilities.remove(capability.id)
    return True


def set_team_id(project: XcodeProject, target_guid: str, team_id: str) -> None:
    project.set_build_property(target_guid, DEVELOPMENT_TEAM, team_id)
    project.target_attributes(target_guid).set_string("DevelopmentTeam", team_id)
