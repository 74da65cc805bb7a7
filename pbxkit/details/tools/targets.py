from argparse import ArgumentParser
from typing import List, Optional

from pbxkit import Config
from pbxkit.errors import NotFoundError
from pbxkit.xcode.project import XcodeProject


def resolve_owner(project: XcodeProject, name: Optional[str]) -> str:
    """Target name or identifier, or the project itself when no name is given."""
    if name is None:
        return project.project_guid()
    guid = project.target_guid_by_name(name)
    if guid is not None:
        return guid
    if project.find_object(name) is not None:
        return name
    raise NotFoundError(f"no target named {name!r}")


def targets_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit targets")
    parser.add_argument("--configs", action="store_true", help="also list build configurations")
    args = parser.parse_args(command_args)

    for target in project.targets():
        print(f"{target.guid} {target.name}")
        if args.configs:
            for config_name in project.build_config_names():
                config_guid = project.build_config_by_name(target.guid, config_name)
                if config_guid is not None:
                    print(f"  {config_guid} {config_name}")
    return 0
