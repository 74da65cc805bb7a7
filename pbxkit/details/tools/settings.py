from argparse import ArgumentParser
from typing import List, Optional

from pbxkit import Config
from pbxkit.details.tools.targets import resolve_owner
from pbxkit.errors import NotFoundError
from pbxkit.xcode.project import XcodeProject


def _owner(project: XcodeProject, target: Optional[str], config_name: Optional[str]) -> str:
    owner = resolve_owner(project, target)
    if config_name is None:
        return owner
    config_guid = project.build_config_by_name(owner, config_name)
    if config_guid is None:
        raise NotFoundError(f"no build configuration named {config_name!r}")
    return config_guid


def get_setting_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit get-setting")
    parser.add_argument("key")
    parser.add_argument("--target", type=str, default=None)
    parser.add_argument("--config", type=str, default=None, dest="config_name")
    args = parser.parse_args(command_args)

    owner = _owner(project, args.target, args.config_name)
    if args.config_name is not None:
        value = project.get_build_property_for_config(owner, args.key)
    else:
        value = project.get_build_property_for_any_config(owner, args.key)
    if value is None:
        return 1
    print(value)
    return 0


def set_setting_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit set-setting")
    parser.add_argument("key")
    parser.add_argument("values", nargs="*")
    parser.add_argument("--target", type=str, default=None)
    parser.add_argument("--config", type=str, default=None, dest="config_name")
    parser.add_argument("--add", action="store_true", help="append instead of replacing")
    parser.add_argument("--remove", action="store_true", help="remove the values, or the key")
    args = parser.parse_args(command_args)

    owner = _owner(project, args.target, args.config_name)
    if args.remove and args.values:
        project.update_build_property(owner, args.key, None, args.values)
    elif args.remove:
        project.remove_build_property(owner, args.key)
    elif args.add:
        for value in args.values:
            project.add_build_property(owner, args.key, value)
    elif len(args.values) == 1:
        project.set_build_property(owner, args.key, args.values[0])
    else:
        project.remove_build_property(owner, args.key)
        project.update_build_property(owner, args.key, args.values, None)

    project.write_to_file(config.project_path)
    return 0
