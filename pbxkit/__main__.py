from argparse import ArgumentParser
import logging
import sys
from typing import List, Optional

from pbxkit.config import Config
from pbxkit.details.tools.files import add_file_main, remove_file_main
from pbxkit.details.tools.format import format_main
from pbxkit.details.tools.settings import get_setting_main, set_setting_main
from pbxkit.details.tools.targets import targets_main
from pbxkit.details.tools.validate import validate_main
from pbxkit.errors import PbxError
from pbxkit.xcode.project import XcodeProject


def main(argv: Optional[List[str]] = None):
    COMMANDS = {
        "format": format_main,
        "validate": validate_main,
        "targets": targets_main,
        "get-setting": get_setting_main,
        "set-setting": set_setting_main,
        "add-file": add_file_main,
        "remove-file": remove_file_main,
    }
    # parse common arguments, the rest belongs to the command...
    parser = ArgumentParser(prog="pbxkit")
    parser.add_argument("command", choices=COMMANDS.keys())
    parser.add_argument("--project", type=str, required=True, help="path to project.pbxproj")
    parser.add_argument("--name", type=str, default=None, help="project name for comments")
    parser.add_argument("--deterministic-ids", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    args, command_args = parser.parse_known_args(sys.argv[1:] if argv is None else argv)

    config = Config.from_args(args)
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        project = XcodeProject.read_from_file(
            config.project_path, config.guid_generator(), config.project_name
        )
        exit_code = COMMANDS[args.command](
            project=project, config=config, command_args=command_args
        )
    except PbxError as e:
        print(f"pbxkit: error: {e}", file=sys.stderr)
        sys.exit(2)
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
