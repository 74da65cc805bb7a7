from argparse import ArgumentParser
from typing import List, Optional

from pbxkit import Config
from pbxkit.xcode.project import XcodeProject


def format_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit format")
    parser.add_argument("--output", type=str, default=None, help="write here instead of in place")
    parser.add_argument("--check", action="store_true", help="only report whether the file would change")
    args = parser.parse_args(command_args)

    text = project.write_to_string()
    if args.check:
        with open(config.project_path, "r", encoding="utf-8") as f:
            unchanged = f.read() == text
        if not unchanged:
            print(f"{config.project_path} would be reformatted")
        return 0 if unchanged else 1

    project.write_to_file(args.output or config.project_path)
    return 0
