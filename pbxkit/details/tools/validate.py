from argparse import ArgumentParser
from typing import List, Optional

from pbxkit import Config
from pbxkit.xcode.project import XcodeProject


def validate_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit validate")
    parser.parse_args(command_args)

    for message in project.repairs:
        print(message)
    if project.repairs:
        print(f"{config.project_path}: {len(project.repairs)} problems")
        return 1
    return 0
