from argparse import ArgumentParser
from typing import List, Optional

from pbxkit import Config
from pbxkit.details.tools.targets import resolve_owner
from pbxkit.errors import NotFoundError
from pbxkit.xcode.model import SourceTree
from pbxkit.xcode.project import XcodeProject

SOURCE_TREES = {
    "SOURCE_ROOT": SourceTree.SOURCE_ROOT,
    "SDKROOT": SourceTree.SDKROOT,
    "BUILT_PRODUCTS_DIR": SourceTree.BUILT_PRODUCTS_DIR,
    "DEVELOPER_DIR": SourceTree.DEVELOPER_DIR,
}


def add_file_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit add-file")
    parser.add_argument("real_path")
    parser.add_argument("project_path")
    parser.add_argument("--source-tree", choices=SOURCE_TREES.keys(), default="SOURCE_ROOT")
    parser.add_argument("--folder", action="store_true", help="add a folder reference")
    parser.add_argument("--target", type=str, action="append", default=[], help="also build it")
    parser.add_argument("--flags", type=str, default=None, help="compiler flags for the file")
    args = parser.parse_args(command_args)

    tree = SOURCE_TREES[args.source_tree]
    if args.folder:
        file_guid = project.add_folder_reference(args.real_path, args.project_path, tree)
    else:
        file_guid = project.add_file(args.real_path, args.project_path, tree)
    for target in args.target:
        target_guid = resolve_owner(project, target)
        if args.flags:
            project.add_file_to_build_with_flags(target_guid, file_guid, args.flags)
        else:
            project.add_file_to_build(target_guid, file_guid)

    project.write_to_file(config.project_path)
    print(file_guid)
    return 0


def remove_file_main(project: XcodeProject, config: Config, command_args: List[str]) -> Optional[int]:
    parser = ArgumentParser(prog="pbxkit remove-file")
    parser.add_argument("project_path")
    parser.add_argument("--recursive", action="store_true", help="remove a whole group")
    args = parser.parse_args(command_args)

    if args.recursive:
        project.remove_files_by_project_path_recursive(args.project_path)
    else:
        file_guid = project.find_file_guid_by_project_path(args.project_path)
        if file_guid is None:
            raise NotFoundError(f"no file at project path {args.project_path!r}")
        project.remove_file(file_guid)

    project.write_to_file(config.project_path)
    return 0
