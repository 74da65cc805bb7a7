# Project-relative path helpers.
#
# Paths stored in a project document always use forward slashes. The helpers
# below work on plain strings so that Windows style input is normalised before
# it reaches the object graph.

from typing import List, Tuple


def fix_slashes(path: str) -> str:
    return path.replace("\\", "/") if path else path


def combine(path1: str, path2: str) -> str:
    if path2.startswith("/"):
        return path2
    if path1 == "":
        return path2
    if path2 == "":
        return path1
    if path1.endswith("/"):
        return path1 + path2
    return path1 + "/" + path2


def split(path: str) -> List[str]:
    return [p for p in fix_slashes(path).split("/") if p]


def get_directory(path: str) -> str:
    path = fix_slashes(path).rstrip("/")
    idx = path.rfind("/")
    return "" if idx == -1 else path[:idx]


def get_filename(path: str) -> str:
    path = fix_slashes(path).rstrip("/")
    return path[path.rfind("/") + 1 :]


def get_extension(path: str) -> str:
    name = get_filename(path)
    idx = name.rfind(".")
    # Dot files such as ".gitignore" have no extension
    if idx <= 0:
        return ""
    return name[idx:].lower()


def is_absolute(path: str) -> bool:
    return path.startswith("/")


def split_extension(name: str) -> Tuple[str, str]:
    ext = get_extension(name)
    if not ext:
        return name, ""
    return name[: -len(ext)], ext
