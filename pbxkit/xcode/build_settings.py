# Build setting storage rules.
#
# A setting inside an XCBuildConfiguration's buildSettings is either a single
# string or an array of strings. These helpers read every setting as a list of
# values and write it back in the shape Xcode expects: nothing for no values,
# a plain string for one value and an array for more.

from typing import Iterable, List, Optional

from pbxkit.xcode.elements import PBXArray, PBXDict, PBXString

# Search path settings whose whitespace-containing entries are stored quoted.
NORMALIZED_KEYS = frozenset({"LIBRARY_SEARCH_PATHS", "FRAMEWORK_SEARCH_PATHS"})

# Settings whose entries are compared after quoting, so adding "/a b" twice,
# quoted or not, keeps one entry.
UNIQUE_KEYS = frozenset({"LIBRARY_SEARCH_PATHS"})

# Settings Xcode always writes as arrays, even with a single entry.
ALWAYS_LIST_KEYS = frozenset({"LD_RUNPATH_SEARCH_PATHS"})


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value.startswith('"') and value.endswith('"')


def normalize_value(key: str, value: str) -> str:
    """Quote whitespace-containing search paths that are not quoted yet."""
    if key in NORMALIZED_KEYS and any(c.isspace() for c in value) and not _is_quoted(value):
        return f'"{value}"'
    return value


def get_values(settings: PBXDict, key: str) -> List[str]:
    value = settings.get(key)
    if isinstance(value, PBXString):
        return [value.value]
    if isinstance(value, PBXArray):
        return value.strings()
    return []


def get_value_string(settings: PBXDict, key: str) -> Optional[str]:
    """The setting as one string: the scalar itself or array entries joined by spaces."""
    value = settings.get(key)
    if isinstance(value, PBXString):
        return value.value
    if isinstance(value, PBXArray):
        return " ".join(value.strings())
    return None


def store_values(settings: PBXDict, key: str, values: List[str]) -> None:
    if not values:
        settings.remove(key)
    elif len(values) == 1 and key not in ALWAYS_LIST_KEYS:
        if not isinstance(settings.get(key), PBXString):
            settings.remove(key)
        settings.set_string(key, values[0])
    else:
        settings[key] = PBXArray([PBXString(v) for v in values])


def set_value(settings: PBXDict, key: str, value: str) -> None:
    store_values(settings, key, [value])


def add_value(settings: PBXDict, key: str, value: str) -> None:
    values = get_values(settings, key)
    value = normalize_value(key, value)
    if key in UNIQUE_KEYS and value in (normalize_value(key, v) for v in values):
        return
    values.append(value)
    store_values(settings, key, values)


def remove_value(settings: PBXDict, key: str, value: str) -> None:
    if key not in settings:
        return
    values = get_values(settings, key)
    target = normalize_value(key, value)
    kept = [v for v in values if normalize_value(key, v) != target]
    if len(kept) != len(values):
        store_values(settings, key, kept)


def update_values(
    settings: PBXDict,
    key: str,
    add_values: Optional[Iterable[str]],
    remove_values: Optional[Iterable[str]],
) -> None:
    """
    Remove every occurrence of remove_values, then append add_values.

    Args:
        settings: The buildSettings dictionary of one configuration.
        key: Setting name.
        add_values: Values to append afterwards; None removes only.
        remove_values: Values to drop first; None drops nothing.
    """
    for value in remove_values or ():
        remove_value(settings, key, value)
    for value in add_values or ():
        add_value(settings, key, value)


def remove_key(settings: PBXDict, key: str) -> None:
    settings.remove(key)
