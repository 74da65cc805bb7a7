"""
String quoting rules for .pbxproj output.

Xcode prints a string bare only when every character is a letter, a digit or
one of ``_ $ / .``. On top of that it quotes a few strings that would
otherwise qualify, which is what ``needs_quotes`` encodes. Keeping the
decision in one pure function lets it be tested on its own.
"""

import re
from typing import Optional

_UNQUOTED = re.compile(r"^[A-Za-z0-9_$/.]+$")
# Xcode quotes any string with a run of three or more underscores.
_TRIPLE_UNDERSCORE = "___"
_NUMERIC = re.compile(r"^[0-9]+(\.[0-9]*)+$")

# Keys whose values are file system paths. A path that happens to look like a
# number ("1.0") is kept quoted so that it is not read back as one.
PATH_KEYS = frozenset(
    {
        "path",
        "name",
        "dstPath",
        "INFOPLIST_FILE",
        "CODE_SIGN_ENTITLEMENTS",
    }
)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
}

_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "a": "\a",
    "v": "\v",
    "0": "\0",
}


def needs_quotes(value: str, key: Optional[str] = None) -> bool:
    """
    Decide whether a string has to be quoted in the given key context.

    Args:
        value: The string as it should read after parsing.
        key: The dictionary key the value belongs to, if any.

    Returns:
        True if the string must be written quoted.
    """
    if not _UNQUOTED.match(value):
        return True
    if "//" in value or _TRIPLE_UNDERSCORE in value:
        return True
    if key in PATH_KEYS and _NUMERIC.match(value):
        return True
    return False


def escape(value: str) -> str:
    result = []
    for c in value:
        if c in _ESCAPES:
            result.append(_ESCAPES[c])
        elif ord(c) < 0x20:
            result.append(f"\\U{ord(c):04x}")
        else:
            result.append(c)
    return "".join(result)


def unescape(raw: str) -> str:
    if "\\" not in raw:
        return raw
    result = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c != "\\" or i + 1 >= len(raw):
            result.append(c)
            i += 1
            continue
        nxt = raw[i + 1]
        if nxt == "U" and re.match(r"[0-9A-Fa-f]{4}", raw[i + 2 : i + 6]):
            result.append(chr(int(raw[i + 2 : i + 6], 16)))
            i += 6
            continue
        result.append(_UNESCAPES.get(nxt, nxt))
        i += 2
    return "".join(result)


def quote_string(value: str, key: Optional[str] = None, force: bool = False) -> str:
    if not force and not needs_quotes(value, key):
        return value
    return f'"{escape(value)}"'
