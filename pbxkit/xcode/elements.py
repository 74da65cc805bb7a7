# Generic property list value tree.
#
# The parser produces this tree and the formatter consumes it. Typed objects in
# model.py are views over PBXDict instances stored in the tree, so every edit
# made through the object model lands here directly.

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class PBXElement:
    """A value in the tree: a string, an array or a dictionary."""


@dataclass
class PBXString(PBXElement):
    value: str
    quoted: bool = False  # was quoted in the source text
    comment: Optional[str] = None  # trailing /* comment */ from the source text


@dataclass
class PBXArray(PBXElement):
    values: List[PBXElement] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[PBXElement]:
        return iter(self.values)

    def strings(self) -> List[str]:
        return [v.value for v in self.values if isinstance(v, PBXString)]

    def add_string(self, value: str) -> PBXString:
        element = PBXString(value)
        self.values.append(element)
        return element

    def add_dict(self) -> "PBXDict":
        element = PBXDict()
        self.values.append(element)
        return element

    def contains_string(self, value: str) -> bool:
        return any(isinstance(v, PBXString) and v.value == value for v in self.values)

    def remove_string(self, value: str) -> int:
        before = len(self.values)
        self.values = [
            v for v in self.values if not (isinstance(v, PBXString) and v.value == value)
        ]
        return before - len(self.values)


@dataclass
class PBXDict(PBXElement):
    values: Dict[str, PBXElement] = field(default_factory=dict)
    # /* comments */ that followed a key in the source text
    key_comments: Dict[str, str] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def __getitem__(self, key: str) -> PBXElement:
        return self.values[key]

    def __setitem__(self, key: str, value: PBXElement) -> None:
        self.values[key] = value

    def __len__(self) -> int:
        return len(self.values)

    def keys(self) -> List[str]:
        return list(self.values.keys())

    def items(self):
        return self.values.items()

    def get(self, key: str) -> Optional[PBXElement]:
        return self.values.get(key)

    def remove(self, key: str) -> None:
        self.values.pop(key, None)
        self.key_comments.pop(key, None)

    def get_string(self, key: str) -> Optional[str]:
        value = self.values.get(key)
        if isinstance(value, PBXString):
            return value.value
        return None

    def set_string(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self.remove(key)
            return
        current = self.values.get(key)
        if isinstance(current, PBXString):
            if current.value != value:
                # A stale source comment would describe the old value
                current.value = value
                current.comment = None
        else:
            self.values[key] = PBXString(value)

    def get_array(self, key: str) -> Optional[PBXArray]:
        value = self.values.get(key)
        return value if isinstance(value, PBXArray) else None

    def get_dict(self, key: str) -> Optional["PBXDict"]:
        value = self.values.get(key)
        return value if isinstance(value, PBXDict) else None

    def create_array(self, key: str) -> PBXArray:
        value = self.values.get(key)
        if not isinstance(value, PBXArray):
            value = PBXArray()
            self.values[key] = value
        return value

    def create_dict(self, key: str) -> "PBXDict":
        value = self.values.get(key)
        if not isinstance(value, PBXDict):
            value = PBXDict()
            self.values[key] = value
        return value
