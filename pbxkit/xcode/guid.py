# Object identifier generation.
#
# Identifiers are 24 upper-case hex characters, the same width Xcode uses.
# Each XcodeProject owns its generator so tests can swap in a deterministic
# one without touching any shared state.

from typing import Callable

import uuid


# Type definition for Xcode object identifiers
class XcodeID(str):
    pass


GuidGenerator = Callable[[], str]

GUID_LENGTH = 24


def random_guid() -> XcodeID:
    return XcodeID(uuid.uuid4().hex.upper()[:GUID_LENGTH])


class SequentialGuidGenerator:
    """Deterministic generator: prefix followed by an 8 digit counter."""

    def __init__(self, prefix: str = "CCCCCCCC00000000"):
        if len(prefix) != GUID_LENGTH - 8:
            raise ValueError(f"prefix must be {GUID_LENGTH - 8} characters, got {prefix!r}")
        self.prefix = prefix
        self.counter = 0

    def reset(self) -> None:
        self.counter = 0

    def __call__(self) -> XcodeID:
        self.counter += 1
        return XcodeID(f"{self.prefix}{self.counter:08d}")
