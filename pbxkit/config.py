import logging
import os
from typing import Optional

from pbxkit.xcode.guid import GuidGenerator, SequentialGuidGenerator, random_guid

LOG_LEVEL_ENV = "PBXKIT_LOG_LEVEL"


class Config:
    def __init__(
        self,
        project_path: str,
        log_level: int = logging.WARNING,
        deterministic_ids: bool = False,
        project_name: Optional[str] = None,
        **kwargs
    ):
        self.project_path = project_path
        self.log_level = log_level
        self.deterministic_ids = deterministic_ids
        self.project_name = project_name
        self.__dict__.update(kwargs)

    @classmethod
    def from_args(cls, args) -> "Config":
        """Build a config from parsed command line arguments and the environment."""
        if args.verbose:
            log_level = logging.DEBUG
        elif args.quiet:
            log_level = logging.ERROR
        else:
            log_level = parse_log_level(os.environ.get(LOG_LEVEL_ENV, ""))
        return cls(
            project_path=args.project,
            log_level=log_level,
            deterministic_ids=args.deterministic_ids,
            project_name=args.name,
        )

    def guid_generator(self) -> GuidGenerator:
        return SequentialGuidGenerator() if self.deterministic_ids else random_guid


def parse_log_level(value: str) -> int:
    if not value:
        return logging.WARNING
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {value!r} in {LOG_LEVEL_ENV}")
    return level
