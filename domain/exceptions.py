# domain/exceptions.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class CollectionRunnerError(Exception):
    """Base class for errors that abort a collection run."""


class ConfigurationError(CollectionRunnerError):
    pass


class DefinitionParseError(CollectionRunnerError):
    def __init__(self, message: str, location: Union[str, Path, None] = None, line: Optional[int] = None):
        self.location = str(location) if location is not None else None
        self.line = line
        where = ""
        if self.location:
            where = self.location if line is None else f"{self.location}:{line}"
            where = f"{where}: "
        super().__init__(f"{where}{message}")


class JumpLimitExceeded(CollectionRunnerError):
    def __init__(self, max_jumps: int):
        self.max_jumps = max_jumps
        super().__init__("Too many jumps, possible infinite loop")
