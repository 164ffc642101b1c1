# infrastructure/collection/request_loader.py
"""Discover and parse the request files of a collection."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from application.ports.definition_parser import DefinitionParserPort
from application.ports.logger import LoggerPort
from domain.collection import DEFAULT_IGNORE
from domain.exceptions import ConfigurationError
from domain.request import BRU_SUFFIX, RequestRecord
from infrastructure.collection.definition_file import read_definition

CONTROL_FILES = ("collection.bru", "folder.bru")
ENVIRONMENTS_DIR = "environments"


def order_by_seq(records: List[RequestRecord]) -> List[RequestRecord]:
    """Ascending ``seq``; ``sorted`` is stable so ties keep discovery order."""
    return sorted(records, key=lambda r: r.seq)


class RequestLoader:
    """
    Produces the fixed, ordered request list of a run.

    - a file is loaded on its own
    - a directory loads its direct request files ordered by ``seq``
    - recursively, sub-directories come first (depth-first), then the
      directory's own files

    Control files, the collection's ``environments`` directory and ignored
    directories never contribute requests. Any parse error propagates.
    """

    def __init__(
        self,
        parser: DefinitionParserPort,
        collection_path: Path,
        ignore: Sequence[str] = DEFAULT_IGNORE,
        logger: Optional[LoggerPort] = None,
    ):
        self._parser = parser
        self._collection_path = collection_path
        self._ignore = set(ignore)
        self._logger = logger

    def load(self, target: Path, recursive: bool = False) -> List[RequestRecord]:
        if target.is_file():
            records = [self._parse(target)]
        elif target.is_dir():
            records = self._walk(target) if recursive else self._load_dir(target)
        else:
            raise ConfigurationError(f"File or directory {target} does not exist")

        if self._logger is not None:
            self._logger.info("collection.loaded", target=str(target), recursive=recursive, requests=len(records))
        return records

    def _walk(self, directory: Path) -> List[RequestRecord]:
        records: List[RequestRecord] = []
        for entry in self._entries(directory):
            if entry.is_dir() and not entry.is_symlink() and not self._is_ignored(entry):
                records.extend(self._walk(entry))
        records.extend(self._load_dir(directory))
        return records

    def _load_dir(self, directory: Path) -> List[RequestRecord]:
        found = [self._parse(entry) for entry in self._entries(directory) if self._is_request_file(entry)]
        return order_by_seq(found)

    def _entries(self, directory: Path) -> List[Path]:
        return sorted(directory.iterdir(), key=lambda p: p.name)

    def _is_request_file(self, path: Path) -> bool:
        return path.is_file() and path.suffix == BRU_SUFFIX and path.name not in CONTROL_FILES

    def _is_ignored(self, directory: Path) -> bool:
        name = directory.name
        if name in self._ignore or name.startswith(".git"):
            return True
        return name == ENVIRONMENTS_DIR and directory.resolve() == (self._collection_path / ENVIRONMENTS_DIR).resolve()

    def _parse(self, path: Path) -> RequestRecord:
        text = read_definition(path)
        return self._parser.parse(text, str(path))
