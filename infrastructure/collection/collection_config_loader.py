# infrastructure/collection/collection_config_loader.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Tuple

from application.ports.definition_parser import DefinitionParserPort
from domain.collection import DEFAULT_IGNORE, CollectionConfig, CollectionRoot
from domain.exceptions import ConfigurationError
from infrastructure.collection.definition_file import read_definition

BRUNO_JSON = "bruno.json"
COLLECTION_BRU = "collection.bru"


class CollectionConfigLoader:
    """Reads ``bruno.json`` and the optional ``collection.bru`` of a collection."""

    def __init__(self, parser: DefinitionParserPort):
        self._parser = parser

    def load(self, collection_path: Path) -> Tuple[CollectionConfig, CollectionRoot]:
        return self.load_config(collection_path), self.load_root(collection_path)

    def load_config(self, collection_path: Path) -> CollectionConfig:
        path = collection_path / BRUNO_JSON
        if not path.is_file():
            raise ConfigurationError("You can run only at the root of a collection")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Invalid {BRUNO_JSON}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid {BRUNO_JSON}: expected a JSON object")

        return CollectionConfig(
            name=str(data.get("name", "")),
            version=str(data.get("version", "1")),
            type=str(data.get("type", "collection")),
            ignore=_ignore_list(data.get("ignore")),
            raw=data,
        )

    def load_root(self, collection_path: Path) -> CollectionRoot:
        path = collection_path / COLLECTION_BRU
        if not path.is_file():
            return CollectionRoot()
        return self._parser.parse_collection_root(read_definition(path), str(path))


def _ignore_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return DEFAULT_IGNORE
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"Invalid {BRUNO_JSON}: 'ignore' must be a list of directory names")
    return tuple(dict.fromkeys(list(DEFAULT_IGNORE) + value))
