# application/ports/definition_parser.py
from __future__ import annotations

from typing import Protocol

from domain.collection import CollectionRoot
from domain.request import EnvironmentDefinition, RequestRecord


class DefinitionParserPort(Protocol):
    def parse(self, text: str, location: str) -> RequestRecord:
        ...

    def parse_environment(self, text: str, name: str, location: str = "") -> EnvironmentDefinition:
        ...

    def parse_collection_root(self, text: str, location: str = "") -> CollectionRoot:
        ...
