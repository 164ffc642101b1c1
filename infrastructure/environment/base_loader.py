# infrastructure/environment/base_loader.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from domain.request import EnvironmentDefinition
from infrastructure.collection.definition_file import read_definition


class EnvironmentLoaderBase(ABC):
    def load_from_file(self, path: Path) -> EnvironmentDefinition:
        text = read_definition(path)
        return self._load_text(text, name=path.stem, location=str(path))

    @abstractmethod
    def _load_text(self, text: str, name: str, location: str) -> EnvironmentDefinition:
        ...
