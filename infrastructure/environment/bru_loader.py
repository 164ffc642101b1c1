# infrastructure/environment/bru_loader.py
from __future__ import annotations

from typing import Optional

from domain.request import EnvironmentDefinition
from infrastructure.collection.bru_parser import BruParser
from infrastructure.environment.base_loader import EnvironmentLoaderBase


class BruEnvironmentLoader(EnvironmentLoaderBase):
    def __init__(self, parser: Optional[BruParser] = None):
        self._parser = parser or BruParser()

    def _load_text(self, text: str, name: str, location: str) -> EnvironmentDefinition:
        return self._parser.parse_environment(text, name=name, location=location)
