# infrastructure/environment/file_environment_source.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from domain.exceptions import ConfigurationError
from domain.request import EnvironmentDefinition
from infrastructure.environment.file_finder import EnvironmentFileFinder
from infrastructure.environment.loader_registry import EnvironmentLoaderRegistry

ENVIRONMENTS_DIR = "environments"


class FileEnvironmentSource:
    """Named environments stored under ``<collection>/environments``."""

    def __init__(self, collection_path: Path, registry: Optional[EnvironmentLoaderRegistry] = None):
        self._registry = registry or EnvironmentLoaderRegistry()
        self._finder = EnvironmentFileFinder(collection_path / ENVIRONMENTS_DIR, self._registry.suffixes)

    def load(self, name: str) -> EnvironmentDefinition:
        path = self._finder.find_by_name(name)
        if path is None:
            tried = ", ".join(f"{ENVIRONMENTS_DIR}/{name}{suffix}" for suffix in self._registry.suffixes)
            raise ConfigurationError(f"Environment file not found: {tried}")
        return self._registry.get_loader(path).load_from_file(path)
