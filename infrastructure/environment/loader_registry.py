# infrastructure/environment/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

from domain.exceptions import ConfigurationError
from infrastructure.environment.base_loader import EnvironmentLoaderBase
from infrastructure.environment.bru_loader import BruEnvironmentLoader
from infrastructure.environment.yaml_loader import YamlEnvironmentLoader


class EnvironmentLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, EnvironmentLoaderBase] = {
            ".bru": BruEnvironmentLoader(),
            ".yml": YamlEnvironmentLoader(),
            ".yaml": YamlEnvironmentLoader(),
        }

    @property
    def suffixes(self) -> Tuple[str, ...]:
        return tuple(self._loaders)

    def get_loader(self, path: Path) -> EnvironmentLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise ConfigurationError(f"Unsupported environment format: {ext}")
        return loader
