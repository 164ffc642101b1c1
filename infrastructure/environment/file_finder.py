"""Find environment files by name."""
from pathlib import Path
from typing import Optional, Sequence

DEFAULT_PRIORITY = (".bru", ".yml", ".yaml")


class EnvironmentFileFinder:
    """Look up ``<name>.<ext>`` inside the collection's environments directory."""

    def __init__(self, base_dir: Path, priority: Sequence[str] = DEFAULT_PRIORITY):
        self.base_dir = base_dir
        self.priority = tuple(priority)

    def find_by_name(self, name: str) -> Optional[Path]:
        """
        Find an environment file by environment name.

        Args:
            name: Environment name (e.g., "local")

        Returns:
            The Path if found, otherwise None.
        """
        # .bru wins over YAML variants for the same name
        for ext in self.priority:
            candidate = self.base_dir / f"{name}{ext}"
            if candidate.is_file():
                return candidate
        return None
