# infrastructure/collection/definition_file.py
from __future__ import annotations

from pathlib import Path

from domain.exceptions import DefinitionParseError


def read_definition(path: Path) -> str:
    """Read a ``.bru`` / environment file as UTF-8 text."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DefinitionParseError(f"File is not valid UTF-8 ({e.reason} at byte {e.start})", path) from e
    except OSError as e:
        raise DefinitionParseError(f"Could not read file: {e.strerror or e}", path) from e
