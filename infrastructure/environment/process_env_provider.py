# infrastructure/environment/process_env_provider.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

DOTENV_FILE = ".env"


class ProcessEnvProvider:
    """
    Values for ``{{process.env.NAME}}``.

    Starts from the ambient process environment; entries of ``<collection>/.env``
    are layered on top and win on collisions.
    """

    def __init__(self, collection_path: Path, environ: Optional[Mapping[str, str]] = None):
        self._collection_path = collection_path
        self._environ = environ

    def get(self) -> Dict[str, str]:
        values: Dict[str, str] = dict(os.environ if self._environ is None else self._environ)

        dotenv_path = self._collection_path / DOTENV_FILE
        if dotenv_path.is_file():
            for key, value in dotenv_values(dotenv_path).items():
                values[key] = "" if value is None else value

        return values
