# domain/run.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from domain.collection import CollectionConfig, CollectionRoot


@dataclass
class RunContext:
    """
    Everything one request execution may read.

    ``collection_vars`` is shared by reference across the whole run and is the
    only field request execution is allowed to write to.
    """

    collection_path: Path = field(default_factory=Path.cwd)
    run_id: str = ""

    collection_vars: Dict[str, Any] = field(default_factory=dict)
    env_vars: Dict[str, str] = field(default_factory=dict)
    process_env: Dict[str, str] = field(default_factory=dict)

    config: CollectionConfig = field(default_factory=CollectionConfig)
    root: CollectionRoot = field(default_factory=CollectionRoot)
