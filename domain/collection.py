# domain/collection.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from domain.request import AuthSpec, KeyValue

DEFAULT_IGNORE = ("node_modules", ".git")


@dataclass(frozen=True)
class CollectionConfig:
    """Contents of ``bruno.json``."""

    name: str = ""
    version: str = "1"
    type: str = "collection"
    ignore: Tuple[str, ...] = DEFAULT_IGNORE
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CollectionRoot:
    """Settings from ``collection.bru`` shared by every request."""

    headers: Tuple[KeyValue, ...] = ()
    auth: AuthSpec = field(default_factory=AuthSpec)
    vars_pre_request: Tuple[KeyValue, ...] = ()
    vars_post_response: Tuple[KeyValue, ...] = ()
    script_pre_request: str = ""
    script_post_response: str = ""
    tests: str = ""
    docs: str = ""
