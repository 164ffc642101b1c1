# application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


class HttpClientError(Exception):
    """Transport level failure: DNS, connection refused, TLS, timeout."""


@dataclass(frozen=True)
class HttpResponse:
    status: int
    reason: str
    url: str
    text: str
    headers: Dict[str, str]
    elapsed_ms: float = 0
    content: Optional[bytes] = None


class HttpClientPort(ABC):
    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
        files: Optional[List[Tuple[str, Tuple[None, str]]]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> HttpResponse:
        ...

    @abstractmethod
    def close(self) -> None:
        ...
