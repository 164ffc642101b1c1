# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key"}
MASK = "********"


def mask_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``headers`` safe to put into debug logs."""
    return {k: (MASK if k.lower() in SENSITIVE_HEADERS and v is not None else v) for k, v in headers.items()}
