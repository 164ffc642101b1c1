# application/services/response_query.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


class _Undefined:
    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


class ResponseQueryError(Exception):
    pass


@dataclass(frozen=True)
class ResponseView:
    """The ``res`` object visible to assertions and post-response vars."""

    status: int = 0
    status_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    response_time: float = 0

    def header(self, name: str) -> Any:
        lowered = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lowered:
                return v
        return UNDEFINED


def parse_body(text: str) -> Any:
    """JSON bodies become Python objects, everything else stays text."""
    if not text:
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


_TOKEN = re.compile(r"""\.([^.\[\]]+)|\[\s*(\d+)\s*\]|\[\s*(['"])(.*?)\3\s*\]""")
_CALL = re.compile(r"""^res\(\s*(['"])(.*)\1\s*\)$""")


def is_response_expr(expr: str) -> bool:
    expr = expr.strip()
    return expr == "res" or expr.startswith("res.") or expr.startswith("res[") or expr.startswith("res(")


def query(res: ResponseView, expr: str) -> Any:
    """
    Evaluate ``res.status``, ``res.headers.content-type``, ``res.body.items[0].id``,
    ``res.responseTime`` or ``res('items.0.id')`` against ``res``.

    Missing keys evaluate to ``UNDEFINED`` instead of raising.
    """
    expr = expr.strip()

    call = _CALL.match(expr)
    if call:
        path = call.group(2)
        return _walk(res.body, _split_dotted(path))

    if expr == "res":
        return res.body
    if not expr.startswith("res"):
        raise ResponseQueryError(f"not a response expression: {expr}")

    tokens = _tokenize(expr[3:], expr)
    if not tokens:
        return res.body

    root, rest = tokens[0], tokens[1:]
    if root == "status":
        return _walk(res.status, rest)
    if root == "statusText":
        return _walk(res.status_text, rest)
    if root == "responseTime":
        return _walk(res.response_time, rest)
    if root == "headers":
        if not rest:
            return dict(res.headers)
        return _walk(res.header(str(rest[0])), rest[1:])
    if root == "body":
        return _walk(res.body, rest)
    raise ResponseQueryError(f"unknown response field '{root}' in: {expr}")


def _tokenize(path: str, expr: str) -> List[Union[str, int]]:
    tokens: List[Union[str, int]] = []
    pos = 0
    while pos < len(path):
        m = _TOKEN.match(path, pos)
        if m is None:
            raise ResponseQueryError(f"cannot parse expression: {expr}")
        if m.group(1) is not None:
            tokens.append(m.group(1).strip())
        elif m.group(2) is not None:
            tokens.append(int(m.group(2)))
        else:
            tokens.append(m.group(4))
        pos = m.end()
    return tokens


def _split_dotted(path: str) -> List[Union[str, int]]:
    out: List[Union[str, int]] = []
    for part in path.split("."):
        if not part:
            continue
        out.append(int(part) if part.isdigit() else part)
    return out


def _walk(cur: Any, tokens: List[Union[str, int]]) -> Any:
    for token in tokens:
        if cur is UNDEFINED or cur is None:
            return UNDEFINED
        if isinstance(cur, list):
            if isinstance(token, int) or (isinstance(token, str) and token.isdigit()):
                idx = int(token)
                if idx >= len(cur):
                    return UNDEFINED
                cur = cur[idx]
            elif token == "length":
                cur = len(cur)
            else:
                return UNDEFINED
        elif isinstance(cur, dict):
            key = str(token)
            if key not in cur:
                return UNDEFINED
            cur = cur[key]
        elif isinstance(cur, str) and token == "length":
            cur = len(cur)
        else:
            return UNDEFINED
    return cur
