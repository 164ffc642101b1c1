# domain/request.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

BRU_SUFFIX = ".bru"


@dataclass(frozen=True)
class KeyValue:
    name: str
    value: str
    enabled: bool = True


@dataclass(frozen=True)
class AuthSpec:
    mode: str = "none"  # none | inherit | bearer | basic
    values: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BodySpec:
    mode: str = "none"  # none | json | text | xml | form-urlencoded | multipart-form | graphql
    raw: str = ""
    fields: Tuple[KeyValue, ...] = ()
    graphql_variables: str = ""


@dataclass(frozen=True)
class AssertionSpec:
    lhs: str
    rhs: str
    enabled: bool = True


@dataclass(frozen=True)
class HttpRequestSpec:
    method: str = "GET"
    url: str = ""
    headers: Tuple[KeyValue, ...] = ()
    params: Tuple[KeyValue, ...] = ()
    path_params: Tuple[KeyValue, ...] = ()
    body: BodySpec = field(default_factory=BodySpec)
    auth: AuthSpec = field(default_factory=AuthSpec)


@dataclass(frozen=True)
class RequestRecord:
    """
    One parsed request definition.

    Created once by the loader and never mutated afterwards. ``name`` is the
    jump target used by ``bru.setNextRequest``; ``seq`` only drives the static
    ordering of siblings inside one directory.
    """

    name: str
    location: str
    seq: int = 0
    type: str = "http"
    request: HttpRequestSpec = field(default_factory=HttpRequestSpec)
    vars_pre_request: Tuple[KeyValue, ...] = ()
    vars_post_response: Tuple[KeyValue, ...] = ()
    assertions: Tuple[AssertionSpec, ...] = ()
    script_pre_request: str = ""
    script_post_response: str = ""
    tests: str = ""
    docs: str = ""

    @property
    def suitename(self) -> str:
        if self.location.endswith(BRU_SUFFIX):
            return self.location[: -len(BRU_SUFFIX)]
        return self.location


@dataclass(frozen=True)
class EnvironmentDefinition:
    name: str
    variables: Tuple[KeyValue, ...] = ()
    secret_names: Tuple[str, ...] = ()

    def enabled_variables(self) -> Dict[str, str]:
        out: Dict[str, str] = {name: "" for name in self.secret_names}
        for var in self.variables:
            if var.enabled:
                out[var.name] = var.value
        return out


def find_value(pairs: Tuple[KeyValue, ...], name: str) -> Optional[str]:
    for pair in pairs:
        if pair.enabled and pair.name == name:
            return pair.value
    return None
