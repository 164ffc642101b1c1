# application/services/environment_resolver.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Sequence, Tuple

from domain.exceptions import ConfigurationError
from domain.request import EnvironmentDefinition

_OVERRIDE = re.compile(r"^([^=]+)=(.*)$", re.DOTALL)


class EnvironmentSourcePort(Protocol):
    def load(self, name: str) -> EnvironmentDefinition:
        """Raise ``ConfigurationError`` when ``name`` is not defined."""
        ...


class ProcessEnvProviderPort(Protocol):
    def get(self) -> Dict[str, str]:
        ...


@dataclass(frozen=True)
class ResolvedVariables:
    env_vars: Dict[str, str] = field(default_factory=dict)
    process_env: Dict[str, str] = field(default_factory=dict)


def parse_override(raw: str) -> Tuple[str, str]:
    """Split ``name=value`` at the first ``=``; the value may contain ``=``."""
    match = _OVERRIDE.match(raw)
    if not match:
        raise ConfigurationError(f"Overridable environment variable not correct: use name=value - presented: {raw}")
    return match.group(1), match.group(2)


class EnvironmentResolver:
    """
    Builds the variable namespaces of a run, once, before the first request.

    Precedence from low to high: ambient process variables, the collection's
    ``.env`` file, the named environment, ``--env-var`` overrides. The first two
    make up ``{{process.env.*}}``; the last two make up ``{{name}}``.
    """

    def __init__(self, environments: EnvironmentSourcePort, process_env: ProcessEnvProviderPort):
        self._environments = environments
        self._process_env = process_env

    def resolve(self, env_name: Optional[str] = None, overrides: Sequence[str] = ()) -> ResolvedVariables:
        env_vars: Dict[str, str] = {}
        if env_name:
            env_vars.update(self._environments.load(env_name).enabled_variables())

        # every override is checked before any is applied
        parsed = [parse_override(raw) for raw in overrides]
        for name, value in parsed:
            env_vars[name] = value

        return ResolvedVariables(env_vars=env_vars, process_env=dict(self._process_env.get()))
