# infrastructure/environment/yaml_loader.py
"""
YAML environments, an alternative to ``environments/<name>.bru``::

    variables:
      - name: baseUrl
        value: https://api.example.com
      - name: apiKey
        secret: true
      - name: legacy
        value: x
        enabled: false

A plain mapping (``variables: {baseUrl: https://...}``) is accepted as well.
"""
from __future__ import annotations

from typing import Any, List

import yaml

from domain.exceptions import DefinitionParseError
from domain.request import EnvironmentDefinition, KeyValue
from infrastructure.environment.base_loader import EnvironmentLoaderBase


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class YamlEnvironmentLoader(EnvironmentLoaderBase):
    def _load_text(self, text: str, name: str, location: str) -> EnvironmentDefinition:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DefinitionParseError(f"invalid YAML: {e}", location) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DefinitionParseError("environment file must be a mapping", location)

        raw_vars = data.get("variables") or []
        variables: List[KeyValue] = []
        secrets: List[str] = []

        if isinstance(raw_vars, dict):
            variables = [KeyValue(name=str(k), value=_scalar(v)) for k, v in raw_vars.items()]
        elif isinstance(raw_vars, list):
            for item in raw_vars:
                if not isinstance(item, dict) or "name" not in item:
                    raise DefinitionParseError(f"each variable needs a 'name': {item!r}", location)
                enabled = bool(item.get("enabled", True))
                if item.get("secret") and "value" not in item:
                    if enabled:
                        secrets.append(str(item["name"]))
                    continue
                variables.append(KeyValue(name=str(item["name"]), value=_scalar(item.get("value")), enabled=enabled))
        else:
            raise DefinitionParseError("'variables' must be a list or a mapping", location)

        return EnvironmentDefinition(
            name=str(data.get("name") or name),
            variables=tuple(variables),
            secret_names=tuple(secrets),
        )
