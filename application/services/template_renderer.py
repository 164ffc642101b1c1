# application/services/template_renderer.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

PROCESS_ENV_PREFIX = "process.env."

_PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


@dataclass(frozen=True)
class RenderSources:
    collection_vars: Dict[str, Any] = field(default_factory=dict)
    env_vars: Dict[str, Any] = field(default_factory=dict)
    process_env: Dict[str, Any] = field(default_factory=dict)


class TemplateRenderer:
    """
    Expands ``{{name}}`` and ``{{process.env.NAME}}`` placeholders.

    - ``{{name}}`` looks in collection variables first, then environment
      variables, so values captured during the run shadow the environment.
    - Unknown names are left as written, which keeps ``{{...}}`` inside JSON
      bodies that are not meant as placeholders intact.
    - Values are rendered once; a value containing ``{{...}}`` is expanded a
      second time so environment values can reference other variables.
    """

    max_depth = 3

    def render(self, s: Optional[str], src: RenderSources) -> str:
        if s is None:
            return ""
        return self._render(s, src, 0)

    def render_dict(self, values: Dict[str, str], src: RenderSources) -> Dict[str, str]:
        return {self.render(k, src): self.render(v, src) for k, v in values.items()}

    def lookup(self, name: str, src: RenderSources) -> Optional[Any]:
        if name.startswith(PROCESS_ENV_PREFIX):
            return src.process_env.get(name[len(PROCESS_ENV_PREFIX):])
        if name in src.collection_vars:
            return src.collection_vars[name]
        if name in src.env_vars:
            return src.env_vars[name]
        return None

    def _render(self, s: str, src: RenderSources, depth: int) -> str:
        if "{{" not in s:
            return s

        def replace(match: "re.Match[str]") -> str:
            value = self.lookup(match.group(1), src)
            if value is None:
                return match.group(0)
            text = _stringify(value)
            if depth + 1 < self.max_depth and "{{" in text:
                text = self._render(text, src, depth + 1)
            return text

        return _PLACEHOLDER.sub(replace, s)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)
