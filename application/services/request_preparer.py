# application/services/request_preparer.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from application.services.template_renderer import RenderSources, TemplateRenderer
from domain.collection import CollectionRoot
from domain.request import AuthSpec, KeyValue, RequestRecord

_CONTENT_TYPES = {
    "json": "application/json",
    "graphql": "application/json",
    "text": "text/plain",
    "xml": "application/xml",
}

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


@dataclass(frozen=True)
class PreparedHttpRequest:
    method: str
    url: str
    headers: Dict[str, str]
    data: Any = None
    files: Optional[List[Tuple[str, Tuple[None, str]]]] = None
    auth: Optional[Tuple[str, str]] = None
    # body as shown in reports (decoded json, form dict, or text)
    display_data: Any = None


def _enabled(pairs: Tuple[KeyValue, ...]) -> List[KeyValue]:
    return [p for p in pairs if p.enabled]


def _set_header(headers: Dict[str, str], name: str, value: str) -> None:
    for existing in list(headers):
        if existing.lower() == name.lower():
            del headers[existing]
    headers[name] = value


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


class RequestPreparer:
    """
    Turns a parsed request plus the collection root into concrete HTTP
    arguments: interpolated url, merged headers, auth and encoded body.
    """

    def __init__(self, renderer: TemplateRenderer):
        self._renderer = renderer

    def prepare(self, request: RequestRecord, root: CollectionRoot, src: RenderSources) -> PreparedHttpRequest:
        spec = request.request

        url = self._build_url(spec.url, spec.path_params, src)

        headers: Dict[str, str] = {}
        for h in _enabled(root.headers):
            _set_header(headers, self._renderer.render(h.name, src), self._renderer.render(h.value, src))
        for h in _enabled(spec.headers):
            _set_header(headers, self._renderer.render(h.name, src), self._renderer.render(h.value, src))

        auth_spec = root.auth if spec.auth.mode == "inherit" else spec.auth
        basic = self._apply_auth(auth_spec, headers, src)

        data, files, display = self._build_body(spec.body.mode, request, headers, src)

        return PreparedHttpRequest(
            method=spec.method.upper(),
            url=url,
            headers=headers,
            data=data,
            files=files,
            auth=basic,
            display_data=display,
        )

    def _build_url(self, raw: str, path_params: Tuple[KeyValue, ...], src: RenderSources) -> str:
        url = self._renderer.render(raw, src).strip()
        for p in _enabled(path_params):
            value = self._renderer.render(p.value, src)
            url = re.sub(rf"/:{re.escape(p.name)}(?=/|\?|#|$)", lambda _m, v=value: "/" + v, url)
        if url and not _SCHEME.match(url):
            url = f"http://{url}"
        return url

    def _apply_auth(self, auth: AuthSpec, headers: Dict[str, str], src: RenderSources) -> Optional[Tuple[str, str]]:
        if auth.mode == "bearer":
            token = self._renderer.render(auth.values.get("token", ""), src)
            if not _has_header(headers, "Authorization"):
                headers["Authorization"] = f"Bearer {token}"
            return None
        if auth.mode == "basic":
            return (
                self._renderer.render(auth.values.get("username", ""), src),
                self._renderer.render(auth.values.get("password", ""), src),
            )
        return None

    def _build_body(
        self,
        mode: str,
        request: RequestRecord,
        headers: Dict[str, str],
        src: RenderSources,
    ) -> Tuple[Any, Optional[List[Tuple[str, Tuple[None, str]]]], Any]:
        body = request.request.body

        if mode in ("json", "text", "xml"):
            text = self._renderer.render(body.raw, src)
            if not _has_header(headers, "Content-Type"):
                headers["Content-Type"] = _CONTENT_TYPES[mode]
            display: Any = text
            if mode == "json":
                try:
                    display = json.loads(text)
                except ValueError:
                    display = text
            return text.encode("utf-8"), None, display

        if mode == "graphql":
            variables: Any = {}
            if body.graphql_variables.strip():
                variables = json.loads(self._renderer.render(body.graphql_variables, src))
            payload = {"query": self._renderer.render(body.raw, src), "variables": variables}
            if not _has_header(headers, "Content-Type"):
                headers["Content-Type"] = _CONTENT_TYPES[mode]
            return json.dumps(payload).encode("utf-8"), None, payload

        if mode == "form-urlencoded":
            pairs = [(self._renderer.render(f.name, src), self._renderer.render(f.value, src)) for f in _enabled(body.fields)]
            return pairs, None, dict(pairs)

        if mode == "multipart-form":
            pairs = [(self._renderer.render(f.name, src), self._renderer.render(f.value, src)) for f in _enabled(body.fields)]
            return None, [(k, (None, v)) for k, v in pairs], dict(pairs)

        return None, None, None
