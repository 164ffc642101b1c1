# infrastructure/collection/bru_parser.py
from __future__ import annotations

from pathlib import PurePath
from typing import Dict, List, Optional, Tuple

from domain.collection import CollectionRoot
from domain.exceptions import DefinitionParseError
from domain.request import (
    AssertionSpec,
    AuthSpec,
    BodySpec,
    EnvironmentDefinition,
    HttpRequestSpec,
    KeyValue,
    RequestRecord,
    find_value,
)
from infrastructure.collection.bru_lexer import BruBlock, block_list, block_pairs, block_text, read_blocks

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head", "connect", "trace")

TEXT_BLOCKS = {
    "body:json",
    "body:text",
    "body:xml",
    "body:sparql",
    "body:graphql",
    "body:graphql:vars",
    "script:pre-request",
    "script:post-response",
    "tests",
    "docs",
}


class BruParser:
    """Parses ``.bru`` request, environment and ``collection.bru`` files."""

    def parse(self, text: str, location: str) -> RequestRecord:
        blocks = self._index(read_blocks(text, location), location)

        meta = self._pairs(blocks, "meta", location)
        name = find_value(meta, "name") or PurePath(location).stem
        seq = self._seq(find_value(meta, "seq"), blocks.get("meta"), location)

        method, http = self._http_block(blocks, location)
        body_mode = find_value(http, "body") or "none"
        auth_mode = find_value(http, "auth") or "none"

        request = HttpRequestSpec(
            method=method.upper(),
            url=find_value(http, "url") or "",
            headers=self._pairs(blocks, "headers", location),
            params=self._pairs(blocks, "params:query", location) or self._pairs(blocks, "query", location),
            path_params=self._pairs(blocks, "params:path", location),
            body=self._body(body_mode, blocks, location),
            auth=self._auth(auth_mode, blocks, location),
        )

        return RequestRecord(
            name=name,
            location=location,
            seq=seq,
            type=find_value(meta, "type") or "http",
            request=request,
            vars_pre_request=self._pairs(blocks, "vars:pre-request", location),
            vars_post_response=self._pairs(blocks, "vars:post-response", location),
            assertions=tuple(
                AssertionSpec(lhs=p.name, rhs=p.value, enabled=p.enabled)
                for p in self._pairs(blocks, "assert", location)
            ),
            script_pre_request=self._text(blocks, "script:pre-request"),
            script_post_response=self._text(blocks, "script:post-response"),
            tests=self._text(blocks, "tests"),
            docs=self._text(blocks, "docs"),
        )

    def parse_environment(self, text: str, name: str, location: str = "") -> EnvironmentDefinition:
        blocks = self._index(read_blocks(text, location), location)
        secrets = blocks.get("vars:secret")
        secret_names: Tuple[str, ...] = ()
        if secrets is not None:
            secret_names = tuple(item.name for item in block_list(secrets) if item.enabled)
        return EnvironmentDefinition(
            name=name,
            variables=self._pairs(blocks, "vars", location),
            secret_names=secret_names,
        )

    def parse_collection_root(self, text: str, location: str = "") -> CollectionRoot:
        blocks = self._index(read_blocks(text, location), location)
        auth_block = self._pairs(blocks, "auth", location)
        return CollectionRoot(
            headers=self._pairs(blocks, "headers", location),
            auth=self._auth(find_value(auth_block, "mode") or "none", blocks, location),
            vars_pre_request=self._pairs(blocks, "vars:pre-request", location),
            vars_post_response=self._pairs(blocks, "vars:post-response", location),
            script_pre_request=self._text(blocks, "script:pre-request"),
            script_post_response=self._text(blocks, "script:post-response"),
            tests=self._text(blocks, "tests"),
            docs=self._text(blocks, "docs"),
        )

    def _index(self, blocks: List[BruBlock], location: str) -> Dict[str, BruBlock]:
        out: Dict[str, BruBlock] = {}
        for block in blocks:
            if block.name in out:
                raise DefinitionParseError(f"duplicate block '{block.name}'", location, block.line_no)
            if block.name in TEXT_BLOCKS and block.kind != "{":
                raise DefinitionParseError(f"block '{block.name}' must use braces", location, block.line_no)
            out[block.name] = block
        return out

    def _pairs(self, blocks: Dict[str, BruBlock], name: str, location: str) -> Tuple[KeyValue, ...]:
        block = blocks.get(name)
        if block is None:
            return ()
        return block_pairs(block, location)

    def _text(self, blocks: Dict[str, BruBlock], name: str) -> str:
        block = blocks.get(name)
        if block is None:
            return ""
        return block_text(block)

    def _seq(self, raw: Optional[str], meta_block: Optional[BruBlock], location: str) -> int:
        if raw is None or raw == "":
            return 0
        try:
            return int(raw)
        except ValueError:
            line = meta_block.line_no if meta_block is not None else None
            raise DefinitionParseError(f"seq must be an integer, got {raw!r}", location, line) from None

    def _http_block(self, blocks: Dict[str, BruBlock], location: str) -> Tuple[str, Tuple[KeyValue, ...]]:
        found = [m for m in HTTP_METHODS if m in blocks]
        if len(found) > 1:
            raise DefinitionParseError(f"more than one http method block: {', '.join(found)}", location)
        if not found:
            return "get", ()
        method = found[0]
        return method, block_pairs(blocks[method], location)

    def _body(self, mode: str, blocks: Dict[str, BruBlock], location: str) -> BodySpec:
        if mode in ("form-urlencoded", "multipart-form"):
            return BodySpec(mode=mode, fields=self._pairs(blocks, f"body:{mode}", location))
        if mode == "graphql":
            return BodySpec(
                mode=mode,
                raw=self._text(blocks, "body:graphql"),
                graphql_variables=self._text(blocks, "body:graphql:vars"),
            )
        if mode == "none":
            return BodySpec()
        return BodySpec(mode=mode, raw=self._text(blocks, f"body:{mode}"))

    def _auth(self, mode: str, blocks: Dict[str, BruBlock], location: str) -> AuthSpec:
        if mode in ("none", "inherit"):
            return AuthSpec(mode=mode)
        values = {p.name: p.value for p in self._pairs(blocks, f"auth:{mode}", location) if p.enabled}
        return AuthSpec(mode=mode, values=values)
