# infrastructure/collection/bru_lexer.py
"""
Block level reader for the ``.bru`` format.

A file is a sequence of top-level blocks::

    meta {
      name: Get user
      seq: 2
    }

    vars:secret [
      apiKey
    ]

Block bodies are indented by two spaces and closed by ``}`` / ``]`` in the
first column. Bodies are kept as raw lines here; ``bru_parser`` decides per
block name whether they are key/value pairs, a list or free text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from domain.exceptions import DefinitionParseError
from domain.request import KeyValue

INDENT = "  "

_HEADER = re.compile(r"^(?P<name>[A-Za-z][\w:.\-]*)\s*(?P<open>[{\[])\s*$")
_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class BruBlock:
    name: str
    kind: str  # "{" or "["
    lines: Tuple[str, ...]
    line_no: int


def read_blocks(text: str, location: str = "") -> List[BruBlock]:
    blocks: List[BruBlock] = []
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i].rstrip()
        if not line.strip():
            i += 1
            continue

        header = _HEADER.match(line)
        if header is None:
            raise DefinitionParseError(f"unexpected content outside of a block: {line.strip()!r}", location, i + 1)

        name, opener = header.group("name"), header.group("open")
        closer = _CLOSERS[opener]
        start = i + 1
        body: List[str] = []
        i += 1
        while i < len(lines) and lines[i].rstrip() != closer:
            body.append(lines[i])
            i += 1
        if i >= len(lines):
            raise DefinitionParseError(f"block '{name}' is not closed", location, start)

        blocks.append(BruBlock(name=name, kind=opener, lines=tuple(body), line_no=start))
        i += 1

    return blocks


def _dedent(line: str) -> str:
    if line.startswith(INDENT):
        return line[len(INDENT):]
    return line.lstrip(" ")


def block_text(block: BruBlock) -> str:
    out = [_dedent(line.rstrip("\r")) for line in block.lines]
    while out and not out[0].strip():
        out.pop(0)
    while out and not out[-1].strip():
        out.pop()
    return "\n".join(out)


def block_pairs(block: BruBlock, location: str = "") -> Tuple[KeyValue, ...]:
    pairs: List[KeyValue] = []
    for offset, raw in enumerate(block.lines, start=1):
        line = raw.strip()
        if not line:
            continue
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            raise DefinitionParseError(
                f"expected 'name: value' in block '{block.name}', got {line!r}",
                location,
                block.line_no + offset,
            )
        enabled = True
        key = key.strip()
        if key.startswith("~"):
            enabled = False
            key = key[1:].strip()
        pairs.append(KeyValue(name=key, value=value.strip(), enabled=enabled))
    return tuple(pairs)


def block_list(block: BruBlock) -> Tuple[KeyValue, ...]:
    items: List[KeyValue] = []
    for raw in block.lines:
        for part in raw.split(","):
            name = part.strip()
            if not name:
                continue
            enabled = not name.startswith("~")
            items.append(KeyValue(name=name.lstrip("~").strip(), value="", enabled=enabled))
    return tuple(items)
