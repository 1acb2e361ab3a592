"""Reading, parsing and regenerating module sources.

tree-sitter trees are read-only, so a rewrite is expressed as a list of
byte-range edits against the original source and applied in one pass by
``splice``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from tree_sitter import Node as TSNode, Parser, Tree  # type: ignore

from ..errors import ModuleParseError, ModuleReadError
from .ast_utils import first_error
from .versioning import content_hash

logger = logging.getLogger(__name__)


@dataclass
class ParsedModule:
    path: Path
    source: bytes
    tree: Tree
    blob_hash: str = field(default="")

    @property
    def root(self) -> TSNode:
        return self.tree.root_node

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class SourceEdit:
    """Replace ``source[start:end]`` with ``text`` (empty text removes)."""

    start: int
    end: int
    text: str = ""


def parse_source(path: Path, source: bytes, parser: Parser) -> ParsedModule:
    tree = parser.parse(source)
    bad = first_error(tree.root_node)
    if bad is not None:
        line, col = bad.start_point
        raise ModuleParseError(path, line + 1, col + 1)
    return ParsedModule(path=path, source=source, tree=tree, blob_hash=content_hash(source))


def read_module(path: Path, parser: Parser) -> ParsedModule:
    try:
        source = path.read_bytes()
    except OSError as e:
        raise ModuleReadError(path, e.strerror or str(e)) from e
    logger.debug("parsing %s (%d bytes)", path, len(source))
    return parse_source(path, source, parser)


def removal_edit(module: ParsedModule, node: TSNode) -> SourceEdit:
    """Remove ``node``; swallow its line when nothing else shares it."""
    src = module.source
    start, end = node.start_byte, node.end_byte

    line_start = src.rfind(b"\n", 0, start) + 1
    if src[line_start:start].strip():
        return SourceEdit(start, end)

    line_end = src.find(b"\n", end)
    if line_end == -1:
        line_end = len(src)
    if src[end:line_end].strip():
        return SourceEdit(start, end)
    if line_end < len(src):
        line_end += 1
    return SourceEdit(line_start, line_end)


def splice(module: ParsedModule, edits: Optional[Iterable[SourceEdit]] = None) -> bytes:
    """Serialize ``module`` with ``edits`` applied; untouched bytes are copied as-is."""
    ordered: List[SourceEdit] = sorted(edits or [], key=lambda e: (e.start, e.end))
    out = bytearray()
    cursor = 0
    for edit in ordered:
        if edit.start < cursor:
            raise ValueError(f"Overlapping edits at byte {edit.start} in {module.path}")
        out += module.source[cursor : edit.start]
        out += edit.text.encode("utf-8")
        cursor = edit.end
    out += module.source[cursor:]
    return bytes(out)


def generate(module: ParsedModule, edits: Optional[Iterable[SourceEdit]] = None) -> str:
    return splice(module, edits).decode("utf-8", errors="replace")
