"""Small helpers over tree-sitter nodes."""

from __future__ import annotations

from typing import Iterator, Optional

from tree_sitter import Node as TSNode  # type: ignore


IDENTIFIER_KINDS = {
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "statement_identifier",
}


def node_text(node: TSNode, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def iter_nodes(root: TSNode) -> Iterator[TSNode]:
    """Preorder traversal."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_identifiers(root: TSNode, source: bytes) -> Iterator[str]:
    for node in iter_nodes(root):
        if node.type in IDENTIFIER_KINDS:
            yield node_text(node, source)


def string_value(node: TSNode, source: bytes) -> str:
    """Value of a string literal node without its quotes."""
    text = node_text(node, source)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {"'", '"'}:
        return text[1:-1]
    return text


def name_of(node: Optional[TSNode], source: bytes) -> Optional[str]:
    """Name bound by an identifier node; None for patterns and missing nodes."""
    if node is None or node.type not in IDENTIFIER_KINDS:
        return None
    return node_text(node, source)


def first_error(root: TSNode) -> Optional[TSNode]:
    if not root.has_error:
        return None
    for node in iter_nodes(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None
