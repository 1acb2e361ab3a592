"""Shapes of top-level declarations and export statements.

Export statements are classified once into an ``ExportShape`` so the symbol
extractor and the pruner match on ``ExportKind`` instead of re-inspecting
node types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from tree_sitter import Node as TSNode  # type: ignore

from .ast_utils import name_of, node_text, string_value

logger = logging.getLogger(__name__)


VARIABLE_DECL_KINDS = {"lexical_declaration", "variable_declaration"}
FUNCTION_DECL_KINDS = {"function_declaration", "generator_function_declaration"}


class ExportKind(str, Enum):
    VARIABLES = "variables"  # export const a = 1, b = 2;
    FUNCTION = "function"  # export function f() {}
    BINDING = "binding"  # export class C {} and other single-name declarations
    SPECIFIERS = "specifiers"  # export { a, b as c } [from "./y.js"];
    OPAQUE = "opaque"  # export default ..., export * [as ns] from ...


@dataclass(frozen=True)
class Declarator:
    node: TSNode
    name: Optional[str]  # None when the declarator binds a destructuring pattern

    @property
    def opaque(self) -> bool:
        return self.name is None


@dataclass(frozen=True)
class VariableDeclaration:
    node: TSNode
    keyword: str
    declarators: Tuple[Declarator, ...]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.declarators if d.name is not None)


@dataclass(frozen=True)
class Specifier:
    node: TSNode
    local: str
    exported: str


@dataclass(frozen=True)
class ExportShape:
    kind: ExportKind
    node: TSNode
    variables: Optional[VariableDeclaration] = None
    name: Optional[str] = None
    specifiers: Tuple[Specifier, ...] = ()
    source: Optional[TSNode] = None

    @property
    def exported_names(self) -> Tuple[str, ...]:
        if self.kind is ExportKind.VARIABLES and self.variables is not None:
            return self.variables.names
        if self.kind in (ExportKind.FUNCTION, ExportKind.BINDING) and self.name:
            return (self.name,)
        if self.kind is ExportKind.SPECIFIERS:
            return tuple(s.exported for s in self.specifiers)
        return ()


def variable_declaration(node: TSNode, source: bytes) -> VariableDeclaration:
    keyword = node_text(node.children[0], source) if node.children else "var"
    declarators = tuple(
        Declarator(node=child, name=name_of(child.child_by_field_name("name"), source))
        for child in node.named_children
        if child.type == "variable_declarator"
    )
    return VariableDeclaration(node=node, keyword=keyword, declarators=declarators)


def function_name(node: TSNode, source: bytes) -> Optional[str]:
    return name_of(node.child_by_field_name("name"), source)


def classify_export(node: TSNode, source: bytes) -> ExportShape:
    """Classify an ``export_statement`` node."""
    child_types = {c.type for c in node.children}
    if "default" in child_types or "*" in child_types or "namespace_export" in child_types:
        return ExportShape(kind=ExportKind.OPAQUE, node=node)

    decl = node.child_by_field_name("declaration")
    if decl is not None:
        if decl.type in VARIABLE_DECL_KINDS:
            return ExportShape(kind=ExportKind.VARIABLES, node=node, variables=variable_declaration(decl, source))
        name = function_name(decl, source)
        if name is None:
            logger.debug("unrecognized export declaration %s passes through", decl.type)
            return ExportShape(kind=ExportKind.OPAQUE, node=node)
        kind = ExportKind.FUNCTION if decl.type in FUNCTION_DECL_KINDS else ExportKind.BINDING
        return ExportShape(kind=kind, node=node, name=name)

    clause = next((c for c in node.named_children if c.type == "export_clause"), None)
    if clause is None:
        return ExportShape(kind=ExportKind.OPAQUE, node=node)
    specifiers = []
    for spec in clause.named_children:
        if spec.type != "export_specifier":
            continue
        local = _specifier_name(spec.child_by_field_name("name"), source)
        alias = _specifier_name(spec.child_by_field_name("alias"), source)
        if local is None:
            continue
        specifiers.append(Specifier(node=spec, local=local, exported=alias or local))
    return ExportShape(
        kind=ExportKind.SPECIFIERS,
        node=node,
        specifiers=tuple(specifiers),
        source=node.child_by_field_name("source"),
    )


def _specifier_name(node: Optional[TSNode], source: bytes) -> Optional[str]:
    if node is None:
        return None
    if node.type == "string":
        return string_value(node, source)
    return node_text(node, source)
