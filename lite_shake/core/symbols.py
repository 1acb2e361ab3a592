"""Per-module symbol facts: import bindings, occurrences, exports, declarations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set

from tree_sitter import Node as TSNode  # type: ignore

from .ast_utils import IDENTIFIER_KINDS, iter_identifiers, iter_nodes, node_text, string_value
from .exports import (
    FUNCTION_DECL_KINDS,
    VARIABLE_DECL_KINDS,
    ExportKind,
    ExportShape,
    classify_export,
    function_name,
    variable_declaration,
)


@dataclass(frozen=True)
class ImportBinding:
    local: str
    imported: str


@dataclass
class SymbolFacts:
    bindings: Dict[str, str] = field(default_factory=dict)  # local -> imported
    import_mentions: Counter = field(default_factory=Counter)
    occurrences: Counter = field(default_factory=Counter)
    exports: Set[str] = field(default_factory=set)
    declarations: Set[str] = field(default_factory=set)
    export_shapes: List[ExportShape] = field(default_factory=list)

    @property
    def import_bindings(self) -> List[ImportBinding]:
        return [ImportBinding(local, imported) for local, imported in self.bindings.items()]

    @property
    def import_related(self) -> Set[str]:
        return set(self.import_mentions)


def extract_symbols(root: TSNode, source: bytes) -> SymbolFacts:
    """Walk a module tree once and collect its symbol facts."""
    facts = SymbolFacts()
    facts.occurrences.update(iter_identifiers(root, source))

    for node in iter_nodes(root):
        if node.type == "import_specifier":
            _add_binding(facts, node, source)

    for stmt in root.named_children:
        if stmt.type == "export_statement":
            shape = classify_export(stmt, source)
            facts.export_shapes.append(shape)
            facts.exports.update(shape.exported_names)
            if shape.kind is ExportKind.VARIABLES and shape.variables is not None:
                facts.declarations.update(shape.variables.names)
            elif shape.kind is ExportKind.FUNCTION and shape.name:
                facts.declarations.add(shape.name)
        elif stmt.type in VARIABLE_DECL_KINDS:
            facts.declarations.update(variable_declaration(stmt, source).names)
        elif stmt.type in FUNCTION_DECL_KINDS:
            name = function_name(stmt, source)
            if name:
                facts.declarations.add(name)
    return facts


def _add_binding(facts: SymbolFacts, spec: TSNode, source: bytes) -> None:
    name_node = spec.child_by_field_name("name")
    alias_node = spec.child_by_field_name("alias")
    if name_node is None:
        return
    imported = string_value(name_node, source) if name_node.type == "string" else node_text(name_node, source)
    local = node_text(alias_node, source) if alias_node is not None else imported
    facts.bindings[local] = imported
    for mention in (name_node, alias_node):
        if mention is not None and mention.type in IDENTIFIER_KINDS:
            facts.import_mentions[node_text(mention, source)] += 1
