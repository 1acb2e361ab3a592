"""Close a used-set over references between a module's own top-level statements.

A declaration whose name is live contributes the identifiers it mentions;
statements the pruner never removes contribute theirs unconditionally.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, List, Optional, Set

from tree_sitter import Node as TSNode  # type: ignore

from ..core.ast_utils import iter_identifiers
from ..core.exports import (
    FUNCTION_DECL_KINDS,
    VARIABLE_DECL_KINDS,
    ExportKind,
    VariableDeclaration,
    classify_export,
    function_name,
    variable_declaration,
)
from ..core.source import ParsedModule


def close_over_references(module: ParsedModule, used: AbstractSet[str]) -> Set[str]:
    src = module.source
    deferred: Dict[str, List[TSNode]] = {}
    roots: List[TSNode] = []

    for stmt in module.root.named_children:
        if stmt.type in {"import_statement", "comment"}:
            continue
        if stmt.type in VARIABLE_DECL_KINDS:
            _defer_variables(variable_declaration(stmt, src), deferred, roots)
        elif stmt.type in FUNCTION_DECL_KINDS:
            _defer(function_name(stmt, src), stmt, deferred, roots)
        elif stmt.type == "export_statement":
            shape = classify_export(stmt, src)
            if shape.kind is ExportKind.VARIABLES and shape.variables is not None:
                _defer_variables(shape.variables, deferred, roots)
            elif shape.kind is ExportKind.FUNCTION:
                _defer(shape.name, stmt, deferred, roots)
            elif shape.kind is ExportKind.SPECIFIERS:
                # names in `export { a } from "./y.js"` belong to ./y.js
                if shape.source is None:
                    roots.extend(s.node for s in shape.specifiers)
            else:
                roots.append(stmt)
        else:
            roots.append(stmt)

    live = set(used)
    pending = list(live)

    def mark(node: TSNode) -> None:
        for ref in iter_identifiers(node, src):
            if ref not in live:
                live.add(ref)
                pending.append(ref)

    for node in roots:
        mark(node)
    while pending:
        for node in deferred.pop(pending.pop(), []):
            mark(node)
    return live


def _defer(name: Optional[str], node: TSNode, deferred: Dict[str, List[TSNode]], roots: List[TSNode]) -> None:
    if name is None:
        roots.append(node)
    else:
        deferred.setdefault(name, []).append(node)


def _defer_variables(decl: VariableDeclaration, deferred: Dict[str, List[TSNode]], roots: List[TSNode]) -> None:
    for declarator in decl.declarators:
        value = declarator.node.child_by_field_name("value")
        if declarator.opaque:
            roots.append(declarator.node)
        elif value is not None:
            deferred.setdefault(declarator.name, []).append(value)
