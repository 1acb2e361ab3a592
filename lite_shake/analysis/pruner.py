"""Removal of unused top-level declarations and named exports.

Rules, by statement:

- ``export const/let/var``: a declarator survives if it is exported or used,
  and then, being a top-level variable declaration itself, only if it is used.
- ``export function``: survives only if used. Being exported does not protect
  a function.
- ``export class`` (any other single-name declaration): survives if exported
  or used.
- ``export { ... } [from ...]``: specifiers survive if exported or used.
- plain ``const/let/var`` and ``function``: survive only if used.

Everything else, including default and namespace exports, passes through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, List, Sequence, Set

from tree_sitter import Node as TSNode  # type: ignore

from ..core.ast_utils import node_text
from ..core.exports import (
    FUNCTION_DECL_KINDS,
    VARIABLE_DECL_KINDS,
    Declarator,
    ExportKind,
    ExportShape,
    classify_export,
    function_name,
    variable_declaration,
)
from ..core.source import ParsedModule, SourceEdit, removal_edit

logger = logging.getLogger(__name__)


@dataclass
class PruneResult:
    edits: List[SourceEdit] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    used: Set[str] = field(default_factory=set)


def prune(module: ParsedModule, used: AbstractSet[str], exports: AbstractSet[str]) -> PruneResult:
    """Compute the edits that drop everything ``used``/``exports`` do not protect."""
    result = PruneResult(used=set(used))
    src = module.source
    for stmt in module.root.named_children:
        if stmt.type == "export_statement":
            _prune_export(module, classify_export(stmt, src), used, exports, result)
        elif stmt.type in VARIABLE_DECL_KINDS:
            decl = variable_declaration(stmt, src)
            keep = [d for d in decl.declarators if d.opaque or d.name in used]
            _apply_declarators(module, stmt, decl.keyword, decl.declarators, keep, "", result)
        elif stmt.type in FUNCTION_DECL_KINDS:
            name = function_name(stmt, src)
            if name is not None and name not in used:
                result.edits.append(removal_edit(module, stmt))
                result.removed.append(name)
    return result


def _prune_export(
    module: ParsedModule,
    shape: ExportShape,
    used: AbstractSet[str],
    exports: AbstractSet[str],
    result: PruneResult,
) -> None:
    if shape.kind is ExportKind.VARIABLES and shape.variables is not None:
        decl = shape.variables
        keep = [d for d in decl.declarators if d.opaque or d.name in exports or d.name in used]
        keep = [d for d in keep if d.opaque or d.name in used]
        _apply_declarators(module, shape.node, decl.keyword, decl.declarators, keep, "export ", result)
    elif shape.kind is ExportKind.FUNCTION:
        if shape.name not in used:
            result.edits.append(removal_edit(module, shape.node))
            result.removed.append(shape.name)
    elif shape.kind is ExportKind.BINDING:
        if shape.name not in exports and shape.name not in used:
            result.edits.append(removal_edit(module, shape.node))
            result.removed.append(shape.name)
    elif shape.kind is ExportKind.SPECIFIERS:
        keep = [s for s in shape.specifiers if s.exported in exports or s.exported in used]
        dropped = [s.exported for s in shape.specifiers if s not in keep]
        if not dropped:
            return
        result.removed.extend(dropped)
        if not keep:
            result.edits.append(removal_edit(module, shape.node))
            return
        src = module.source
        text = "export { " + ", ".join(node_text(s.node, src) for s in keep) + " }"
        if shape.source is not None:
            text += " from " + node_text(shape.source, src)
        result.edits.append(SourceEdit(shape.node.start_byte, shape.node.end_byte, text + ";"))
    else:
        logger.debug("%s: %s export passes through", module.path, shape.kind.value)


def _apply_declarators(
    module: ParsedModule,
    stmt: TSNode,
    keyword: str,
    declarators: Sequence[Declarator],
    keep: Sequence[Declarator],
    prefix: str,
    result: PruneResult,
) -> None:
    if len(keep) == len(declarators):
        return
    result.removed.extend(d.name for d in declarators if d not in keep and d.name is not None)
    if not keep:
        result.edits.append(removal_edit(module, stmt))
        return
    body = ", ".join(node_text(d.node, module.source) for d in keep)
    result.edits.append(SourceEdit(stmt.start_byte, stmt.end_byte, f"{prefix}{keyword} {body};"))
