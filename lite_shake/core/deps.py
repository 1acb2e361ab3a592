"""Static import dependencies of a module."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Set, Union

from tree_sitter import Node as TSNode  # type: ignore

from .ast_utils import iter_nodes, string_value


def absolute(path: Union[str, Path]) -> Path:
    """Absolute, normalized path; symlinks are left alone."""
    return Path(os.path.normpath(os.path.abspath(str(path))))


def resolve_dependencies(root: TSNode, source: bytes, directory: Path) -> Set[Path]:
    """Absolute paths named by import declarations, joined onto ``directory``.

    Resolution is textual: no extension inference, no package lookup.
    """
    dependencies: Set[Path] = set()
    for node in iter_nodes(root):
        if node.type != "import_statement":
            continue
        spec = node.child_by_field_name("source")
        if spec is None:
            continue
        dependencies.add(absolute(os.path.join(str(directory), string_value(spec, source))))
    return dependencies
