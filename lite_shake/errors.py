"""Exceptions raised by lite-shake.

Every failure is fatal for a run; callers catch ``ShakeError`` at the edge.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class ShakeError(Exception):
    """Base class for all lite-shake failures."""


class GrammarUnavailableError(ShakeError):
    """No tree-sitter JavaScript grammar could be loaded."""


class ModuleReadError(ShakeError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read module {path}: {reason}")
        self.path = path


class ModuleParseError(ShakeError):
    def __init__(self, path: Path, line: int, column: int) -> None:
        super().__init__(f"Syntax error in {path} at {line}:{column}")
        self.path = path
        self.line = line
        self.column = column


class OutputWriteError(ShakeError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


class OutputCollisionError(ShakeError):
    """Two modules map to the same output file under the flat layout."""

    def __init__(self, name: str, paths: Iterable[Path]) -> None:
        self.name = name
        self.paths = sorted(paths, key=lambda p: str(p))
        joined = ", ".join(str(p) for p in self.paths)
        super().__init__(f"Output name collision for {name!r}: {joined}")
