"""Shared fixtures: small ES module trees on disk and in memory."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from lite_shake.core.languages import create_parser
from lite_shake.core.source import ParsedModule, parse_source


def dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def parse() -> Callable[..., ParsedModule]:
    parser = create_parser("javascript")

    def _parse(text: str, path: str = "/virtual/src/mod.js") -> ParsedModule:
        return parse_source(Path(path), dedent(text).encode("utf-8"), parser)

    return _parse


@pytest.fixture
def project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: source}`` under ``tmp_path/src`` and return that directory."""

    def _write(files: Dict[str, str]) -> Path:
        root = tmp_path / "src"
        for rel, text in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(text), encoding="utf-8")
        return root

    return _write


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def diamond_files() -> Dict[str, str]:
    """entry -> left, right -> shared; each side consumes a different name."""
    return {
        "entry.js": """
            import { a } from './left.js';
            import { b } from './right.js';
            console.log(a, b);
            """,
        "left.js": """
            import { s1 } from './shared.js';
            export const a = s1;
            """,
        "right.js": """
            import { s2 } from './shared.js';
            export const b = s2;
            """,
        "shared.js": """
            export const s1 = 1;
            export const s2 = 2;
            export const s3 = 3;
            """,
    }


@pytest.fixture
def cycle_files() -> Dict[str, str]:
    """entry -> a -> b -> a."""
    return {
        "entry.js": """
            import { a } from './a.js';
            console.log(a);
            """,
        "a.js": """
            import { b } from './b.js';
            export const a = b;
            """,
        "b.js": """
            import { a } from './a.js';
            export const b = 1;
            export function c() { return a; }
            """,
    }
