"""JavaScript grammar loader for tree-sitter."""

from __future__ import annotations

import ctypes
import functools
import os
from pathlib import Path
from typing import Optional

from tree_sitter import Language, Parser  # type: ignore

from ..errors import GrammarUnavailableError


SUPPORTED_LANGUAGES = {
    "javascript": "javascript",
    # module syntax is shared; JSX and TS-only syntax are not modeled
    "js": "javascript",
    "mjs": "javascript",
}

LANGUAGE_PROVIDER_MODULE = {
    "javascript": "tree_sitter_javascript",
}

LANGUAGE_FUNC = {
    "javascript": "tree_sitter_javascript",
}

GRAMMAR_SO_ENV = "LITE_SHAKE_GRAMMAR_SO"


def normalize_lang(value: str) -> str:
    key = value.lower()
    if key not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {value}")
    return SUPPORTED_LANGUAGES[key]


@functools.lru_cache(maxsize=None)
def create_parser(lang: str = "javascript", grammar_so: Optional[str] = None) -> Parser:
    """Create a parser for the given language.

    Resolution order:
    1) an explicit grammar shared object (argument or $LITE_SHAKE_GRAMMAR_SO)
    2) the tree_sitter_<lang> provider module
    3) raise GrammarUnavailableError
    """
    lang = normalize_lang(lang)
    errors = []

    so_value = grammar_so or os.environ.get(GRAMMAR_SO_ENV, "").strip()
    if so_value:
        so_path = Path(so_value).expanduser().resolve()
        try:
            return _make_parser(_load_language_from_so(lang, so_path))
        except Exception as e:
            errors.append(f"local_so({so_path}) failed: {e!r}")

    provider_mod = LANGUAGE_PROVIDER_MODULE.get(lang)
    if provider_mod:
        try:
            mod = __import__(provider_mod)
            return _make_parser(Language(mod.language()))
        except Exception as e:
            errors.append(f"provider_module({provider_mod}) failed: {e!r}")

    detail = "; ".join(errors) if errors else "no detailed error captured"
    raise GrammarUnavailableError(f"No parser available for language: {lang}. Details: {detail}")


def _make_parser(language: Language) -> Parser:
    parser = Parser()
    if hasattr(parser, "set_language"):
        parser.set_language(language)  # tree_sitter<=0.21
    else:
        parser.language = language  # tree_sitter>=0.22
    return parser


def _load_language_from_so(lang: str, so_path: Path) -> Language:
    """Load a tree-sitter Language from a grammar .so via its TSLanguage pointer."""
    if not so_path.exists():
        raise FileNotFoundError(str(so_path))
    func_name = LANGUAGE_FUNC[lang]
    lib = ctypes.CDLL(str(so_path))
    if not hasattr(lib, func_name):
        raise RuntimeError(f"Grammar library missing symbol: {func_name}")
    func = getattr(lib, func_name)
    func.restype = ctypes.c_void_p
    ptr = func()
    if not ptr:
        raise RuntimeError(f"Failed to obtain TSLanguage* from {func_name}")
    return Language(ptr)
