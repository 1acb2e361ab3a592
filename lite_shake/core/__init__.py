"""Parsing, symbol facts and module graph construction for lite-shake."""

def __getattr__(name):
    """Lazy import to avoid circular dependencies."""

    if name in ("ModuleGraph", "ModuleGraphBuilder", "ModuleRecord"):
        from .builder import ModuleGraph, ModuleGraphBuilder, ModuleRecord
        return locals()[name]

    if name in ("ParsedModule", "SourceEdit", "read_module", "parse_source", "generate", "splice"):
        from .source import ParsedModule, SourceEdit, read_module, parse_source, generate, splice
        return locals()[name]

    if name in ("ExportKind", "ExportShape", "classify_export"):
        from .exports import ExportKind, ExportShape, classify_export
        return locals()[name]

    if name in ("SymbolFacts", "ImportBinding", "extract_symbols"):
        from .symbols import SymbolFacts, ImportBinding, extract_symbols
        return locals()[name]

    if name == "resolve_dependencies":
        from .deps import resolve_dependencies
        return resolve_dependencies

    if name in ("create_parser", "normalize_lang"):
        from .languages import create_parser, normalize_lang
        return locals()[name]

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

__all__ = [
    "ModuleGraph",
    "ModuleGraphBuilder",
    "ModuleRecord",
    "ParsedModule",
    "SourceEdit",
    "read_module",
    "parse_source",
    "generate",
    "splice",
    "ExportKind",
    "ExportShape",
    "classify_export",
    "SymbolFacts",
    "ImportBinding",
    "extract_symbols",
    "resolve_dependencies",
    "create_parser",
    "normalize_lang",
]
