"""Usage propagation and pruning over parsed modules."""

def __getattr__(name):
    """Lazy import to avoid circular dependencies."""

    if name in ("propagate_usage", "used_import_locals"):
        from .usage import propagate_usage, used_import_locals
        return locals()[name]

    if name in ("prune", "PruneResult"):
        from .pruner import prune, PruneResult
        return locals()[name]

    if name == "close_over_references":
        from .liveness import close_over_references
        return close_over_references

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

__all__ = [
    "propagate_usage",
    "used_import_locals",
    "prune",
    "PruneResult",
    "close_over_references",
]
