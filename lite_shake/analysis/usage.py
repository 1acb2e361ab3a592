"""Usage propagation from an importing module into its dependencies."""

from __future__ import annotations

from typing import Set

from ..core.symbols import SymbolFacts


def used_import_locals(facts: SymbolFacts) -> Set[str]:
    """Import local names referenced outside their own import specifiers.

    Scope-free: any remaining occurrence of the name counts as a use.
    """
    remaining = facts.occurrences - facts.import_mentions
    return {local for local in facts.bindings if remaining[local] > 0}


def propagate_usage(facts: SymbolFacts) -> Set[str]:
    """Names, as exported by dependencies, that this module consumes.

    Occurrences are counted before the module is pruned, so the module's own
    received used-set plays no part. The result is not keyed per dependency;
    every dependency of the module receives it.
    """
    return {facts.bindings[local] for local in used_import_locals(facts)}
