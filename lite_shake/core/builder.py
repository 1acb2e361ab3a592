"""Module graph construction: parse every reachable module once, merge used-sets."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from tree_sitter import Parser  # type: ignore

from ..analysis.usage import propagate_usage
from .deps import absolute, resolve_dependencies
from .languages import create_parser
from .source import ParsedModule, read_module
from .symbols import SymbolFacts, extract_symbols

logger = logging.getLogger(__name__)


@dataclass
class ModuleRecord:
    module: ParsedModule
    facts: SymbolFacts
    dependencies: Set[Path]
    propagated: Set[str]
    used: Set[str] = field(default_factory=set)
    importers: Set[Path] = field(default_factory=set)

    @property
    def path(self) -> Path:
        return self.module.path


@dataclass
class ModuleGraph:
    entry: Path
    records: Dict[Path, ModuleRecord] = field(default_factory=dict)

    def __getitem__(self, path: Path) -> ModuleRecord:
        return self.records[path]

    def __contains__(self, path: object) -> bool:
        return path in self.records

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)

    def common_root(self) -> Path:
        return Path(os.path.commonpath([str(p.parent) for p in self.records]))

    def find_cycles(self) -> List[Tuple[Path, Path]]:
        """Back edges (importer, imported) found by depth-first search from the entry."""
        back_edges: List[Tuple[Path, Path]] = []
        on_path: Set[Path] = {self.entry}
        done: Set[Path] = set()
        stack = [(self.entry, iter(sorted(self.records[self.entry].dependencies)))]
        while stack:
            path, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                on_path.discard(path)
                done.add(path)
                continue
            if child in on_path:
                back_edges.append((path, child))
            elif child not in done and child in self.records:
                on_path.add(child)
                stack.append((child, iter(sorted(self.records[child].dependencies))))
        return back_edges


class ModuleGraphBuilder:
    def __init__(self, parser: Optional[Parser] = None) -> None:
        self.parser = parser or create_parser("javascript")

    def load(self, path: Path) -> ModuleRecord:
        module = read_module(path, self.parser)
        facts = extract_symbols(module.root, module.source)
        return ModuleRecord(
            module=module,
            facts=facts,
            dependencies=resolve_dependencies(module.root, module.source, module.directory),
            propagated=propagate_usage(facts),
        )

    def build(self, entry: Union[str, Path]) -> ModuleGraph:
        """Breadth-first discovery from ``entry``.

        Each edge merges the importer's propagated names into the dependency's
        used-set. Propagation only depends on the importer's own source, so one
        pass over the edges is already the fixed point, cycles included.
        """
        entry = absolute(entry)
        graph = ModuleGraph(entry=entry)
        graph.records[entry] = self.load(entry)
        queue = deque([entry])
        while queue:
            path = queue.popleft()
            record = graph.records[path]
            for dep in sorted(record.dependencies):
                if dep not in graph.records:
                    graph.records[dep] = self.load(dep)
                    queue.append(dep)
                target = graph.records[dep]
                target.used |= record.propagated
                target.importers.add(path)
                logger.debug("edge %s -> %s used=%s", path.name, dep.name, sorted(record.propagated))
        return graph
