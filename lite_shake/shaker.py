"""Tree shaking driver.

A run has three phases:

1. build the module graph from the entry, parsing each module once and merging
   the used-sets of all incoming edges;
2. prune every non-entry module that received a non-empty used-set;
3. emit each module (pruned or verbatim) under the output directory.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .analysis.liveness import close_over_references
from .analysis.pruner import PruneResult, prune
from .core.builder import ModuleGraph, ModuleGraphBuilder, ModuleRecord
from .core.deps import absolute
from .core.languages import create_parser
from .core.source import splice
from .core.versioning import graph_fingerprint
from .emit import OutputWriter, plan_outputs
from .models import ModuleReport, ShakeReport
from .settings import Settings

logger = logging.getLogger(__name__)


class TreeShaker:
    def __init__(self, settings: Optional[Settings] = None, builder: Optional[ModuleGraphBuilder] = None) -> None:
        self.settings = settings or Settings()
        self.builder = builder or ModuleGraphBuilder(create_parser("javascript", self.settings.grammar_so or None))

    def analyze(self, entry: Union[str, Path]) -> ModuleGraph:
        return self.builder.build(entry)

    def shake_module(self, graph: ModuleGraph, record: ModuleRecord) -> Tuple[bytes, Optional[PruneResult]]:
        """Return the module's output bytes and the prune result, if it was pruned."""
        if record.path == graph.entry or not record.used:
            return splice(record.module), None
        used = record.used
        if self.settings.local_closure:
            used = close_over_references(record.module, used)
        result = prune(record.module, used, record.facts.exports)
        return splice(record.module, result.edits), result

    async def run_async(self, entry: Union[str, Path], out_dir: Optional[Union[str, Path]] = None) -> ShakeReport:
        target = out_dir if out_dir is not None else self.settings.out_dir
        if target is None and not self.settings.dry_run:
            raise ValueError("An output directory is required unless dry_run is set")

        graph = self.analyze(entry)
        cycles = graph.find_cycles()
        for importer, imported in cycles:
            logger.info("import cycle: %s -> %s", importer, imported)
        logger.info("shaking %d modules from %s", len(graph), graph.entry)

        plan = {}
        if target is not None:
            plan = plan_outputs(list(graph.records), absolute(target), root=graph.common_root(), layout=self.settings.layout)

        writer = OutputWriter()
        reports: List[ModuleReport] = []
        for record in graph:
            data, result = self.shake_module(graph, record)
            removed = result.removed if result else []
            output = plan.get(record.path)
            if output is not None and not self.settings.dry_run:
                writer.submit(output, data)
            if removed:
                logger.info("%s: removed %d (%s)", record.path.name, len(removed), ", ".join(removed))
            reports.append(
                ModuleReport(
                    path=str(record.path),
                    output=str(output) if output is not None and not self.settings.dry_run else None,
                    entry=record.path == graph.entry,
                    pruned=result is not None,
                    used=sorted(record.used),
                    live=sorted(result.used) if result else [],
                    removed=removed,
                    kept=sorted(record.facts.declarations - set(removed)),
                    importers=sorted(str(p) for p in record.importers),
                    blob_hash=record.module.blob_hash,
                )
            )
        await writer.drain()

        return ShakeReport(
            entry=str(graph.entry),
            out_dir=str(absolute(target)) if target is not None else None,
            layout=self.settings.layout,
            dry_run=self.settings.dry_run,
            fingerprint=graph_fingerprint((r.path, r.module.source) for r in graph),
            modules=reports,
            cycles=[(str(a), str(b)) for a, b in cycles],
        )

    def run(self, entry: Union[str, Path], out_dir: Optional[Union[str, Path]] = None) -> ShakeReport:
        return asyncio.run(self.run_async(entry, out_dir))


def shake(entry: Union[str, Path], out_dir: Optional[Union[str, Path]] = None, **overrides) -> ShakeReport:
    """Shake ``entry`` into ``out_dir`` with default settings plus ``overrides``."""
    settings = Settings().with_overrides(**overrides)
    return TreeShaker(settings).run(entry, out_dir)
