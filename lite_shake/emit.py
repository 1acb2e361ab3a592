"""Output paths and asynchronous writes of pruned modules.

Writes are scheduled as tasks and do not block the walk; ``OutputWriter.drain``
waits for all of them and surfaces the first failure.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Set

from .errors import OutputCollisionError, OutputWriteError

logger = logging.getLogger(__name__)


def plan_outputs(paths: Iterable[Path], out_dir: Path, *, root: Path, layout: str = "tree") -> Dict[Path, Path]:
    """Map each module path to its output file.

    ``tree`` keeps the layout relative to ``root``; ``flat`` keeps basenames only
    and refuses to let two modules share one.
    """
    out_dir = Path(out_dir)
    plan: Dict[Path, Path] = {}
    if layout == "flat":
        by_name: Dict[str, List[Path]] = {}
        for path in paths:
            by_name.setdefault(path.name, []).append(path)
        for name, owners in by_name.items():
            if len(owners) > 1:
                raise OutputCollisionError(name, owners)
            plan[owners[0]] = out_dir / name
        return plan
    for path in paths:
        plan[path] = out_dir / path.relative_to(root)
    return plan


def write_file(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise OutputWriteError(path, e.strerror or str(e)) from e


class OutputWriter:
    def __init__(self) -> None:
        self._tasks: Set["asyncio.Task[None]"] = set()
        self.written: List[Path] = []

    def _track_task(self, task: "asyncio.Task[None]") -> None:
        self._tasks.add(task)

        def _done(_: "asyncio.Task[None]") -> None:
            self._tasks.discard(task)

        task.add_done_callback(_done)

    def submit(self, path: Path, data: bytes) -> None:
        """Schedule a write; must be called from a running event loop."""
        self._track_task(asyncio.create_task(self._write(path, data)))

    async def _write(self, path: Path, data: bytes) -> None:
        await asyncio.to_thread(write_file, path, data)
        self.written.append(path)
        logger.debug("wrote %s", path)

    async def drain(self) -> None:
        results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
