"""Content fingerprints for modules and runs."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Tuple


def graph_fingerprint(sources: Iterable[Tuple[Path, bytes]]) -> str:
    """Hash of (path, source) pairs as they were analyzed."""
    h = hashlib.sha256()
    for path, source in sorted(sources, key=lambda item: str(item[0])):
        h.update(str(path).encode())
        h.update(source)
    return h.hexdigest()


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
