"""Run report models."""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ModuleReport(BaseModel):
    """Outcome for one visited module."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path of the source module")
    output: Optional[str] = Field(default=None, description="Output file (None on dry runs)")
    entry: bool = Field(default=False, description="Whether this is the entry module")
    pruned: bool = Field(default=False, description="Whether the pruner ran on this module")
    used: List[str] = Field(default_factory=list, description="Merged used-set received from importers")
    live: List[str] = Field(
        default_factory=list, description="Names the pruner protected: the used-set after local closure"
    )
    removed: List[str] = Field(default_factory=list, description="Names of removed declarations and specifiers")
    kept: List[str] = Field(default_factory=list, description="Top-level declarations left in the output")
    importers: List[str] = Field(default_factory=list, description="Modules importing this one")
    blob_hash: str = Field(default="", description="sha256 of the original source")


class ShakeReport(BaseModel):
    """Outcome of a whole run."""

    model_config = ConfigDict(frozen=True)

    entry: str = Field(..., description="Absolute path of the entry module")
    out_dir: Optional[str] = Field(default=None, description="Output directory")
    layout: str = Field(default="tree", description="Output layout: tree or flat")
    dry_run: bool = Field(default=False, description="Whether writes were skipped")
    fingerprint: str = Field(default="", description="sha256 over every analyzed (path, source) pair")
    modules: List[ModuleReport] = Field(default_factory=list)
    cycles: List[Tuple[str, str]] = Field(default_factory=list, description="Import back edges (importer, imported)")

    def module(self, path: str) -> Optional[ModuleReport]:
        for item in self.modules:
            if item.path == path:
                return item
        return None

    @property
    def removed_total(self) -> int:
        return sum(len(m.removed) for m in self.modules)
