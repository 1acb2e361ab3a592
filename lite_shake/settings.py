from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional


LAYOUTS = ("tree", "flat")


def _env_bool(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


@dataclass(frozen=True)
class Settings:
    out_dir: Optional[Path] = None
    layout: str = "tree"
    local_closure: bool = True
    dry_run: bool = False
    verbose: bool = False
    grammar_so: str = ""

    def __post_init__(self) -> None:
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unsupported layout: {self.layout!r} (expected one of {', '.join(LAYOUTS)})")

    @staticmethod
    def load() -> "Settings":
        out_dir_raw = _env_str("LITE_SHAKE_OUT_DIR", "").strip()
        return Settings(
            out_dir=Path(out_dir_raw) if out_dir_raw else None,
            layout=_env_str("LITE_SHAKE_LAYOUT", "tree").strip().lower() or "tree",
            local_closure=_env_bool("LITE_SHAKE_LOCAL_CLOSURE", "1"),
            dry_run=_env_bool("LITE_SHAKE_DRY_RUN", "0"),
            verbose=_env_bool("LITE_SHAKE_VERBOSE", "0"),
            grammar_so=_env_str("LITE_SHAKE_GRAMMAR_SO", "").strip(),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
