"""
Command-line entry point.

Usage:
  lite-shake src/index.js -o lib
  python -m lite_shake src/index.js -o lib --layout flat --report report.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import ShakeError
from .settings import LAYOUTS, Settings
from .shaker import TreeShaker


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="lite-shake", description="Drop unused top-level code across ES modules")
    ap.add_argument("entry", help="Entry module path")
    ap.add_argument("-o", "--out", default=None, help="Output directory (default: $LITE_SHAKE_OUT_DIR)")
    ap.add_argument("--layout", choices=LAYOUTS, default=None, help="tree keeps subdirectories, flat keeps basenames")
    ap.add_argument("--dry-run", action="store_true", default=None, help="Analyze and prune without writing files")
    ap.add_argument(
        "--no-local-closure",
        dest="local_closure",
        action="store_false",
        default=None,
        help="Do not keep declarations referenced only by other kept declarations",
    )
    ap.add_argument("--grammar-so", default=None, help="tree-sitter-javascript shared object to load")
    ap.add_argument("--report", default="", help="Write a JSON run report to this file")
    ap.add_argument("--log-file", default="", help="Also write logs to this file")
    ap.add_argument("--verbose", action="store_true", default=None, help="Verbose logging")
    return ap.parse_args(argv)


def _configure_logging(*, verbose: bool, log_file: str = "") -> logging.Logger:
    logger = logging.getLogger("lite_shake")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers.clear()

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.load().with_overrides(
            out_dir=Path(args.out) if args.out else None,
            layout=args.layout,
            dry_run=args.dry_run,
            local_closure=args.local_closure,
            grammar_so=args.grammar_so,
            verbose=args.verbose,
        )
    except ValueError as e:
        _configure_logging(verbose=bool(args.verbose), log_file=args.log_file).error("invalid settings: %s", e)
        return 1
    logger = _configure_logging(verbose=settings.verbose, log_file=args.log_file)

    try:
        report = TreeShaker(settings).run(args.entry)
    except (ShakeError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if args.report:
        out = Path(args.report)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info(
        "done: %d modules, %d removed%s",
        len(report.modules),
        report.removed_total,
        " (dry run)" if report.dry_run else f" -> {report.out_dir}",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
