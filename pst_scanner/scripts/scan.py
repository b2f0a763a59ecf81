"""Command-line scanner for Outlook OST/PST files.

Examples
--------
Scan the usual Outlook folders::

    python -m pst_scanner.scripts.scan

Scan one file and back it up if it is corrupt::

    python -m pst_scanner.scripts.scan --file "C:\\path\\to\\file.ost" --delete
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pst_scanner.ingest.discovery import STORE_EXTENSIONS, discover_store_files
from pst_scanner.logging_utils import configure_logging
from pst_scanner.presentation.report import format_report, format_summary, results_frame
from pst_scanner.validation.pipeline import scan_files
from pst_scanner.validation.quarantine import quarantine_file


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanConfig:
    """
    delete_corrupted:
      Quarantine files that fail validation (backup rename by default).
    no_backup:
      With delete_corrupted, delete permanently instead of renaming.
    max_workers:
      Files validated in parallel (each run owns its own handle).
    extensions:
      Extensions considered during discovery.
    """
    delete_corrupted: bool = False
    no_backup: bool = False
    max_workers: int = 1
    extensions: Tuple[str, ...] = STORE_EXTENSIONS


def run_scan(files: Sequence[Path], cfg: ScanConfig, *, csv_path: Optional[Path] = None) -> int:
    """Validate ``files``, print the per-file blocks and the summary. Returns the exit code."""
    if not files:
        print("No OST/PST files found.")
        return 0

    print(f"Found {len(files)} file(s) to scan\n")
    reports = scan_files(files, max_workers=cfg.max_workers)

    for report in reports:
        print(format_report(report, show_hint=not cfg.delete_corrupted))
        if not report.ok and cfg.delete_corrupted:
            outcome = quarantine_file(report.path, no_backup=cfg.no_backup)
            if outcome.ok and outcome.action == "delete":
                print("\nFile deleted")
            elif outcome.ok:
                print(f"\nFile backed up and renamed\n  Backup location: {outcome.backup_path}")
            else:
                print(f"\n  Error: {outcome.error}")
        print()

    frame = results_frame(reports)
    print(format_summary(frame))

    if csv_path is not None:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(csv_path, index=False)
        print(f"Wrote results table: {csv_path}")

    return 1 if not bool(frame["valid"].all()) else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="pst-scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Low-level structural scan of Outlook OST/PST files.

            Without --file, the standard Outlook data folders are searched.
            Exit code is 1 if at least one file is corrupted, else 0.
            """
        ),
    )
    p.add_argument("-f", "--file", action="append", default=None, help="Scan this file instead of auto-discovery (repeatable)")
    p.add_argument("-d", "--delete", action="store_true", help="Delete corrupted files (creates a backup by default)")
    p.add_argument("--no-backup", action="store_true", help="With --delete, delete permanently instead of renaming")
    p.add_argument("-j", "--jobs", type=int, default=1, help="Number of files validated in parallel")
    p.add_argument("--csv", default=None, help="Write the results table to this CSV file")
    p.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr")

    ns = p.parse_args(list(argv) if argv is not None else None)
    if ns.jobs < 1:
        p.error("--jobs must be >= 1")

    configure_logging(logging.DEBUG if ns.verbose else logging.WARNING)

    cfg = ScanConfig(delete_corrupted=bool(ns.delete), no_backup=bool(ns.no_backup), max_workers=int(ns.jobs))

    files: List[Path]
    if ns.file:
        files = [Path(f).expanduser() for f in ns.file]
    else:
        files = discover_store_files(extensions=cfg.extensions)

    csv_path = Path(ns.csv).expanduser() if ns.csv else None
    return run_scan(files, cfg, csv_path=csv_path)


if __name__ == "__main__":
    raise SystemExit(main())
