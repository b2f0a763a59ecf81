"""Plain-text and tabular rendering of validation reports.

Nothing here changes a verdict; it only formats what the pipeline produced.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from pst_scanner.models.findings import ValidationReport


RESULT_COLUMNS = ["path", "size_bytes", "variant", "valid", "n_errors", "n_warnings", "errors", "warnings"]

_RULE = "-" * 60
_DOUBLE_RULE = "=" * 60


def format_file_size(n_bytes: int) -> str:
    """
    Human-readable size with binary multiples.

    Examples
    --------
    >>> format_file_size(0)
    '0 B'
    >>> format_file_size(1536)
    '1.5 KB'
    """
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(n_bytes)
    order = 0
    while value >= 1024 and order < len(units) - 1:
        value /= 1024
        order += 1
    txt = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{txt} {units[order]}"


def format_report(report: ValidationReport, *, show_hint: bool = False) -> str:
    """Per-file block: location, size, verdict, then errors and warnings as bullets."""
    lines: List[str] = [_RULE, f"Scanning: {report.path.name}", f"Path: {report.source}"]
    if report.file_size is not None:
        lines.append(f"Size: {format_file_size(report.file_size)}")
        try:
            mtime = datetime.fromtimestamp(Path(report.source).stat().st_mtime)
            lines.append(f"Modified: {mtime:%Y-%m-%d %H:%M:%S}")
        except OSError:
            pass
    if report.variant is not None:
        lines.append(f"Format: version {report.variant.value} ({report.variant.label})")
    lines.append("")

    if report.ok:
        lines.append("HEALTHY - File validation passed")
    else:
        lines.append("CORRUPTED - File validation failed")
        lines.append("")
        lines.append("Errors:")
        lines.extend(f"  * {e}" for e in report.errors)

    if report.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  * {w}" for w in report.warnings)

    if not report.ok and show_hint:
        lines.append("")
        lines.append("Use --delete to remove this corrupted file")
    return "\n".join(lines)


def results_frame(reports: Sequence[ValidationReport]) -> pd.DataFrame:
    """One row per validated file; errors/warnings are joined with ' | '."""
    rows = []
    for r in reports:
        rows.append(
            {
                "path": r.source,
                "size_bytes": r.file_size,
                "variant": r.variant.name if r.variant is not None else None,
                "valid": bool(r.ok),
                "n_errors": len(r.errors),
                "n_warnings": len(r.warnings),
                "errors": " | ".join(r.errors),
                "warnings": " | ".join(r.warnings),
            }
        )
    df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    df["size_bytes"] = df["size_bytes"].astype("Int64")
    df["valid"] = df["valid"].astype(bool)
    return df


def format_summary(frame: pd.DataFrame) -> str:
    scanned = int(len(frame))
    corrupted = int((~frame["valid"]).sum()) if scanned else 0
    return "\n".join(
        [
            _DOUBLE_RULE,
            "Summary:",
            f"  Scanned: {scanned} file(s)",
            f"  Corrupted: {corrupted} file(s)",
            f"  Healthy: {scanned - corrupted} file(s)",
            _DOUBLE_RULE,
        ]
    )
