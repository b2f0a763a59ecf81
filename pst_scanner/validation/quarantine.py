from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional


logger = logging.getLogger(__name__)

Action = Literal["backup", "delete"]


@dataclass(frozen=True)
class QuarantineOutcome:
    """
    What happened to a corrupt file.

    backup_path is set only for a successful backup rename; error holds the OS
    message when the operation failed (ok is then False).
    """
    ok: bool
    action: Action
    source: Path
    backup_path: Optional[Path] = None
    error: Optional[str] = None


def backup_path_for(path: str | Path, now: Optional[datetime] = None) -> Path:
    """
    <path>.corrupted.<YYYYmmdd_HHMMSS>.bak

    Examples
    --------
    >>> backup_path_for("a.ost", datetime(2024, 1, 2, 3, 4, 5)).name
    'a.ost.corrupted.20240102_030405.bak'
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    p = Path(path)
    return p.with_name(f"{p.name}.corrupted.{stamp}.bak")


def quarantine_file(path: str | Path, *, no_backup: bool = False, now: Optional[datetime] = None) -> QuarantineOutcome:
    """Rename a corrupt file out of the way, or delete it when ``no_backup`` is set. Never raises OSError."""
    src = Path(path)
    if no_backup:
        try:
            src.unlink()
        except OSError as exc:
            logger.warning("could not delete %s: %s", src, exc)
            return QuarantineOutcome(ok=False, action="delete", source=src, error=str(exc))
        logger.info("deleted %s", src)
        return QuarantineOutcome(ok=True, action="delete", source=src)

    dst = backup_path_for(src, now)
    try:
        if dst.exists():
            raise FileExistsError(f"backup target already exists: {dst}")
        src.rename(dst)
    except OSError as exc:
        logger.warning("could not back up %s: %s", src, exc)
        return QuarantineOutcome(ok=False, action="backup", source=src, error=str(exc))
    logger.info("backed up %s -> %s", src, dst)
    return QuarantineOutcome(ok=True, action="backup", source=src, backup_path=dst)
