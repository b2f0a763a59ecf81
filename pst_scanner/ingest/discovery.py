from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

STORE_EXTENSIONS: Tuple[str, ...] = (".ost", ".pst")


def default_search_roots(env: Optional[Mapping[str, str]] = None, home: Optional[Path] = None) -> List[Path]:
    """
    Folders where Outlook keeps its data files:

      <LOCALAPPDATA>/Microsoft/Outlook      (cached-mode OST files)
      <APPDATA>/Microsoft/Outlook           (older PST files)
      <home>/Documents/Outlook Files        (user PST files)

    Roots whose base variable is unset are left out; existence is not checked here.
    """
    env = os.environ if env is None else env
    home = Path.home() if home is None else Path(home)

    roots: List[Path] = []
    local = env.get("LOCALAPPDATA")
    if local:
        roots.append(Path(local) / "Microsoft" / "Outlook")
    roaming = env.get("APPDATA")
    if roaming:
        roots.append(Path(roaming) / "Microsoft" / "Outlook")
    roots.append(home / "Documents" / "Outlook Files")
    return roots


def _list_store_files(root: Path, extensions: Sequence[str]) -> List[Path]:
    """Top-level files of ``root`` matching ``extensions`` (case-insensitive), grouped by extension order."""
    try:
        entries = [p for p in root.iterdir() if p.is_file()]
    except PermissionError as exc:
        logger.warning("skipping %s: %s", root, exc)
        return []

    by_ext: Dict[str, List[Path]] = {ext.lower(): [] for ext in extensions}
    for p in entries:
        ext = p.suffix.lower()
        if ext in by_ext:
            by_ext[ext].append(p)

    out: List[Path] = []
    for ext in by_ext:
        out.extend(sorted(by_ext[ext], key=lambda q: q.name.lower()))
    return out


def discover_store_files(
    roots: Optional[Sequence[str | Path]] = None,
    extensions: Sequence[str] = STORE_EXTENSIONS,
) -> List[Path]:
    """
    Enumerate candidate store files.

    Only the top level of each root is listed (no recursion). Missing roots are
    ignored. The result is de-duplicated and ordered by root, then extension,
    then name.
    """
    search = default_search_roots() if roots is None else [Path(r).expanduser() for r in roots]

    seen: set[Path] = set()
    found: List[Path] = []
    for root in search:
        if not root.is_dir():
            logger.debug("search root not found: %s", root)
            continue
        for p in _list_store_files(root, extensions):
            key = p.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(p)
    logger.info("found %d store file(s) under %d root(s)", len(found), len(search))
    return found
