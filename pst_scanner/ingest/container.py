from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO, Optional


class ContainerFile:
    """
    Read-only handle on one store file for the duration of a validation run.

    Opened with a plain ``open(path, "rb")``, which leaves the file shareable
    for other readers (Outlook may hold it open). All reads are positioned:
    ``read_at`` seeks before every read and never assumes the current offset.

    Use as a context manager; the handle is closed on every exit path when
    this object opened it. Handles passed in by the caller are left open.
    """

    def __init__(self, handle: BinaryIO, size: int, *, source: str = "<stream>", owns_handle: bool = False):
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        self._handle = handle
        self.size = int(size)
        self.source = str(source)
        self._owns_handle = owns_handle

    @classmethod
    def open(cls, path: str | Path) -> "ContainerFile":
        p = Path(path).expanduser()
        fh = open(p, "rb")
        try:
            size = os.fstat(fh.fileno()).st_size
        except BaseException:
            fh.close()
            raise
        return cls(fh, size, source=str(p), owns_handle=True)

    @classmethod
    def from_bytes(cls, data: bytes, *, source: str = "<memory>") -> "ContainerFile":
        return cls(io.BytesIO(bytes(data)), len(data), source=source, owns_handle=True)

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``; a short result means the file ended early."""
        if offset < 0 or size < 0:
            raise ValueError(f"invalid read window offset={offset} size={size}")
        self._handle.seek(offset, io.SEEK_SET)
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._handle.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    @property
    def handle(self) -> BinaryIO:
        return self._handle

    @property
    def closed(self) -> bool:
        return bool(getattr(self._handle, "closed", False))

    def close(self) -> None:
        if self._owns_handle and not self.closed:
            self._handle.close()

    def __enter__(self) -> "ContainerFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
