"""Header checksum used by the PST/OST format.

Reflected CRC-32 over polynomial 0xEDB88320, table driven, with initial state 0
and no final inversion. That last detail is what makes it differ from
``zlib.crc32``; the two are related by::

    pst_checksum(data) == zlib.crc32(data, 0xFFFFFFFF) ^ 0xFFFFFFFF
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np


POLYNOMIAL = 0xEDB88320

BytesLike = Union[bytes, bytearray, memoryview]


def build_checksum_table(polynomial: int = POLYNOMIAL) -> np.ndarray:
    """
    Build the 256-entry lookup table (8 right-shift rounds per entry,
    XOR with the polynomial when the low bit is set).
    """
    poly = np.uint32(polynomial)
    table = np.arange(256, dtype=np.uint32)
    for _ in range(8):
        low = (table & np.uint32(1)).astype(bool)
        table = np.where(low, (table >> np.uint32(1)) ^ poly, table >> np.uint32(1)).astype(np.uint32)
    return table


CHECKSUM_TABLE = build_checksum_table()
CHECKSUM_TABLE.setflags(write=False)

# Python ints for the byte loop; indexing a numpy array per byte is slow.
_TABLE = tuple(int(v) for v in CHECKSUM_TABLE)


def pst_checksum(data: BytesLike, offset: int = 0, length: Optional[int] = None) -> int:
    """
    Checksum of ``data[offset:offset + length]`` (to the end when length is None).

    Raises
    ------
    ValueError
        If the window does not fit inside ``data``.

    Examples
    --------
    >>> pst_checksum(b"")
    0
    >>> pst_checksum(b"abc") == pst_checksum(b"xxabc", 2, 3)
    True
    """
    view = memoryview(data).cast("B")
    n = len(view)
    if length is None:
        length = n - offset
    if offset < 0 or length < 0 or offset + length > n:
        raise ValueError(f"checksum window [{offset}, {offset + length}) outside buffer of {n} bytes")

    crc = 0
    table = _TABLE
    for b in view[offset: offset + length]:
        crc = table[(crc ^ b) & 0xFF] ^ (crc >> 8)
    return crc
