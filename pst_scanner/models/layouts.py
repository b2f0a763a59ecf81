"""On-disk layouts of the PST/OST container.

Every record is a packed little-endian numpy structured dtype. Field names are
ours; offsets and widths are the format's. Nothing here interprets values;
that belongs to :mod:`pst_scanner.ingest.decode` and the validation pipeline.

Two encodings share the header and then diverge:

- narrow (versions 14/15, ANSI): 32-bit file offsets and node ids
- wide (versions 23/36, Unicode): 64-bit file offsets and node ids
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAGIC = 0x4E444221          # "!BDN"
CLIENT_MAGIC = 0x534D       # "SM"

HEADER_SIZE = 564           # minimum valid file size, and the header window
CRC_OFFSET = 0x0004
CRC_WINDOW_OFFSET = 0x0008
CRC_WINDOW_LENGTH = 471
ROOT_OFFSET = 0x00A0
ROOT_EOF_FIELD_OFFSET = 4   # same in both encodings (absolute 0xA4)

VERSION_ANSI = 14
VERSION_ANSI_2 = 15
VERSION_UNICODE = 23
VERSION_UNICODE_2 = 36      # Outlook 2013+
SUPPORTED_VERSIONS = (VERSION_ANSI, VERSION_ANSI_2, VERSION_UNICODE, VERSION_UNICODE_2)


def _packed(fields, expected_size: int) -> np.dtype:
    dt = np.dtype(fields, align=False)
    if dt.itemsize != expected_size:
        raise AssertionError(f"layout size {dt.itemsize} != {expected_size}")
    return dt


# ---------------------------------------------------------------------------
# Header (offset 0). Only the leading 24 bytes carry named fields; the rest of
# the 564-byte window is covered by the checksum but not decoded here.
# ---------------------------------------------------------------------------

HEADER_FIELDS_DTYPE = _packed(
    [
        ("magic", "<u4"),           # 0x00
        ("crc_partial", "<u4"),     # 0x04
        ("client_magic", "<u2"),    # 0x08
        ("version", "<u2"),         # 0x0A
        ("client_version", "<u2"),  # 0x0C
        ("platform_create", "u1"),  # 0x0E
        ("platform_access", "u1"),  # 0x0F
        ("reserved1", "<u4"),       # 0x10
        ("reserved2", "<u4"),       # 0x14
    ],
    24,
)


# ---------------------------------------------------------------------------
# Index entries
# ---------------------------------------------------------------------------

BLOCK_ENTRY_NARROW_DTYPE = _packed(
    [
        ("bref", "<u8"),
        ("cb", "<u2"),
        ("ref_count", "<u2"),
    ],
    12,
)

BLOCK_ENTRY_WIDE_DTYPE = _packed(
    [
        ("bref", "<u8"),
        ("cb", "<u2"),
        ("ref_count", "<u2"),
        ("padding", "<u4"),
    ],
    16,
)

NODE_ENTRY_NARROW_DTYPE = _packed(
    [
        ("nid", "<u4"),
        ("bid_data", "<u8"),
        ("bid_sub", "<u8"),
        ("nid_parent", "<u4"),
    ],
    24,
)

NODE_ENTRY_WIDE_DTYPE = _packed(
    [
        ("nid", "<u8"),
        ("bid_data", "<u8"),
        ("bid_sub", "<u8"),
        ("padding", "<u4"),
    ],
    28,
)


# ---------------------------------------------------------------------------
# Root record (offset 0xA0)
# ---------------------------------------------------------------------------

ROOT_NARROW_DTYPE = _packed(
    [
        ("reserved", "<u4"),        # 0xA0
        ("file_eof", "<u4"),        # 0xA4
        ("amap_last", "<u4"),       # 0xA8
        ("amap_free", "<u4"),       # 0xAC
        ("pmap_free", "<u4"),       # 0xB0
        ("bbt_root", BLOCK_ENTRY_NARROW_DTYPE),  # 0xB4
        ("nbt_root", NODE_ENTRY_NARROW_DTYPE),   # 0xC0
    ],
    56,
)

ROOT_WIDE_DTYPE = _packed(
    [
        ("reserved", "<u4"),        # 0xA0
        ("file_eof", "<u8"),        # 0xA4
        ("amap_last", "<u8"),       # 0xAC
        ("amap_free", "<u8"),       # 0xB4
        ("pmap_free", "<u8"),       # 0xBC
        ("bbt_root", BLOCK_ENTRY_WIDE_DTYPE),    # 0xC4
        ("nbt_root", NODE_ENTRY_WIDE_DTYPE),     # 0xD4
    ],
    80,
)


# ---------------------------------------------------------------------------
# Page trailer (last 16 bytes of every index / map page)
# ---------------------------------------------------------------------------

PAGE_TRAILER_DTYPE = _packed(
    [
        ("ptype", "u1"),
        ("ptype_repeat", "u1"),
        ("signature", "<u2"),
        ("crc", "<u4"),
        ("bid", "<u8"),
    ],
    16,
)


class PageType(int, Enum):
    BBT = 0x80
    NBT = 0x81
    FMAP = 0x82
    PMAP = 0x83
    AMAP = 0x84
    FPMAP = 0x85
    DLIST = 0x86


class EncodingVariant(Enum):
    """Field-width family selected by the header version."""

    LEGACY_NARROW = VERSION_ANSI
    LEGACY_NARROW_ALT = VERSION_ANSI_2
    WIDE_MODERN = VERSION_UNICODE
    WIDE_MODERN_ALT = VERSION_UNICODE_2

    @classmethod
    def from_version(cls, version: int) -> Optional["EncodingVariant"]:
        try:
            return cls(int(version))
        except ValueError:
            return None

    @property
    def is_wide(self) -> bool:
        return self in (EncodingVariant.WIDE_MODERN, EncodingVariant.WIDE_MODERN_ALT)

    @property
    def root_dtype(self) -> np.dtype:
        return ROOT_WIDE_DTYPE if self.is_wide else ROOT_NARROW_DTYPE

    @property
    def root_size(self) -> int:
        return int(self.root_dtype.itemsize)

    @property
    def label(self) -> str:
        return "unicode" if self.is_wide else "ansi"
