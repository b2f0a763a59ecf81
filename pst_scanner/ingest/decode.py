from __future__ import annotations

from typing import Optional, Union

import numpy as np

from pst_scanner.models.layouts import (
    BLOCK_ENTRY_NARROW_DTYPE,
    BLOCK_ENTRY_WIDE_DTYPE,
    HEADER_FIELDS_DTYPE,
    HEADER_SIZE,
    NODE_ENTRY_NARROW_DTYPE,
    NODE_ENTRY_WIDE_DTYPE,
    PAGE_TRAILER_DTYPE,
    EncodingVariant,
)
from pst_scanner.models.records import (
    BlockIndexEntry,
    HeaderRecord,
    NodeIndexEntry,
    PageTrailer,
    RootRecord,
)


BytesLike = Union[bytes, bytearray, memoryview]


class TruncatedRecord(ValueError):
    """Fewer bytes are available at the requested offset than the record declares."""

    def __init__(self, record: str, required: int, available: int, offset: int = 0):
        self.record = record
        self.required = int(required)
        self.available = int(available)
        self.offset = int(offset)
        super().__init__(
            f"truncated {record}: need {self.required} bytes at offset {self.offset}, {self.available} available"
        )


def _check_window(buf: BytesLike, offset: int, size: int, record: str) -> None:
    """Raise TruncatedRecord unless ``size`` bytes exist at ``offset``."""
    n = len(memoryview(buf).cast("B"))
    if offset < 0:
        raise TruncatedRecord(record, size, 0, offset)
    available = max(0, n - offset)
    if available < size:
        raise TruncatedRecord(record, size, available, offset)


def _read(buf: BytesLike, dtype: np.dtype, offset: int, record: str, size: Optional[int] = None) -> np.void:
    # numpy only ever sees windows that were length-checked first
    need = int(dtype.itemsize) if size is None else int(size)
    _check_window(buf, offset, need, record)
    return np.frombuffer(buf, dtype=dtype, count=1, offset=offset)[0]


def _block_entry(rec: np.void, wide: bool) -> BlockIndexEntry:
    return BlockIndexEntry(
        bref=int(rec["bref"]),
        cb=int(rec["cb"]),
        ref_count=int(rec["ref_count"]),
        wide=wide,
    )


def _node_entry(rec: np.void, wide: bool) -> NodeIndexEntry:
    return NodeIndexEntry(
        nid=int(rec["nid"]),
        bid_data=int(rec["bid_data"]),
        bid_sub=int(rec["bid_sub"]),
        nid_parent=0 if wide else int(rec["nid_parent"]),
        wide=wide,
    )


def decode_header(buf: BytesLike, offset: int = 0) -> HeaderRecord:
    """Decode the header; the full 564-byte header window must be present."""
    rec = _read(buf, HEADER_FIELDS_DTYPE, offset, "header", size=HEADER_SIZE)
    return HeaderRecord(
        magic=int(rec["magic"]),
        crc_partial=int(rec["crc_partial"]),
        client_magic=int(rec["client_magic"]),
        version=int(rec["version"]),
        client_version=int(rec["client_version"]),
        platform_create=int(rec["platform_create"]),
        platform_access=int(rec["platform_access"]),
        reserved1=int(rec["reserved1"]),
        reserved2=int(rec["reserved2"]),
    )


def decode_root(buf: BytesLike, variant: EncodingVariant, offset: int = 0) -> RootRecord:
    """Decode a root record whose field widths follow ``variant``."""
    wide = variant.is_wide
    rec = _read(buf, variant.root_dtype, offset, f"{variant.label} root")
    return RootRecord(
        variant=variant,
        reserved=int(rec["reserved"]),
        file_eof=int(rec["file_eof"]),
        amap_last=int(rec["amap_last"]),
        amap_free=int(rec["amap_free"]),
        pmap_free=int(rec["pmap_free"]),
        bbt_root=_block_entry(rec["bbt_root"], wide),
        nbt_root=_node_entry(rec["nbt_root"], wide),
    )


def decode_block_entry(buf: BytesLike, wide: bool, offset: int = 0) -> BlockIndexEntry:
    dtype = BLOCK_ENTRY_WIDE_DTYPE if wide else BLOCK_ENTRY_NARROW_DTYPE
    return _block_entry(_read(buf, dtype, offset, "block index entry"), wide)


def decode_node_entry(buf: BytesLike, wide: bool, offset: int = 0) -> NodeIndexEntry:
    dtype = NODE_ENTRY_WIDE_DTYPE if wide else NODE_ENTRY_NARROW_DTYPE
    return _node_entry(_read(buf, dtype, offset, "node index entry"), wide)


def decode_page_trailer(buf: BytesLike, offset: int = 0) -> PageTrailer:
    rec = _read(buf, PAGE_TRAILER_DTYPE, offset, "page trailer")
    return PageTrailer(
        ptype=int(rec["ptype"]),
        ptype_repeat=int(rec["ptype_repeat"]),
        signature=int(rec["signature"]),
        crc=int(rec["crc"]),
        bid=int(rec["bid"]),
    )
