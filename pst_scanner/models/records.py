from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pst_scanner.models.layouts import EncodingVariant


@dataclass(frozen=True)
class HeaderRecord:
    """
    Decoded header fields (first 24 bytes of the 564-byte header window).

    Values are raw integers exactly as stored; no range checks are applied here.
    """
    magic: int
    crc_partial: int
    client_magic: int
    version: int
    client_version: int
    platform_create: int
    platform_access: int
    reserved1: int
    reserved2: int


@dataclass(frozen=True)
class BlockIndexEntry:
    """Block-index (BBT) entry: block reference, byte count, reference count."""
    bref: int
    cb: int
    ref_count: int
    wide: bool


@dataclass(frozen=True)
class NodeIndexEntry:
    """Node-index (NBT) entry. ``nid_parent`` is 0 for wide entries (the field does not exist there)."""
    nid: int
    bid_data: int
    bid_sub: int
    nid_parent: int
    wide: bool


@dataclass(frozen=True)
class RootRecord:
    """
    Root metadata at offset 0xA0.

    file_eof:
        Declared end-of-file offset; expected to match the actual file length.
    amap_last:
        Offset of the last allocation map page.
    amap_free, pmap_free:
        Free-space counters of the allocation map and page map.
    bbt_root, nbt_root:
        Root entries of the block and node indexes (shape only, not walked).
    """
    variant: EncodingVariant
    reserved: int
    file_eof: int
    amap_last: int
    amap_free: int
    pmap_free: int
    bbt_root: BlockIndexEntry
    nbt_root: NodeIndexEntry


@dataclass(frozen=True)
class PageTrailer:
    ptype: int
    ptype_repeat: int
    signature: int
    crc: int
    bid: int


Record = Union[HeaderRecord, RootRecord, BlockIndexEntry, NodeIndexEntry, PageTrailer]
