"""Ingest package - reading store files.

This package handles:
- Opening a store file read-only and reading at fixed offsets
- Decoding raw byte windows into typed records (no validation)
- Discovery of candidate .ost/.pst files in the Outlook data folders

Design principle:
- The decoder never reads past a record's declared length; short input raises TruncatedRecord
"""
from .container import ContainerFile
from .decode import TruncatedRecord, decode_header, decode_root
from .discovery import discover_store_files

__all__ = [
    "ContainerFile",
    "TruncatedRecord",
    "decode_header",
    "decode_root",
    "discover_store_files",
]
