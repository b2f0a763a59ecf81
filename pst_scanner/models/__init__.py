from .findings import Finding, FindingCollector, Severity, ValidationReport
from .layouts import EncodingVariant, PageType
from .records import BlockIndexEntry, HeaderRecord, NodeIndexEntry, PageTrailer, RootRecord

__all__ = [
    "Finding",
    "FindingCollector",
    "Severity",
    "ValidationReport",
    "EncodingVariant",
    "PageType",
    "BlockIndexEntry",
    "HeaderRecord",
    "NodeIndexEntry",
    "PageTrailer",
    "RootRecord",
]
