"""Deep structural checks run after the root record has been accepted.

These are the extension point for walking the node/block indexes and the
allocation maps. The shipped checks do not walk anything yet: the index check
reports itself as unverified through a warning so callers can see that the
file was only checked at header/root depth.

A check is any object with a ``name`` and a ``run(context)`` method returning
a tuple of findings. Checks must not raise for ordinary structural problems;
an exception is turned into a single error by the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple, runtime_checkable

from pst_scanner.ingest.container import ContainerFile
from pst_scanner.models.findings import Finding
from pst_scanner.models.layouts import EncodingVariant
from pst_scanner.models.records import HeaderRecord, RootRecord


INDEX_NOT_IMPLEMENTED = "Index structure validation not fully implemented (root entries decoded only)"


@dataclass(frozen=True)
class DeepCheckContext:
    """Everything a deep check may look at. ``container`` is open for the whole call."""
    container: ContainerFile
    file_size: int
    variant: EncodingVariant
    header: HeaderRecord
    root: RootRecord


@runtime_checkable
class DeepCheck(Protocol):
    name: str

    def run(self, context: DeepCheckContext) -> Tuple[Finding, ...]:
        ...


@dataclass(frozen=True)
class IndexStructureCheck:
    """
    Node-index and block-index check.

    Only the root entries are decoded (as part of the root record); the trees
    are not traversed, so this always reports one warning and never an error.
    """
    name: str = "index_structures"

    def run(self, context: DeepCheckContext) -> Tuple[Finding, ...]:
        return (Finding.warning(INDEX_NOT_IMPLEMENTED),)


@dataclass(frozen=True)
class AllocationMapCheck:
    """Allocation-map / page-map check. Nothing is inspected yet."""
    name: str = "allocation_maps"

    def run(self, context: DeepCheckContext) -> Tuple[Finding, ...]:
        return ()


def default_deep_checks() -> Tuple[DeepCheck, ...]:
    return (IndexStructureCheck(), AllocationMapCheck())
