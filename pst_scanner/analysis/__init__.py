"""Analysis package.

Computations over raw bytes that carry no knowledge of the pipeline.
Currently only the header checksum.
"""

from .checksum import CHECKSUM_TABLE, pst_checksum

__all__ = [
    "CHECKSUM_TABLE",
    "pst_checksum",
]
