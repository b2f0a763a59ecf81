"""Validation package.

Design goals
------------
1) Stages run in a fixed order and stop at the first structural error.
2) Each run owns its findings; nothing is shared between runs.
3) Deep checks (index trees, allocation maps) plug in after the root stage.
"""

from .pipeline import StoreValidator, ValidatorConfig, scan_files, validate_bytes, validate_file, validate_stream

__all__ = [
    "StoreValidator",
    "ValidatorConfig",
    "scan_files",
    "validate_bytes",
    "validate_file",
    "validate_stream",
]
