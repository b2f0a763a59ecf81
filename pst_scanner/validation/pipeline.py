"""Structural validation pipeline for PST/OST container files.

Stages run strictly in order; each one returns a :class:`StageResult` with
its own findings and the pipeline merges them into a per-run collector.

| Stage            | On failure                 |
|------------------|----------------------------|
| size             | error, stop                |
| header_decode    | error, stop                |
| magic            | error, stop                |
| version          | error, stop                |
| client_magic     | warning, continue          |
| header_checksum  | error, stop                |
| root_decode      | error, stop                |
| eof              | warning, continue          |
| deep checks      | whatever the check reports |

Stopping conditions mean the file is not a recognizable container (later
offsets would be read against an untrusted layout). Warnings describe
bookkeeping drift and never change the verdict: a file is valid iff no error
was recorded. Any exception inside a run becomes exactly one error; nothing
escapes ``validate_*``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Iterable, List, Optional, Sequence, Tuple

from pst_scanner.analysis.checksum import pst_checksum
from pst_scanner.ingest.container import ContainerFile
from pst_scanner.ingest.decode import TruncatedRecord, decode_header, decode_root
from pst_scanner.models.findings import Finding, FindingCollector, ValidationReport
from pst_scanner.models.layouts import (
    CLIENT_MAGIC,
    CRC_OFFSET,
    CRC_WINDOW_LENGTH,
    CRC_WINDOW_OFFSET,
    HEADER_SIZE,
    MAGIC,
    ROOT_OFFSET,
    SUPPORTED_VERSIONS,
    EncodingVariant,
)
from pst_scanner.models.records import HeaderRecord, RootRecord
from pst_scanner.validation.deep_checks import DeepCheck, DeepCheckContext, default_deep_checks


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Validator configuration.

    deep_checks:
      Checks run after the root record was accepted, in order.
    expected_client_magic:
      Client tag expected at offset 0x08; a mismatch is only a warning.
    check_eof:
      Compare the root end-of-file field with the actual file length.
    """
    deep_checks: Tuple[DeepCheck, ...] = field(default_factory=default_deep_checks)
    expected_client_magic: int = CLIENT_MAGIC
    check_eof: bool = True


@dataclass(frozen=True)
class StageResult:
    name: str
    findings: Tuple[Finding, ...] = ()
    fatal: bool = False
    value: Any = None


# ---------------------------------------------------------------------------
# Stages (pure functions of their inputs)
# ---------------------------------------------------------------------------

def check_size(size: int) -> StageResult:
    if size <= 0:
        return StageResult("size", (Finding.error("File is empty"),), fatal=True)
    if size < HEADER_SIZE:
        return StageResult(
            "size",
            (Finding.error(f"File too small: {size} bytes (minimum {HEADER_SIZE} required)"),),
            fatal=True,
        )
    return StageResult("size")


def decode_header_stage(raw: bytes) -> StageResult:
    try:
        header = decode_header(raw)
    except TruncatedRecord as exc:
        return StageResult("header_decode", (Finding.error(f"Failed to read header ({exc})"),), fatal=True)
    return StageResult("header_decode", value=header)


def check_magic(header: HeaderRecord) -> StageResult:
    if header.magic != MAGIC:
        msg = f"Invalid magic signature: 0x{header.magic:08X} (expected 0x{MAGIC:08X})"
        return StageResult("magic", (Finding.error(msg),), fatal=True)
    return StageResult("magic")


def check_version(header: HeaderRecord) -> StageResult:
    variant = EncodingVariant.from_version(header.version)
    if variant is None:
        supported = ", ".join(str(v) for v in SUPPORTED_VERSIONS)
        msg = f"Unsupported PST version: {header.version} (supported: {supported})"
        return StageResult("version", (Finding.error(msg),), fatal=True)
    return StageResult("version", value=variant)


def check_client_magic(header: HeaderRecord, expected: int = CLIENT_MAGIC) -> StageResult:
    if header.client_magic != expected:
        msg = f"Invalid client magic: 0x{header.client_magic:04X} (expected 0x{expected:04X})"
        return StageResult("client_magic", (Finding.warning(msg),))
    return StageResult("client_magic")


def check_header_checksum(raw: bytes) -> StageResult:
    stored = int.from_bytes(raw[CRC_OFFSET: CRC_OFFSET + 4], "little")
    calculated = pst_checksum(raw, CRC_WINDOW_OFFSET, CRC_WINDOW_LENGTH)
    if stored != calculated:
        msg = f"Header CRC mismatch: stored=0x{stored:08X}, calculated=0x{calculated:08X}"
        return StageResult("header_checksum", (Finding.error(msg),), fatal=True, value=calculated)
    return StageResult("header_checksum", value=calculated)


def decode_root_stage(raw: bytes, variant: EncodingVariant) -> StageResult:
    try:
        root = decode_root(raw, variant)
    except TruncatedRecord as exc:
        kind = "Unicode" if variant.is_wide else "ANSI"
        msg = f"Failed to read {kind} ROOT structure ({exc})"
        return StageResult("root_decode", (Finding.error(msg),), fatal=True)
    return StageResult("root_decode", value=root)


def check_eof(root: RootRecord, size: int) -> StageResult:
    if root.file_eof != size:
        return StageResult("eof", (Finding.warning(f"File EOF mismatch: header={root.file_eof}, actual={size}"),))
    return StageResult("eof")


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class StoreValidator:
    """Runs the stage sequence against one container at a time. Instances hold no per-run state."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()

    def validate_file(self, file_path: str | Path) -> ValidationReport:
        path = Path(file_path).expanduser()
        source = str(path)
        if not path.exists():
            return ValidationReport(source=source, file_size=None, findings=(Finding.error(f"File does not exist: {path}"),))
        try:
            container = ContainerFile.open(path)
        except OSError as exc:
            logger.warning("cannot open %s: %s", path, exc)
            return ValidationReport(source=source, file_size=None, findings=(Finding.error(f"Cannot open file: {exc}"),))
        with container:
            return self.validate_container(container)

    def validate_stream(self, handle: BinaryIO, size: int, *, source: str = "<stream>") -> ValidationReport:
        """Validate a caller-owned binary handle of known length; the handle is left open."""
        return self.validate_container(ContainerFile(handle, size, source=source))

    def validate_bytes(self, data: bytes, *, source: str = "<memory>") -> ValidationReport:
        with ContainerFile.from_bytes(data, source=source) as container:
            return self.validate_container(container)

    def validate_container(self, container: ContainerFile) -> ValidationReport:
        cfg = self.config
        size = container.size
        collector = FindingCollector()
        stages: List[str] = []
        variant: Optional[EncodingVariant] = None
        header: Optional[HeaderRecord] = None
        root: Optional[RootRecord] = None

        def apply(result: StageResult) -> bool:
            stages.append(result.name)
            collector.extend(result.findings)
            if result.fatal:
                logger.warning("%s: stopped at stage '%s'", container.source, result.name)
            return not result.fatal

        def finish() -> ValidationReport:
            report = ValidationReport(
                source=container.source,
                file_size=size,
                findings=collector.snapshot(),
                variant=variant,
                header=header,
                root=root,
                stages_run=tuple(stages),
            )
            logger.debug(
                "%s: ok=%s errors=%d warnings=%d",
                container.source, report.ok, len(report.errors), len(report.warnings),
            )
            return report

        logger.debug("validating %s (%d bytes)", container.source, size)
        try:
            if not apply(check_size(size)):
                return finish()

            raw_header = container.read_at(0, HEADER_SIZE)
            res = decode_header_stage(raw_header)
            if not apply(res):
                return finish()
            header = res.value

            if not apply(check_magic(header)):
                return finish()

            res = check_version(header)
            if not apply(res):
                return finish()
            variant = res.value

            apply(check_client_magic(header, cfg.expected_client_magic))

            if not apply(check_header_checksum(raw_header)):
                return finish()

            raw_root = container.read_at(ROOT_OFFSET, variant.root_size)
            res = decode_root_stage(raw_root, variant)
            if not apply(res):
                return finish()
            root = res.value

            if cfg.check_eof:
                apply(check_eof(root, size))

            ctx = DeepCheckContext(container=container, file_size=size, variant=variant, header=header, root=root)
            for check in cfg.deep_checks:
                apply(StageResult(check.name, tuple(check.run(ctx))))
        except Exception as exc:
            logger.warning("%s: validation exception", container.source, exc_info=True)
            collector.error(f"Validation exception: {type(exc).__name__}: {exc}")
        return finish()


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------

def validate_file(file_path: str | Path, config: Optional[ValidatorConfig] = None) -> ValidationReport:
    return StoreValidator(config).validate_file(file_path)


def validate_bytes(data: bytes, config: Optional[ValidatorConfig] = None, *, source: str = "<memory>") -> ValidationReport:
    """
    Validate an in-memory image of a store file.

    Examples
    --------
    >>> validate_bytes(bytes(1000)).errors[0].startswith("Invalid magic signature")
    True
    """
    return StoreValidator(config).validate_bytes(data, source=source)


def validate_stream(
    handle: BinaryIO,
    size: int,
    config: Optional[ValidatorConfig] = None,
    *,
    source: str = "<stream>",
) -> ValidationReport:
    return StoreValidator(config).validate_stream(handle, size, source=source)


def scan_files(
    paths: Iterable[str | Path],
    config: Optional[ValidatorConfig] = None,
    *,
    max_workers: int = 1,
) -> List[ValidationReport]:
    """
    Validate several files; each run owns its own handle, so runs are independent.

    Results are returned in input order regardless of completion order.
    """
    items: Sequence[Path] = [Path(p) for p in paths]
    validator = StoreValidator(config)
    if max_workers <= 1 or len(items) <= 1:
        return [validator.validate_file(p) for p in items]

    results: List[Optional[ValidationReport]] = [None] * len(items)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        futures = {executor.submit(validator.validate_file, p): i for i, p in enumerate(items)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return [r for r in results if r is not None]
