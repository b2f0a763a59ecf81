from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Literal, Optional, Tuple

from pst_scanner.models.layouts import EncodingVariant
from pst_scanner.models.records import HeaderRecord, RootRecord


Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class Finding:
    """One validation observation. Errors decide the verdict; warnings are informational."""
    message: str
    severity: Severity

    @classmethod
    def error(cls, message: str) -> "Finding":
        return cls(message=message, severity="error")

    @classmethod
    def warning(cls, message: str) -> "Finding":
        return cls(message=message, severity="warning")

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


class FindingCollector:
    """
    Ordered finding list owned by exactly one validation run.

    Stages never touch the collector; they return their findings and the
    pipeline merges them here in stage order. After the run the content is
    exposed only through the frozen :class:`ValidationReport`.
    """

    def __init__(self) -> None:
        self._findings: List[Finding] = []

    def add(self, finding: Finding) -> None:
        self._findings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        for f in findings:
            self.add(f)

    def error(self, message: str) -> None:
        self.add(Finding.error(message))

    def warning(self, message: str) -> None:
        self.add(Finding.warning(message))

    @property
    def has_errors(self) -> bool:
        return any(f.is_error for f in self._findings)

    def snapshot(self) -> Tuple[Finding, ...]:
        return tuple(self._findings)


@dataclass(frozen=True)
class ValidationReport:
    """
    Result of validating one container file.

    Attributes
    ----------
    source:
        Path (or label) of the validated file.
    file_size:
        Actual byte length observed at the start of the run (None if the file could not be opened).
    findings:
        All findings in insertion order.
    variant, header, root:
        Structures decoded before the run stopped (None when not reached).
    stages_run:
        Names of the stages that executed, in order.

    Examples
    --------
    >>> ValidationReport(source="x.ost", file_size=0, findings=()).ok
    True
    """
    source: str
    file_size: Optional[int]
    findings: Tuple[Finding, ...]
    variant: Optional[EncodingVariant] = None
    header: Optional[HeaderRecord] = None
    root: Optional[RootRecord] = None
    stages_run: Tuple[str, ...] = field(default=())

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(f.message for f in self.findings if f.severity == "error")

    @property
    def warnings(self) -> Tuple[str, ...]:
        return tuple(f.message for f in self.findings if f.severity == "warning")

    @property
    def ok(self) -> bool:
        return not self.errors

    is_valid = ok

    @property
    def path(self) -> Path:
        return Path(self.source)

    def raise_if_errors(self) -> None:
        """Raise ValueError if errors exist."""
        if self.errors:
            msg = f"Validation failed for {self.source}:\n" + "\n".join(f"- {e}" for e in self.errors)
            raise ValueError(msg)
