"""Typed outcome of a point read from the directory store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.types import ArchiveElement

ReadStatus = Literal["found", "missing", "failed"]


@dataclass(frozen=True)
class ReadResult:
    """Outcome of reading one element file.

    ``missing`` means no file exists for the identity. ``failed`` means a
    file exists but could not be read or decoded; the failure has already
    been reported to the diagnostic sink.

    Attributes:
        status: Read outcome.
        element: Decoded element when found.
        error: Failure description when failed.
    """

    status: ReadStatus
    element: ArchiveElement | None = None
    error: str | None = None

    @classmethod
    def of(cls, element: ArchiveElement) -> "ReadResult":
        return cls(status="found", element=element)

    @classmethod
    def missing(cls) -> "ReadResult":
        return cls(status="missing")

    @classmethod
    def failed(cls, error: str) -> "ReadResult":
        return cls(status="failed", error=error)

    @property
    def found(self) -> bool:
        return self.status == "found"
