"""Errors raised while importing or navigating review samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

__all__ = [
    "ReviewError",
    "MissingColumnsError",
    "EmptyImportError",
    "NoSamplesError",
]


@dataclass
class ReviewError(Exception):
    """
    Base error for the review workflow.

    Attributes:
        message: Human-readable description.
        source: Name of the imported file, when known.
        details: Extra context for logging.
    """

    message: str
    source: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __post_init__(self):
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} | Source: {self.source}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source": self.source,
            "details": self.details,
        }


@dataclass
class MissingColumnsError(ReviewError):
    """The imported header lacks one or more required columns."""

    missing: tuple = ()

    def __post_init__(self):
        self.details.setdefault("missing", list(self.missing))
        super().__post_init__()


@dataclass
class EmptyImportError(ReviewError):
    """The imported file has a header but no usable data rows."""


@dataclass
class NoSamplesError(ReviewError):
    """An operation needs at least one sample in the session."""
