"""Column names and tag vocabulary for the review workflow."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .tokenizer import RECOGNIZED_TAGS

__all__ = ["ReviewConfig", "DEFAULT_CONFIG"]


@dataclass(frozen=True)
class ReviewConfig:
    """
    Settings shared by the session, exports and diagnostics.

    ``text_column`` holds the original sentence and ``template_column`` the
    tagged version; both are required in imported files. ``changed_column``
    is added on export.
    """

    text_column: str = "text"
    template_column: str = "deid_text"
    changed_column: str = "is_changed"
    recognized_tags: frozenset = RECOGNIZED_TAGS
    min_similarity: float = 0.6

    def __post_init__(self):
        for name in ("text_column", "template_column", "changed_column"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string, got {value!r}")
            # imported headers are lower-cased, so column names must be too
            object.__setattr__(self, name, value.strip().lower())
        if isinstance(self.recognized_tags, str):
            raise ValueError(
                f"recognized_tags must be a collection of tag names, "
                f"got string {self.recognized_tags!r}"
            )
        if not self.recognized_tags:
            raise ValueError("recognized_tags must not be empty")
        object.__setattr__(self, "recognized_tags", frozenset(self.recognized_tags))

    @property
    def required_columns(self) -> tuple[str, str]:
        return (self.text_column, self.template_column)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ReviewConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})


DEFAULT_CONFIG = ReviewConfig()
