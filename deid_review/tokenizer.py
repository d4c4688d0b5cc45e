"""Split template text into literal and tag segments."""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import Optional

__all__ = [
    "RECOGNIZED_TAGS",
    "TAG_RE",
    "SegmentKind",
    "Segment",
    "tokenize",
]

# Tag names that capture a span of the original text.
RECOGNIZED_TAGS = frozenset({"name", "location", "date"})

TAG_RE = re.compile(r"<([^<>]+)>")


class SegmentKind(Enum):
    LITERAL = "literal"
    TAG = "tag"


@dataclass(frozen=True)
class Segment:
    text: str
    kind: SegmentKind
    tag_type: Optional[str] = None

    @property
    def is_tag(self) -> bool:
        return self.kind is SegmentKind.TAG

    def is_recognized(self, recognized: Collection[str] = RECOGNIZED_TAGS) -> bool:
        """True when this is a tag whose name captures original text."""
        return self.is_tag and self.tag_type in recognized


def tokenize(template: str) -> list[Segment]:
    """
    Split ``template`` into segments in left-to-right order.

    Every ``<...>`` run without a nested ``<`` becomes a tag segment, the text
    around it literal segments. Joining the segment texts gives back the
    template; an empty template gives no segments.
    """
    segments: list[Segment] = []
    last = 0

    for m in TAG_RE.finditer(template):
        if m.start() > last:
            segments.append(Segment(template[last : m.start()], SegmentKind.LITERAL))
        segments.append(Segment(m.group(0), SegmentKind.TAG, tag_type=m.group(1)))
        last = m.end()

    if last < len(template):
        segments.append(Segment(template[last:], SegmentKind.LITERAL))

    return segments
