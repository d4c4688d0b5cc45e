"""Recover which part of the original text each template tag replaced."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Optional

from .tokenizer import RECOGNIZED_TAGS, Segment, tokenize

__all__ = [
    "ERROR_TAG",
    "HighlightedSpan",
    "build_pattern",
    "match_segments",
    "align",
    "align_template",
    "highlight_template",
]

logger = logging.getLogger(__name__)

ERROR_TAG = "error"


@dataclass(frozen=True)
class HighlightedSpan:
    text: str
    is_highlighted: bool = False
    tag_type: Optional[str] = None


def build_pattern(
    segments: Sequence[Segment], recognized: Collection[str] = RECOGNIZED_TAGS
) -> re.Pattern:
    """
    Compile an anchored pattern for the original text behind ``segments``.

    Recognized tags become non-greedy ``(.*?)`` captures; literal text and
    unrecognized tags must appear verbatim. ``.`` also matches newlines.
    """
    parts = []
    for seg in segments:
        if seg.is_recognized(recognized):
            parts.append("(.*?)")
        else:
            parts.append(re.escape(seg.text))
    return re.compile("^" + "".join(parts) + "$", flags=re.DOTALL)


def match_segments(
    original_text: str,
    segments: Sequence[Segment],
    recognized: Collection[str] = RECOGNIZED_TAGS,
) -> Optional[re.Match]:
    # fullmatch: "$" alone would accept a trailing newline the template lacks
    return build_pattern(segments, recognized).fullmatch(original_text)


def align(
    original_text: str,
    segments: Sequence[Segment],
    recognized: Collection[str] = RECOGNIZED_TAGS,
) -> list[HighlightedSpan]:
    """
    Split ``original_text`` into spans, highlighting what each recognized tag
    replaced.

    When the literal parts of the template are not found in order, the whole
    text comes back as one plain span. Adjacent tags with nothing between
    them give the earlier tag the shortest possible capture.
    """
    try:
        match = match_segments(original_text, segments, recognized)
    except (re.error, RecursionError, OverflowError) as exc:
        logger.warning("Could not build alignment pattern: %s", exc)
        return [HighlightedSpan(original_text, False, ERROR_TAG)]

    if match is None:
        logger.debug("Template does not match original text; no highlights.")
        return [HighlightedSpan(original_text)]

    captures = iter(match.groups())
    spans = []
    for seg in segments:
        if seg.is_recognized(recognized):
            spans.append(HighlightedSpan(next(captures), True, seg.tag_type))
        else:
            spans.append(HighlightedSpan(seg.text))

    return [span for span in spans if span.text]


def align_template(
    original_text: str,
    template_text: str,
    recognized: Collection[str] = RECOGNIZED_TAGS,
) -> list[HighlightedSpan]:
    """Tokenize ``template_text`` and align it against ``original_text``."""
    return align(original_text, tokenize(template_text), recognized)


def highlight_template(
    template_text: str, recognized: Collection[str] = RECOGNIZED_TAGS
) -> list[HighlightedSpan]:
    """Spans over the template itself, with recognized tags highlighted."""
    return [
        HighlightedSpan(seg.text, seg.is_recognized(recognized), seg.tag_type)
        for seg in tokenize(template_text)
    ]
