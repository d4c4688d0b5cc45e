"""Explain why a template no longer lines up with its original text."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection
from dataclasses import dataclass
from typing import Optional

from Bio import Align

from .alignment import match_segments
from .tokenizer import RECOGNIZED_TAGS, Segment, tokenize

__all__ = [
    "Divergence",
    "make_aligner",
    "literal_pieces",
    "locate_divergence",
]


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Divergence:
    """
    First literal piece of a template that is missing from the original.

    ``expected_at`` is where the piece had to start (or the earliest place it
    could start, after a tag). ``offset`` points at its closest approximate
    occurrence in the rest of the original text, or is ``None`` when nothing
    comes close enough. An empty ``literal`` means the template ended while
    original text was left over.
    """

    segment_index: int
    literal: str
    expected_at: int
    offset: Optional[int]
    similarity: float


def make_aligner(type: str = "local") -> Align.PairwiseAligner:
    a = Align.PairwiseAligner()
    a.mode = type
    a.match_score = 2
    a.mismatch_score = -2
    a.open_gap_score = -0.5
    a.extend_gap_score = -0.1
    return a


def literal_pieces(
    segments: list[Segment], recognized: Collection[str] = RECOGNIZED_TAGS
) -> list[tuple[int, str, bool]]:
    """
    Merge runs of non-capturing segments.

    Returns ``(segment_index, text, after_tag)`` triples, where ``after_tag``
    tells whether a recognized tag precedes the piece.
    """
    pieces: list[tuple[int, str, bool]] = []
    after_tag = False
    for i, seg in enumerate(segments):
        if seg.is_recognized(recognized):
            after_tag = True
            continue
        if pieces and not after_tag:
            index, text, floating = pieces[-1]
            pieces[-1] = (index, text + seg.text, floating)
        else:
            pieces.append((i, seg.text, after_tag))
        after_tag = False
    return pieces


def _closest(
    piece: str, text: str, aligner: Align.PairwiseAligner
) -> tuple[Optional[int], float]:
    if not text:
        return None, 0.0
    try:
        al = aligner.align(piece, text)[0]
    except IndexError:
        return None, 0.0
    t_blocks = al.aligned[1]
    if len(t_blocks) == 0:
        return None, 0.0
    similarity = al.score / (aligner.match_score * max(1, len(piece)))
    return int(t_blocks[0][0]), float(similarity)


def locate_divergence(
    original_text: str,
    template_text: str,
    recognized: Collection[str] = RECOGNIZED_TAGS,
    min_similarity: float = 0.6,
    aligner: Optional[Align.PairwiseAligner] = None,
) -> Optional[Divergence]:
    """
    Find the first template piece that stops the alignment, or ``None`` when
    the template aligns with ``original_text``. Pattern errors also give
    ``None``; ``align`` reports those as an error span.
    """
    segments = tokenize(template_text)
    try:
        if match_segments(original_text, segments, recognized) is not None:
            return None
    except (re.error, RecursionError, OverflowError) as exc:
        logger.warning("Could not build alignment pattern: %s", exc)
        return None
    if aligner is None:
        aligner = make_aligner()

    pieces = literal_pieces(segments, recognized)
    ends_with_tag = bool(segments) and segments[-1].is_recognized(recognized)
    cursor = 0

    for n, (index, piece, after_tag) in enumerate(pieces):
        last = n == len(pieces) - 1 and not ends_with_tag
        if last and after_tag:
            # the final piece is anchored to the end of the text
            pos = len(original_text) - len(piece)
            found = pos >= cursor and original_text.endswith(piece)
        elif after_tag:
            pos = original_text.find(piece, cursor)
            found = pos != -1
        else:
            pos = cursor
            found = original_text.startswith(piece, cursor)

        if not found:
            rel, similarity = _closest(piece, original_text[cursor:], aligner)
            offset = None
            if rel is not None and similarity >= min_similarity:
                offset = cursor + rel
            return Divergence(index, piece, cursor, offset, similarity)
        cursor = pos + len(piece)

    # every piece matched, so the original has text the template does not cover
    return Divergence(len(segments), "", cursor, cursor, 0.0)
