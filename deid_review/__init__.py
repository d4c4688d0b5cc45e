"""Align de-identified templates with their original text for review."""

from .alignment import HighlightedSpan, align, align_template, highlight_template
from .records import decode_records, encode_records
from .tokenizer import RECOGNIZED_TAGS, Segment, SegmentKind, tokenize

__all__ = [
    "RECOGNIZED_TAGS",
    "Segment",
    "SegmentKind",
    "tokenize",
    "HighlightedSpan",
    "align",
    "align_template",
    "highlight_template",
    "decode_records",
    "encode_records",
]
__version__ = "0.1.0"
