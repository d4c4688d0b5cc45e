"""Convert aligned spans to offset annotations and Deduce annotations."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import Any, Optional, TypedDict

import docdeid as dd
from typing_extensions import NotRequired

from .alignment import HighlightedSpan, align_template
from .tokenizer import RECOGNIZED_TAGS

__all__ = [
    "SpanRecord",
    "DEFAULT_TAG_TO_WORKFLOW_LABEL",
    "DEFAULT_TAG_TO_DEDUCE_TAG",
    "DEFAULT_DEDUCE_TAG_TO_TAG",
    "tag_to_deduce_tag",
    "spans_to_annotations",
    "template_to_annotations",
    "annotation_to_deduce",
    "spans_to_deduce",
    "deduce_to_template",
]


class SpanRecord(TypedDict):
    begin: int
    end: int
    label: str
    text: str
    Category: str
    Subtype: NotRequired[str]


# Template tag -> workflow label.
DEFAULT_TAG_TO_WORKFLOW_LABEL = {
    "name": "Name:Other",
    "location": "Address_Location:Other",
    "date": "Date",
}

# Template tag -> Deduce tag.
DEFAULT_TAG_TO_DEDUCE_TAG = {
    "name": "persoon",
    "location": "locatie",
    "date": "datum",
}

# Deduce tag -> template tag.
DEFAULT_DEDUCE_TAG_TO_TAG = {
    "patient": "name",
    "persoon": "name",
    "locatie": "location",
    "datum": "date",
}


def tag_to_deduce_tag(
    tag: str,
    tag_map: Mapping[str, str] = DEFAULT_TAG_TO_DEDUCE_TAG,
    strict: bool = False,
) -> str:
    """Map a template tag to a Deduce tag."""

    deduce_tag = tag_map.get(tag)
    if deduce_tag is not None:
        return deduce_tag
    if strict:
        raise KeyError(f"Template tag is not in tag_map mapping: {tag}")

    return tag


def spans_to_annotations(
    spans: Iterable[HighlightedSpan],
    tag_to_label: Mapping[str, str] = DEFAULT_TAG_TO_WORKFLOW_LABEL,
) -> list[SpanRecord]:
    """
    Offsets of the highlighted spans in the text the spans were cut from.

    Spans must cover the text in order, as ``align`` returns them.
    """
    annotations: list[SpanRecord] = []
    begin = 0
    for span in spans:
        end = begin + len(span.text)
        if span.is_highlighted:
            label = tag_to_label.get(span.tag_type, span.tag_type)
            record: SpanRecord = {
                "begin": begin,
                "end": end,
                "label": label,
                "text": span.text,
                "Category": label.split(":")[0],
            }
            if ":" in label:
                record["Subtype"] = label.split(":", 1)[1]
            annotations.append(record)
        begin = end
    return annotations


def template_to_annotations(
    original_text: str,
    template_text: str,
    recognized: Collection[str] = RECOGNIZED_TAGS,
    tag_to_label: Mapping[str, str] = DEFAULT_TAG_TO_WORKFLOW_LABEL,
) -> list[SpanRecord]:
    """Align ``template_text`` and return annotations over ``original_text``."""
    spans = align_template(original_text, template_text, recognized)
    return spans_to_annotations(spans, tag_to_label)


def annotation_to_deduce(
    annotation: Mapping[str, Any],
    tag_map: Mapping[str, str] = DEFAULT_TAG_TO_DEDUCE_TAG,
    label_to_tag: Optional[Mapping[str, str]] = None,
    strict: bool = False,
) -> dd.Annotation:
    """Convert a span annotation dictionary to a Deduce ``Annotation``."""

    if label_to_tag is None:
        label_to_tag = {v: k for k, v in DEFAULT_TAG_TO_WORKFLOW_LABEL.items()}
    label = str(annotation["label"])
    tag = label_to_tag.get(label, label)

    return dd.Annotation(
        text=str(annotation["text"]),
        start_char=int(annotation["begin"]),
        end_char=int(annotation["end"]),
        tag=tag_to_deduce_tag(tag, tag_map=tag_map, strict=strict),
        priority=int(annotation.get("priority", 0)),
    )


def spans_to_deduce(
    spans: Iterable[HighlightedSpan],
    tag_map: Mapping[str, str] = DEFAULT_TAG_TO_DEDUCE_TAG,
    strict: bool = False,
) -> list[dd.Annotation]:
    """Convert highlighted spans straight to Deduce annotations."""

    identity = {tag: tag for tag in DEFAULT_TAG_TO_WORKFLOW_LABEL}
    return [
        annotation_to_deduce(
            annotation,
            tag_map=tag_map,
            label_to_tag={},
            strict=strict,
        )
        for annotation in spans_to_annotations(spans, tag_to_label=identity)
    ]


def deduce_to_template(
    original_text: str,
    annotations: Iterable[dd.Annotation],
    tag_map: Mapping[str, str] = DEFAULT_DEDUCE_TAG_TO_TAG,
) -> str:
    """
    Replace each annotated range of ``original_text`` with a ``<tag>`` token.

    Deduce tags missing from ``tag_map`` keep their own name. Overlapping
    annotations raise ``ValueError``.
    """
    ordered: Sequence[dd.Annotation] = sorted(
        annotations, key=lambda a: (a.start_char, a.end_char)
    )

    parts = []
    last = 0
    for ann in ordered:
        start, end = int(ann.start_char), int(ann.end_char)
        if start < last:
            raise ValueError(
                f"Overlapping annotations at [{start}:{end}] ({ann.tag}); "
                "resolve overlaps before building a template."
            )
        parts.append(original_text[last:start])
        parts.append(f"<{tag_map.get(ann.tag, ann.tag)}>")
        last = end
    parts.append(original_text[last:])

    return "".join(parts)
