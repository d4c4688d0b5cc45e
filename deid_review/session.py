"""Working set of samples under review."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Optional

from .alignment import HighlightedSpan, align_template
from .config import DEFAULT_CONFIG, ReviewConfig
from .diagnostics import Divergence, locate_divergence
from .exceptions import EmptyImportError, MissingColumnsError, NoSamplesError
from .records import DecodedRecords, Record, decode_records, encode_records

__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_SAMPLE_DATA",
    "Sample",
    "default_samples",
    "samples_from_records",
    "ReviewSession",
]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = ["text", "deid_text", "champsid"]

DEFAULT_SAMPLE_DATA = [
    {
        "text": "John went to the Emory clinic for a routine exam on Jan 5, 2023.",
        "deid_text": "<name> went to the <location> clinic for a routine exam on <date>.",
        "champsid": "CH001",
    },
    {
        "text": "Meet me at Times Square tomorrow afternoon.",
        "deid_text": "Meet me at <location> <date>.",
        "champsid": "CH002",
    },
    {
        "text": "The patient, Jane Doe, reported fever starting on 2024-03-10.",
        "deid_text": "The patient, <name>, reported fever starting on <date>.",
        "champsid": "CH003",
    },
]


@dataclass
class Sample:
    """One reviewed record and the template it arrived with."""

    id: str
    data: Record
    original_template: Optional[str] = None

    def text(self, config: ReviewConfig = DEFAULT_CONFIG) -> str:
        return self.data.get(config.text_column, "")

    def template(self, config: ReviewConfig = DEFAULT_CONFIG) -> str:
        return self.data.get(config.template_column, "")

    def is_changed(self, config: ReviewConfig = DEFAULT_CONFIG) -> bool:
        return (
            self.original_template is not None
            and self.template(config) != self.original_template
        )


def default_samples() -> list[Sample]:
    return [
        Sample(f"sample_{i}", dict(data), data["deid_text"])
        for i, data in enumerate(DEFAULT_SAMPLE_DATA, 1)
    ]


def samples_from_records(
    header: Sequence[str],
    rows: Sequence[Mapping[str, str]],
    config: ReviewConfig = DEFAULT_CONFIG,
    source: Optional[str] = None,
) -> list[Sample]:
    """
    Turn decoded rows into samples.

    Raises ``MissingColumnsError`` when the header lacks the text or template
    column and ``EmptyImportError`` when there are no rows.
    """
    header = [name.strip().lower() for name in header]
    missing = tuple(c for c in config.required_columns if c not in header)
    if missing:
        raise MissingColumnsError(
            f"File must contain {' and '.join(repr(c) for c in config.required_columns)} "
            f"columns; missing {', '.join(missing)}",
            source=source,
            missing=missing,
        )
    if not rows:
        raise EmptyImportError("File contains no data rows", source=source)

    samples = []
    for i, row in enumerate(rows, 1):
        data = {name: str(row.get(name) or "") for name in header}
        samples.append(Sample(f"sample_{i}", data, data[config.template_column]))
    return samples


@dataclass
class ReviewSession:
    """
    Samples, the active index and the header used for export.

    The session owns the notion of a "current" sample; alignment itself only
    ever sees the two strings of that sample.
    """

    samples: list[Sample] = field(default_factory=default_samples)
    headers: list[str] = field(default_factory=lambda: list(DEFAULT_HEADERS))
    index: int = 0
    config: ReviewConfig = DEFAULT_CONFIG

    def __len__(self) -> int:
        return len(self.samples)

    def _require_samples(self) -> None:
        if not self.samples:
            raise NoSamplesError("No samples loaded")

    @property
    def current(self) -> Sample:
        self._require_samples()
        return self.samples[self.index]

    def edit(self, template: str) -> Sample:
        """Store ``template`` as the current sample's tagged text."""
        sample = self.current
        data = dict(sample.data)
        data[self.config.template_column] = template
        self.samples[self.index] = replace(sample, data=data)
        return self.samples[self.index]

    def go_to(self, index: int) -> Sample:
        self._require_samples()
        if not 0 <= index < len(self.samples):
            raise IndexError(f"Sample index out of range: {index}")
        self.index = index
        return self.current

    def next(self) -> Sample:
        self._require_samples()
        return self.go_to((self.index + 1) % len(self.samples))

    def previous(self) -> Sample:
        self._require_samples()
        return self.go_to((self.index - 1) % len(self.samples))

    def highlighted(self) -> list[HighlightedSpan]:
        sample = self.current
        return align_template(
            sample.text(self.config),
            sample.template(self.config),
            self.config.recognized_tags,
        )

    def divergence(self) -> Optional[Divergence]:
        sample = self.current
        return locate_divergence(
            sample.text(self.config),
            sample.template(self.config),
            self.config.recognized_tags,
            self.config.min_similarity,
        )

    def changed_samples(self) -> list[Sample]:
        return [s for s in self.samples if s.is_changed(self.config)]

    def load(self, header: Sequence[str], samples: list[Sample]) -> None:
        self.headers = list(header)
        self.samples = samples
        self.index = 0

    def import_csv(self, raw: str, source: Optional[str] = None) -> DecodedRecords:
        """
        Replace the working set with the rows of a CSV file.

        The session is left untouched when the file is rejected.
        """
        decoded = decode_records(raw)
        samples = samples_from_records(
            decoded.header, decoded.rows, self.config, source=source
        )
        self.load(decoded.header, samples)
        logger.info(
            "Loaded %d samples from %s (%d rows skipped)",
            len(samples),
            source or "CSV input",
            len(decoded.skipped),
        )
        return decoded

    def export_header(self) -> list[str]:
        header = list(self.headers) or list(self.config.required_columns)
        if self.config.changed_column not in header:
            header.append(self.config.changed_column)
        return header

    def export_rows(self) -> list[Record]:
        self._require_samples()
        rows = []
        for sample in self.samples:
            row = {name: sample.data.get(name, "") for name in self.headers}
            row[self.config.template_column] = sample.template(self.config)
            row[self.config.changed_column] = (
                "true" if sample.is_changed(self.config) else "false"
            )
            rows.append(row)
        return rows

    def export_csv(self) -> str:
        rows = self.export_rows()
        logger.info(
            "Exporting %d samples (%d changed)", len(rows), len(self.changed_samples())
        )
        return encode_records(self.export_header(), rows)

    def reset(self) -> None:
        """Drop all samples and go back to the built-in examples."""
        self.load(DEFAULT_HEADERS, default_samples())
