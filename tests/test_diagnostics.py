import re

import pytest

from deid_review import diagnostics
from deid_review.diagnostics import (
    Divergence,
    literal_pieces,
    locate_divergence,
    make_aligner,
)
from deid_review.tokenizer import tokenize


def test_make_aligner_defaults():
    aligner = make_aligner()
    assert aligner.mode == "local"
    assert aligner.match_score == 2
    assert aligner.mismatch_score == -2
    assert aligner.open_gap_score == -0.5
    assert aligner.extend_gap_score == -0.1


def test_make_aligner_with_explicit_mode():
    assert make_aligner("global").mode == "global"


def test_literal_pieces_merges_unrecognized_tags_into_literals():
    pieces = literal_pieces(tokenize("ID <mrn>: <name> on <date>."))
    assert pieces == [(0, "ID <mrn>: ", False), (4, " on ", True), (6, ".", True)]


def test_literal_pieces_without_literals():
    assert literal_pieces(tokenize("<name><date>")) == []


def test_aligned_template_has_no_divergence():
    assert locate_divergence("Alice saw Paris", "<name> saw <location>") is None


def test_missing_literal_after_tag():
    div = locate_divergence("Alice drove.", "<name> flew.")
    assert div is not None
    assert div.segment_index == 1
    assert div.literal == " flew."
    assert div.expected_at == 0


def test_missing_leading_literal():
    div = locate_divergence("Pat. Jan seen", "Patient <name> seen")
    assert div.segment_index == 0
    assert div.literal == "Patient "
    assert div.expected_at == 0


def test_near_miss_reports_closest_offset():
    original = "Patient Jan was seen on Monday"
    div = locate_divergence(original, "Patient <name> was sen on <date>")
    assert div.literal == " was sen on "
    assert div.expected_at == len("Patient ")
    assert div.offset == original.index(" was seen")
    assert div.similarity > 0.9


def test_far_miss_has_no_offset():
    div = locate_divergence("abcdefgh", "<name>zzzzzz<date>", min_similarity=0.6)
    assert div.literal == "zzzzzz"
    assert div.offset is None


def test_leftover_original_text():
    div = locate_divergence("Hello world", "Hello")
    assert div == Divergence(1, "", 5, 5, 0.0)


def test_empty_template_against_text():
    assert locate_divergence("text", "") == Divergence(0, "", 0, 0, 0.0)


@pytest.mark.parametrize(
    "original, template",
    [
        ("xaya", "<name>a"),
        ("Jan and Piet and Klaas", "<name> and <name>"),
        ("a\nb", "<name>\n<date>"),
    ],
)
def test_templates_that_align_report_nothing(original, template):
    assert locate_divergence(original, template) is None


def test_pattern_errors_give_no_divergence(monkeypatch):
    def broken(original_text, segments, recognized):
        raise re.error("boom")

    monkeypatch.setattr(diagnostics, "match_segments", broken)
    assert locate_divergence("Alice drove.", "<name> flew.") is None
