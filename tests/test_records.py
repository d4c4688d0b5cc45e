import logging

from deid_review.records import (
    DecodedRecords,
    decode_records,
    encode_records,
    escape_field,
    parse_rows,
)


class TestDecodeRecords:
    def test_basic_header_and_rows(self):
        out = decode_records("text,deid_text\nJan was here,<name> was here\n")
        assert out == DecodedRecords(
            header=["text", "deid_text"],
            rows=[{"text": "Jan was here", "deid_text": "<name> was here"}],
            skipped=[],
        )

    def test_header_is_lowercased_and_trimmed(self):
        header, rows, skipped = decode_records(" Text , DEID_Text \nA,B")
        assert header == ["text", "deid_text"]
        assert rows == [{"text": "A", "deid_text": "B"}]

    def test_quoted_fields_keep_commas_quotes_and_newlines(self):
        raw = 'a,b\n"x,""y""\nz",plain\n'
        header, rows, skipped = decode_records(raw)
        assert rows == [{"a": 'x,"y"\nz', "b": "plain"}]

    def test_unquoted_fields_are_trimmed_quoted_are_not(self):
        header, rows, _ = decode_records('a,b\n  left  ,  "  kept  "  \n')
        assert rows == [{"a": "left", "b": "  kept  "}]

    def test_crlf_and_bare_cr_end_rows(self):
        header, rows, _ = decode_records("a,b\r\n1,2\r3,4")
        assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_quoted_crlf_is_preserved(self):
        _, rows, _ = decode_records('a\n"one\r\ntwo"\n')
        assert rows == [{"a": "one\r\ntwo"}]

    def test_blank_rows_are_dropped(self):
        _, rows, skipped = decode_records("a,b\n\n , \n1,2\n\n")
        assert rows == [{"a": "1", "b": "2"}]
        assert skipped == []

    def test_row_with_wrong_field_count_is_skipped(self, caplog):
        raw = "a,b\n1,2\n3\n4,5,6\n7,8\n"
        with caplog.at_level(logging.WARNING, logger="deid_review.records"):
            header, rows, skipped = decode_records(raw)
        assert rows == [{"a": "1", "b": "2"}, {"a": "7", "b": "8"}]
        assert skipped == [3, 4]
        assert "line 3" in caplog.text

    def test_skipped_line_numbers_count_quoted_newlines(self):
        raw = 'a,b\n"x\ny",1\nbad\n'
        _, rows, skipped = decode_records(raw)
        assert rows == [{"a": "x\ny", "b": "1"}]
        assert skipped == [4]

    def test_empty_input(self):
        assert decode_records("") == DecodedRecords([], [], [])
        assert decode_records("\n \n") == DecodedRecords([], [], [])

    def test_header_only(self):
        assert decode_records("text,deid_text\n") == DecodedRecords(
            ["text", "deid_text"], [], []
        )

    def test_unterminated_quote_runs_to_end_of_input(self):
        _, rows, _ = decode_records('a\n"open\nstill open')
        assert rows == [{"a": "open\nstill open"}]


def test_parse_rows_tracks_start_lines():
    rows = parse_rows('h\n"1\n2"\n3\n')
    assert [(r.line, r.fields) for r in rows] == [(1, ["h"]), (2, ["1\n2"]), (4, ["3"])]


def test_escape_field():
    assert escape_field("plain") == "plain"
    assert escape_field("a,b") == '"a,b"'
    assert escape_field('say "hi"') == '"say ""hi"""'
    assert escape_field("two\nlines") == '"two\nlines"'
    assert escape_field(" padded ") == '" padded "'
    assert escape_field(None) == ""
    assert escape_field(3) == "3"
    assert escape_field("", force_quotes=True) == '""'


def test_encode_records_writes_header_first_with_newlines():
    out = encode_records(["a", "b"], [{"a": "1", "b": "x,y"}, {"a": "2", "b": None}])
    assert out == 'a,b\n1,"x,y"\n2,'


def test_encode_records_ignores_extra_keys():
    out = encode_records(["a"], [{"a": "1", "zzz": "ignored"}])
    assert out == "a\n1"


def test_round_trip_special_characters():
    header = ["a", "b"]
    rows = [{"a": 'x,"y"\nz', "b": "plain"}]
    decoded = decode_records(encode_records(header, rows))
    assert decoded.header == header
    assert decoded.rows == rows


def test_round_trip_awkward_values():
    header = ["text", "deid_text", "note"]
    rows = [
        {"text": "  lead and trail  ", "deid_text": '"', "note": "\r\n"},
        {"text": "", "deid_text": "", "note": ""},
        {"text": "a\rb", "deid_text": ",,,", "note": '""'},
    ]
    decoded = decode_records(encode_records(header, rows))
    assert decoded.header == header
    assert decoded.rows == rows
    assert decoded.skipped == []
