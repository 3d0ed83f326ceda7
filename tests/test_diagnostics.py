"""Tests for "expected ..." messages, built directly and through expect()."""

import pytest

from uparse import Literal, build_message, eol, ident, integer, point_at, string


class TestBuildMessage:
    def test_single_alternative(self):
        assert build_message([ident], True, 0, 0) == "expected <identifier>"

    def test_several_alternatives(self):
        assert build_message(["+", "-"], True, 0, 0) == "expected one of: +, -"

    def test_sequence_lists_from_failure(self):
        msg = build_message([ident, "[", integer, "]"], False, 3, 3)
        assert msg == "expected ] at position 4"

    def test_sequence_never_says_one_of(self):
        msg = build_message(["integer", integer], False, 0, 0)
        assert msg == "expected integer, <integer>"

    def test_position_only_past_start(self):
        assert build_message([eol], True, 0, 0) == "expected <end of line>"
        assert build_message([eol], True, 0, 4) == "expected <end of line> at position 5"

    def test_literal_objects_render_as_text(self):
        assert build_message([Literal("then"), string], True, 0, 0) == (
            "expected one of: then, <quoted string>"
        )


class TestExpect:
    @pytest.mark.parametrize(
        "line,message",
        [
            ("intege 1234", "expected integer, <integer>"),
            ("integer ABC", "expected <integer> at position 9"),
        ],
    )
    def test_expect_all_keyword_integer(self, scan, line, message):
        s = scan(line)
        with s.recovery() as failed:
            s.expect_all("integer", integer)
        assert failed.message == message

    def test_expect_all_match(self, scan):
        s = scan("integer 12")
        with s.recovery() as failed:
            s.expect_all("integer", integer)
        assert not failed
        assert s.captures[1].value == 12

    @pytest.mark.parametrize(
        "line,message",
        [
            ('anident[1234] = "open string', "unterminated string"),
            (
                '_id202 [bad] = "string"',
                "expected <integer>, ], =, <quoted string> at position 9",
            ),
            (
                "1",
                "expected <identifier>, [, <integer>, ], =, <quoted string>",
            ),
        ],
    )
    def test_expect_all_assignment(self, scan, line, message):
        s = scan(line)
        with s.recovery() as failed:
            s.expect_all(ident, "[", integer, "]", "=", string)
        assert failed.message == message

    def test_expect_any(self, scan):
        s = scan("1 2")
        s.accept(integer)
        with s.recovery() as failed:
            s.expect(eol, ",")
        assert failed.message == "expected one of: <end of line>, , at position 3"
        assert failed.pos == 2
        assert s.pos == 2

    def test_message_length_limit(self, scan):
        s = scan("x", max_message=12)
        with s.recovery() as failed:
            s.expect("alpha", "beta", "gamma")
        assert failed.message == "expected one"


def test_point_at():
    assert point_at("x[5", 3) == "x[5\n   ^"
    assert point_at("abc", 0) == "abc\n^"
    assert point_at("abc", 10) == "abc\n   ^"
