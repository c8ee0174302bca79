"""Tests for the INI parser."""

from __future__ import annotations

import logging
import textwrap

import pytest

from dotconf.ini import infer_value, parse_ini, strip_inline_comment, unescape
from dotconf.types import WideInt


def _parse(text: str) -> dict:
    return parse_ini(textwrap.dedent(text))


class TestBasics:
    def test_key_value_pairs(self) -> None:
        result = _parse(
            """
            key1=value1
            key2 = value2
            key_with_underscore=value_with_underscore
            """
        )
        assert result == {
            "key1": "value1",
            "key2": "value2",
            "key_with_underscore": "value_with_underscore",
        }

    def test_empty_and_whitespace_content(self) -> None:
        assert parse_ini("") == {}
        assert parse_ini("   \n\t\r\n   ") == {}

    def test_only_comments(self) -> None:
        assert parse_ini("# comment1\n; comment2\n") == {}

    def test_crlf_line_endings(self) -> None:
        assert parse_ini("a=1\r\nb=two\r\n") == {"a": True, "b": "two"}

    def test_splits_on_first_equals(self) -> None:
        assert parse_ini("url=a=b=c") == {"url": "a=b=c"}

    @pytest.mark.parametrize(
        "line",
        ["no equals sign here", "= value_without_key", "bad[key]=1", "bad;key=1", "  =  "],
    )
    def test_invalid_lines_are_skipped(self, line: str) -> None:
        assert parse_ini(line) == {}

    def test_empty_value(self) -> None:
        assert parse_ini("empty_value = ") == {"empty_value": ""}

    def test_later_key_wins(self) -> None:
        assert parse_ini("a=x\na=y") == {"a": "y"}


class TestSections:
    def test_sections_become_nested_maps(self) -> None:
        result = _parse(
            """
            global_key=global_value

            [section1]
            key1=s1v1

            [section2]
            key1=s2v1
            """
        )
        assert result == {
            "global_key": "global_value",
            "section1": {"key1": "s1v1"},
            "section2": {"key1": "s2v1"},
        }

    def test_section_name_is_trimmed(self) -> None:
        assert parse_ini("[  spaced_section  ]\nk=v") == {"spaced_section": {"k": "v"}}

    def test_reopened_section_merges(self) -> None:
        result = parse_ini("[s]\na=x\n[t]\nb=y\n[s]\nc=z")
        assert result == {"s": {"a": "x", "c": "z"}, "t": {"b": "y"}}

    def test_section_replaces_root_scalar(self) -> None:
        result = parse_ini("server=plain\n[server]\nport=8080")
        assert result == {"server": {"port": 8080}}

    @pytest.mark.parametrize("header", ["[bad[name]", "[bad#name]", "[bad;name]", "[bad=name]", "[]", "[   ]"])
    def test_invalid_section_discards_keys_until_next_valid(self, header: str) -> None:
        result = parse_ini(f"root=1x\n{header}\nlost=value\nalso_lost=2\n[good]\nkept=value")
        assert result == {"root": "1x", "good": {"kept": "value"}}

    def test_invalid_section_discards_until_eof(self) -> None:
        assert parse_ini("[ok]\na=b\n[x#y]\nc=d") == {"ok": {"a": "b"}}

    def test_invalid_section_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="dotconf.ini"):
            parse_ini("[a=b]\nk=v")
        assert "invalid INI section" in caplog.text

    def test_header_with_trailing_comment_is_not_a_header(self) -> None:
        # does not end with ']', so it is treated as a (skipped) key line
        assert parse_ini("[s] # note\nk=v") == {"k": "v"}


class TestComments:
    def test_whole_line_and_inline_comments(self) -> None:
        result = _parse(
            """
            # comment
            ; comment
            key1=value1
            key2=value2 # inline
            key3=value3 ; inline
            """
        )
        assert result == {"key1": "value1", "key2": "value2", "key3": "value3"}

    def test_comment_chars_inside_quotes_are_kept(self) -> None:
        result = parse_ini("a=\"x # y\"\nb='x ; y'")
        assert result == {"a": "x # y", "b": "x ; y"}

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("key=value", "key=value"),
            ("key=value # comment", "key=value"),
            ("key=value ; comment", "key=value"),
            ('key="value # not comment"', 'key="value # not comment"'),
            ("key='value ; not comment'", "key='value ; not comment'"),
            ('key="value \\" # comment"', 'key="value \\" # comment"'),
            ("key=\"value 'with' quotes # c\"", "key=\"value 'with' quotes # c\""),
            ("key=value #", "key=value"),
            ("# just a comment", ""),
            ('key="unmatched quote # comment', 'key="unmatched quote # comment'),
            ("key=a\\#b # c", "key=a\\#b"),
        ],
    )
    def test_strip_inline_comment(self, line: str, expected: str) -> None:
        assert strip_inline_comment(line) == expected


class TestEscapes:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("simple string", "simple string"),
            ("line1\\nline2", "line1\nline2"),
            ("col1\\tcol2", "col1\tcol2"),
            ("line1\\rline2", "line1\rline2"),
            ("path\\\\to\\\\file", "path\\to\\file"),
            ('say \\"hello\\"', 'say "hello"'),
            ("don\\'t", "don't"),
            ("null\\0char", "null\0char"),
            ("\\n\\t\\r\\\\", "\n\t\r\\"),
            ("unknown\\xescape", "unknown\\xescape"),
            ("value\\", "value\\"),
            ("\\", "\\"),
            ("", ""),
        ],
    )
    def test_unescape(self, raw: str, expected: str) -> None:
        assert unescape(raw) == expected

    def test_quoted_values_are_unescaped(self) -> None:
        result = parse_ini('newline="Line1\\nLine2"\nquote="Say \\"Hi\\""')
        assert result == {"newline": "Line1\nLine2", "quote": 'Say "Hi"'}

    def test_unquoted_values_are_unescaped(self) -> None:
        assert parse_ini("path=C:\\\\tmp\\tdir") == {"path": "C:\\tmp\tdir"}


class TestValueInference:
    @pytest.mark.parametrize("raw", ["true", "TRUE", "yes", "Yes", "on", "ON", "1"])
    def test_true_words(self, raw: str) -> None:
        assert infer_value(raw) is True

    @pytest.mark.parametrize("raw", ["false", "no", "NO", "off", "Off", "0"])
    def test_false_words(self, raw: str) -> None:
        assert infer_value(raw) is False

    def test_quoted_boolean_word_stays_string(self) -> None:
        assert infer_value('"yes"') == "yes"

    def test_integers(self) -> None:
        assert infer_value("42") == 42
        assert infer_value("-17") == -17
        assert type(infer_value("42")) is int

    def test_machine_word_edges_are_widened(self) -> None:
        top = infer_value("9223372036854775807")
        bottom = infer_value("-9223372036854775808")
        assert isinstance(top, WideInt) and top == 9223372036854775807
        assert isinstance(bottom, WideInt) and bottom == -9223372036854775808

    def test_values_inside_word_range_keep_native_width(self) -> None:
        assert type(infer_value("9223372036854775806")) is int
        assert type(infer_value("-9223372036854775807")) is int

    def test_integer_beyond_64_bits_becomes_float(self) -> None:
        value = infer_value("9223372036854775808")
        assert isinstance(value, float)

    def test_floats(self) -> None:
        assert infer_value("3.14") == 3.14
        assert infer_value("1e3") == 1000.0

    def test_hex_floats(self) -> None:
        assert infer_value("0x1p-2") == 0.25
        assert infer_value("0x10") == "0x10"

    def test_comma_list(self) -> None:
        assert infer_value("item1, item2 ,item3") == ["item1", "item2", "item3"]

    def test_comma_list_drops_empty_parts(self) -> None:
        assert infer_value("a,,b,") == ["a", "b"]

    def test_single_item_after_split_stays_string(self) -> None:
        assert infer_value("a,") == "a,"

    def test_duration_strings_stay_strings(self) -> None:
        assert infer_value("5m30s") == "5m30s"

    def test_empty_quotes(self) -> None:
        assert infer_value('""') == ""
        assert infer_value("''") == ""

    def test_quoted_keeps_inner_whitespace(self) -> None:
        assert infer_value('"  spaced  "') == "  spaced  "

    def test_mismatched_quotes_are_not_stripped(self) -> None:
        assert infer_value("\"abc'") == "\"abc'"


class TestContinuation:
    def test_joined_with_single_space(self) -> None:
        assert parse_ini("a=1 \\\n   2") == {"a": "1 2"}

    def test_multiple_continuations(self) -> None:
        assert parse_ini("msg=one \\\n two \\\n three\nb=x") == {"msg": "one two three", "b": "x"}

    def test_continuation_lines_are_consumed(self) -> None:
        assert parse_ini("a=x \\\nb=y") == {"a": "x b=y"}

    def test_blank_continuation_line(self) -> None:
        assert parse_ini("a=x \\\n\nb=y") == {"a": "x", "b": "y"}

    def test_escaped_backslash_does_not_continue(self) -> None:
        assert parse_ini("a=x\\\\\nb=y") == {"a": "x\\", "b": "y"}

    def test_marker_on_last_line_is_kept(self) -> None:
        assert parse_ini("a=x\\") == {"a": "x\\"}

    def test_continued_comment_is_dropped(self) -> None:
        assert parse_ini("# note \\\nstill comment\nk=v") == {"k": "v"}


class TestFullDocument:
    def test_realistic_file(self, server_ini: str) -> None:
        result = parse_ini(server_ini)
        assert result == {
            "app_name": "demo service",
            "debug": True,
            "server": {
                "host": "localhost",
                "port": 8080,
                "timeout": "30s",
                "features": ["auth", "metrics", "tracing"],
            },
            "database": {"url": "postgres://db:5432/app", "pool": 10, "ratio": 0.75},
        }
