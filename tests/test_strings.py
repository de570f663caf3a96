from __future__ import annotations

import pytest

from valsrc import strings


@pytest.mark.parametrize(
    "s",
    [
        "",
        "hello",
        "tab\there",
        "multi\nline\ntext",
        "ends with a quote\n'",
        'ends with a double quote\n"',
        "trailing backslash\\\n\\",
        "escaped \\' quote\n",
        "contains '''\nand \"\"\"",
        "nul \x00\nbyte",
        "carriage\r\nreturn",
        "x" * 200,
        "unicode: héllo wörld ✓\n",
    ],
)
def test_roundtrip(s):
    assert eval(strings.render_string(s)) == s


def test_tab_stays_on_one_line():
    assert strings.render_string("a\tb") == "'a\\tb'"


def test_newline_is_verbatim():
    assert strings.render_string("a\nb") == 'r"""a\nb"""'


def test_long_strings_are_verbatim():
    s = "word " * 20
    assert strings.render_string(s) == f'r"""{s}"""'
    assert strings.render_string(s, threshold=1000) == repr(s)


def test_delimiter_choice():
    assert strings.raw_delimiter('say """hi"""\n') == "'''"
    assert strings.raw_delimiter('ends with "') == "'''"
    assert strings.raw_delimiter("both ''' and \"\"\"") is None


def test_unsafe_text_falls_back_to_escapes():
    for s in ["bell\a\n", "cr\r\n", "slash at the end\n\\", "q \\'\n"]:
        assert strings.render_string(s) == repr(s)


def test_bytes():
    assert strings.render_bytes(b"a\nb") == "b'a\\nb'"
    assert strings.render_bytes(bytearray(b"xy")) == "b'xy'"
