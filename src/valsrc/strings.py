"""``valsrc.strings``: String literals
===================================

Short strings on one line are printed with :func:`repr`:

  >>> print(render_string("hello \\t world"))
  'hello \\t world'

Strings that span several lines are printed verbatim when a raw triple quoted
literal can hold them:

  >>> print(render_string("one\\ntwo\\nthree"))
  r\"\"\"one
  two
  three\"\"\"

"""

from __future__ import annotations

from typing import Final

__all__ = ("render_string", "render_bytes", "raw_delimiter", "THRESHOLD")

#: Strings at least that long are candidates for the verbatim form.
THRESHOLD: Final = 80

_DELIMITERS: Final = ('"""', "'''")


def _verbatim_safe(s: str) -> bool:
    # The tokenizer turns "\r\n" and "\r" into "\n" inside literals.
    for c in s:
        if c not in "\n\t" and not c.isprintable():
            return False
    # In raw strings a backslash still escapes the next quote and can't end the
    # literal.
    if s.endswith("\\"):
        return False
    return "\\'" not in s and '\\"' not in s


def raw_delimiter(s: str) -> str | None:
    """The quote that can wrap *s* in a raw string, if there is one.

    >>> raw_delimiter('say \"\"\"hi\"\"\"\\n')
    "'''"
    >>> raw_delimiter("\\x00") is None
    True
    """
    if not _verbatim_safe(s):
        return None
    for delim in _DELIMITERS:
        if delim not in s and not s.endswith(delim[0]):
            return delim
    return None


def render_string(s: str, threshold: int = THRESHOLD) -> str:
    """Turn *s* into a python literal.

    Both forms evaluate to *s*; the verbatim form is only used to make long or
    multi line strings easier to read.
    """
    if "\n" in s or len(s) >= threshold:
        delim = raw_delimiter(s)
        if delim is not None:
            return f"r{delim}{s}{delim}"
    return repr(s)


def render_bytes(b: bytes) -> str:
    return repr(bytes(b))
