from __future__ import annotations

import functools

import pygments
import pygments.formatters
import pygments.lexers

CSS_CLASS = "valsrc-highlight"


@functools.lru_cache()
def get_highlight_style() -> str:
    formatter = pygments.formatters.HtmlFormatter(cssclass=CSS_CLASS)
    styles: str = formatter.get_style_defs(f".{CSS_CLASS}")
    return styles


def highlight(code: str) -> str:
    """Html for the python source *code*."""
    lexer = pygments.lexers.PythonLexer()
    formatter = pygments.formatters.HtmlFormatter(cssclass=CSS_CLASS)
    res: str = pygments.highlight(code, lexer, formatter)
    return res
