"""``valsrc.pretty``: Document layout
==================================

Literals are assembled as documents and laid out at the very end, once we know
how wide the output is allowed to be. The layout algorithm is Christian
Lindig's "strictly pretty" [`pdf
<https://lindig.github.io/papers/strictly-pretty-2000.pdf>`_] with the group
modes of the `QuickC-- implementation
<https://github.com/nrnrnr/qc--/blob/master/cllib/pp.nw>`_.

  >>> doc = text("f(") + nest(4, SOFT_BREAK + text("x"))
  >>> doc += SOFT_BREAK + text(")")
  >>> doc.to_string(80)
  'f(x)'
  >>> print(doc.to_string(3))
  f(
      x
  )

"""

from __future__ import annotations

import dataclasses
import enum
import io
from typing import Iterable, TextIO

__all__ = (
    "Doc",
    "EMPTY",
    "BREAK",
    "SOFT_BREAK",
    "text",
    "nest",
    "group",
    "join",
    "flatten",
)


class Mode(enum.Enum):
    "Layout of the breaks inside a group"
    FLAT = enum.auto()
    BREAK = enum.auto()
    # Only valid in groups
    AUTO = enum.auto()


class Doc:
    """A document. Use the helper functions to build them.

    Documents are concatenated with ``+``.
    """

    def __add__(self, other: Doc) -> Doc:
        return DocCons(self, other)

    def to_string(self, width: int = 80) -> str:
        return to_string(width, self)


@dataclasses.dataclass(slots=True)
class DocNil(Doc):
    pass


@dataclasses.dataclass(slots=True)
class DocCons(Doc):
    left: Doc
    right: Doc


@dataclasses.dataclass(slots=True)
class DocText(Doc):
    text: str


@dataclasses.dataclass(slots=True)
class DocNest(Doc):
    indent: int
    doc: Doc


@dataclasses.dataclass(slots=True)
class DocBreak(Doc):
    text: str


@dataclasses.dataclass(slots=True)
class DocGroup(Doc):
    mode: Mode
    doc: Doc


EMPTY: Doc = DocNil()

#: Rendered as a space or as a newline followed by the current indentation.
BREAK: Doc = DocBreak(" ")

#: Rendered as nothing or as a newline followed by the current indentation.
SOFT_BREAK: Doc = DocBreak("")


def text(s: str) -> Doc:
    return DocText(s)


def nest(indentation: int, doc: Doc) -> Doc:
    """Indent the lines started by the breaks of *doc*."""
    return DocNest(indentation, doc)


def group(doc: Doc, mode: Mode = Mode.AUTO) -> Doc:
    """Lay out all the breaks of *doc* the same way.

    In :attr:`Mode.AUTO` the breaks are spaces if the whole group fits on the
    current line and newlines otherwise.
    """
    return DocGroup(mode, doc)


def join(sep: Doc, docs: Iterable[Doc]) -> Doc:
    acc = EMPTY
    first = True
    for doc in docs:
        if first:
            first = False
        else:
            acc += sep
        acc += doc
    return acc


def flatten(doc: Doc) -> str:
    """Render *doc* with every break kept on the current line.

    >>> flatten(text("[") + nest(4, SOFT_BREAK + text("1")) + text("]"))
    '[1]'
    """
    out = io.StringIO()
    docs = [doc]
    while docs:
        match docs.pop():
            case DocNil():
                continue
            case DocText(s) | DocBreak(s):
                out.write(s)
            case DocCons(left=l, right=r):
                docs.append(r)
                docs.append(l)
            case DocNest(doc=d) | DocGroup(doc=d):
                docs.append(d)
            case other:  # pragma: no cover
                assert False, other
    return out.getvalue()


# The reference algorithm works on OCaml lists and repeatedly splits them in
# head::tail. A linked list keeps those operations O(1).
@dataclasses.dataclass(slots=True)
class _Cell:
    indent: int
    mode: Mode
    doc: Doc
    succ: _Cell | None = None


def _fits(w: int, cells: _Cell | None) -> bool:
    while w >= 0:
        match cells:
            case None:
                return True
            case _Cell(_, _, DocNil(), z):
                cells = z
            case _Cell(i, m, DocCons(x, y), z):
                cells = _Cell(i, m, x, _Cell(i, m, y, z))
            case _Cell(i, m, DocNest(j, x), z):
                cells = _Cell(i + j, m, x, z)
            case _Cell(_, _, DocText(s), z):
                if "\n" in s:
                    return False
                w -= len(s)
                cells = z
            case _Cell(_, Mode.FLAT, DocBreak(s), z):
                w -= len(s)
                cells = z
            case _Cell(_, Mode.BREAK, DocBreak(_), _):
                return True
            case _Cell(i, _, DocGroup(_, x), z):
                cells = _Cell(i, Mode.FLAT, x, z)
            case _:  # pragma: no cover
                assert False, cells
    return False


def _layout(w: int, k: int, cells: _Cell | None, out: TextIO) -> None:
    # CPython has no tail calls: the continuation passing style of the qc--
    # code is turned into a loop that writes straight to *out*.
    while cells is not None:
        match cells:
            case _Cell(_, _, DocNil(), z):
                cells = z
            case _Cell(i, m, DocCons(x, y), z):
                cells = _Cell(i, m, x, _Cell(i, m, y, z))
            case _Cell(i, m, DocNest(j, x), z):
                cells = _Cell(i + j, m, x, z)
            case _Cell(_, _, DocText(s), z):
                out.write(s)
                if "\n" in s:
                    k = len(s) - s.rindex("\n") - 1
                else:
                    k += len(s)
                cells = z
            case _Cell(_, Mode.FLAT, DocBreak(s), z):
                out.write(s)
                k += len(s)
                cells = z
            case _Cell(i, Mode.BREAK, DocBreak(_), z):
                out.write("\n")
                out.write(" " * i)
                k = i
                cells = z
            case _Cell(i, _, DocGroup(Mode.AUTO, x), z):
                if _fits(w - k, _Cell(i, Mode.FLAT, x, z)):
                    cells = _Cell(i, Mode.FLAT, x, z)
                else:
                    cells = _Cell(i, Mode.BREAK, x, z)
            case _Cell(i, _, DocGroup(m, x), z):
                cells = _Cell(i, m, x, z)
            case _:  # pragma: no cover
                assert False, cells


def to_string(width: int, doc: Doc) -> str:
    out = io.StringIO()
    _layout(width, 0, _Cell(0, Mode.FLAT, group(doc)), out)
    return out.getvalue()
