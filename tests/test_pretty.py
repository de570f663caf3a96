from __future__ import annotations

import dataclasses
from typing import Any

from valsrc import pretty


@dataclasses.dataclass
class Add:
    left: Any
    right: Any


def mk_doc(v):
    match v:
        case []:
            return pretty.text("[]")
        case list(z):
            sep = pretty.text(",") + pretty.BREAK
            body = pretty.SOFT_BREAK + pretty.join(sep, map(mk_doc, z))
            return pretty.group(
                pretty.text("[")
                + pretty.nest(4, body)
                + pretty.SOFT_BREAK
                + pretty.text("]")
                + pretty.EMPTY
            )
        case int(i):
            return pretty.text(str(i))
        case Add(l, r):
            return (
                pretty.group(mk_doc(l) + pretty.BREAK + pretty.text("+"))
                + pretty.BREAK
                + mk_doc(r)
            )


def pp(v, width=20):
    return mk_doc(v).to_string(width)


L10 = """\
[
    0,
    1,
    2,
    3,
    4,
    5,
    6,
    7,
    8,
    9
]\
"""

# The break after "+" is not in a group of its own: it is laid out like the
# breaks of the list.
ADD = """\
[
    1232341234145345634643657,
    1 +
    2
]\
"""


def test_nested():
    assert pp(list(range(3))) == "[0, 1, 2]"
    assert pp(Add(1, 2)) == "1 + 2"
    assert pp([*range(10)]) == L10
    assert pp([1232341234145345634643657, Add(1, 2)]) == ADD


def test_inner_groups_fit_independently():
    doc = mk_doc([[1, 2], [3, 4], [5, 6], [7, 8]])
    assert doc.to_string(12) == (
        "[\n    [1, 2],\n    [3, 4],\n    [5, 6],\n    [7, 8]\n]"
    )


QUICK_BROWN_FOX = "The quick brown fox jumps over the lazy dog"


def test_groups():
    words = QUICK_BROWN_FOX.split(" ")
    doc = pretty.join(pretty.BREAK, map(pretty.text, words))
    as_lines = ("\n").join(words)
    flat = pretty.group(doc, pretty.Mode.FLAT)
    broken = pretty.group(doc, pretty.Mode.BREAK)
    auto = pretty.group(doc)
    assert flat.to_string(10) == flat.to_string(100) == QUICK_BROWN_FOX
    assert broken.to_string(10) == broken.to_string(100) == as_lines
    assert auto.to_string(10) == as_lines
    assert auto.to_string(100) == QUICK_BROWN_FOX


def test_multiline_text_breaks_the_group():
    doc = pretty.text("f(") + pretty.nest(
        4, pretty.SOFT_BREAK + pretty.text('"""a\nb"""')
    )
    doc += pretty.SOFT_BREAK + pretty.text(")")
    assert doc.to_string(80) == 'f(\n    """a\nb"""\n)'


def test_flatten():
    doc = mk_doc([[1, 2], Add(3, 4)])
    assert pretty.flatten(doc) == "[[1, 2], 3 + 4]"
    assert pretty.flatten(pretty.EMPTY) == ""


def test_join():
    assert pretty.flatten(pretty.join(pretty.text(", "), [])) == ""
    docs = [pretty.text("a"), pretty.text("b")]
    assert pretty.flatten(pretty.join(pretty.text(", "), docs)) == "a, b"
