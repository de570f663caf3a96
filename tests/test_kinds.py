from __future__ import annotations

import asyncio
import collections
import ctypes
import dataclasses
import decimal
import enum
import functools
import queue
import types
import typing

import pytest

from valsrc import kinds
from valsrc.kinds import Kind


class Meters(int):
    pass


class _Secret(str):
    pass


@dataclasses.dataclass
class Point:
    x: int
    y: int


class Pair(typing.NamedTuple):
    left: int
    right: int


class Color(enum.Enum):
    RED = 1


class Node(ctypes.Structure):
    pass


Node._fields_ = [("value", ctypes.c_int32), ("next", ctypes.POINTER(Node))]


class Plain:
    pass


@pytest.mark.parametrize(
    ("tp", "kind"),
    [
        (bool, Kind.BOOL),
        (int, Kind.INT),
        (Meters, Kind.INT),
        (float, Kind.FLOAT64),
        (complex, Kind.COMPLEX128),
        (str, Kind.STRING),
        (_Secret, Kind.STRING),
        (bytes, Kind.BYTES),
        (bytearray, Kind.BYTES),
        (tuple, Kind.ARRAY),
        (list, Kind.SLICE),
        (dict, Kind.MAP),
        (collections.OrderedDict, Kind.MAP),
        (set, Kind.SET),
        (frozenset, Kind.SET),
        (Point, Kind.STRUCT),
        (Pair, Kind.STRUCT),
        (types.SimpleNamespace, Kind.STRUCT),
        (Node, Kind.STRUCT),
        (ctypes.POINTER(Node), Kind.POINTER),
        (ctypes.c_int32 * 3, Kind.ARRAY),
        (ctypes.c_int8, Kind.INT8),
        (ctypes.c_uint16, Kind.UINT16),
        (ctypes.c_int32, Kind.INT32),
        (ctypes.c_uint64, Kind.UINT64),
        (ctypes.c_float, Kind.FLOAT32),
        (ctypes.c_double, Kind.FLOAT64),
        (ctypes.c_bool, Kind.BOOL),
        (ctypes.c_char_p, Kind.BYTES),
        (ctypes.c_wchar_p, Kind.STRING),
        (ctypes.c_void_p, Kind.UNSAFE_POINTER),
        (ctypes.py_object, Kind.INTERFACE),
        (type(None), Kind.NIL),
        (queue.Queue, Kind.CHANNEL),
        (asyncio.Queue, Kind.CHANNEL),
        (types.FunctionType, Kind.FUNC),
        (functools.partial, Kind.FUNC),
        (type, Kind.TYPE),
        (Color, Kind.ENUM),
        (decimal.Decimal, Kind.CUSTOM),
    ],
)
def test_classify(tp, kind):
    assert kinds.classify(tp) is kind


def test_platform_ints_have_a_fixed_width():
    assert kinds.classify(ctypes.c_int) is kinds.classify(ctypes.c_int32)
    assert kinds.describe(ctypes.c_int).name == "c_int32"
    assert kinds.describe(ctypes.c_long).name in ("c_int32", "c_int64")


def test_unsupported():
    with pytest.raises(kinds.UnsupportedKindError, match="Plain"):
        kinds.classify(Plain)

    class U(ctypes.Union):
        _fields_ = [("i", ctypes.c_int32)]

    with pytest.raises(TypeError, match="unsupported kind"):
        kinds.classify(U)


def test_describe_named():
    info = kinds.describe(Point)
    assert info.name == "Point"
    assert info.module == __name__
    assert info.exported
    assert not info.anonymous
    assert not info.builtin


def test_describe_private():
    info = kinds.describe(_Secret)
    assert info.kind is Kind.STRING
    assert not info.exported


def test_describe_builtin():
    info = kinds.describe(dict)
    assert info.builtin
    assert info.name == "dict"
    assert info.exported


def test_describe_public_module():
    assert kinds.describe(asyncio.Queue).module == "asyncio"
    assert kinds.describe(queue.SimpleQueue).module == "queue"


def test_describe_anonymous_ctypes():
    ptr = kinds.describe(ctypes.POINTER(Node))
    assert ptr.anonymous
    assert ptr.elem is not None and ptr.elem.type is Node
    assert ptr.exported

    arr = kinds.describe(ctypes.c_uint8 * 4)
    assert arr.anonymous
    assert arr.length == 4
    assert arr.elem is not None and arr.elem.name == "c_uint8"
    assert arr.elem.predeclared


def test_anonymous_types_are_as_visible_as_their_elements():
    class _Hidden(ctypes.Structure):
        _fields_ = [("x", ctypes.c_int32)]

    assert not kinds.describe(ctypes.POINTER(_Hidden)).exported
    assert not kinds.describe(_Hidden * 2).exported
