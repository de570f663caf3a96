"""``valsrc.kinds``: Type classification
=====================================

Every class we know how to print belongs to exactly one :class:`Kind`. The
classification only looks at the class, never at the value:

  >>> classify(int), classify(bool), classify(list)
  (<Kind.INT: 'int'>, <Kind.BOOL: 'bool'>, <Kind.SLICE: 'slice'>)

Named subclasses of primitives keep the kind of the primitive they are built
on:

  >>> class Celsius(float):
  ...     pass
  >>> classify(Celsius)
  <Kind.FLOAT64: 'float64'>

"""

from __future__ import annotations

import asyncio
import ctypes
import dataclasses
import enum
import functools
import queue
import types
from typing import Any

from valsrc import reducers, utils

__all__ = (
    "Kind",
    "TypeInfo",
    "UnsupportedKindError",
    "classify",
    "describe",
)


class Kind(enum.Enum):
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    SLICE = "slice"
    MAP = "map"
    SET = "set"
    STRUCT = "struct"
    POINTER = "pointer"
    INTERFACE = "interface"
    UNSAFE_POINTER = "unsafe-pointer"
    NIL = "nil"
    CHANNEL = "channel"
    FUNC = "func"
    TYPE = "type"
    ENUM = "enum"
    CUSTOM = "custom"


#: Kinds printed as a single literal token.
SCALARS = frozenset(
    {
        Kind.BOOL,
        Kind.INT,
        Kind.INT8,
        Kind.INT16,
        Kind.INT32,
        Kind.INT64,
        Kind.UINT8,
        Kind.UINT16,
        Kind.UINT32,
        Kind.UINT64,
        Kind.FLOAT32,
        Kind.FLOAT64,
        Kind.COMPLEX64,
        Kind.COMPLEX128,
        Kind.STRING,
        Kind.BYTES,
    }
)

#: Kinds whose values are references that can be part of a cycle.
REFERENCES = frozenset(
    {Kind.ARRAY, Kind.SLICE, Kind.MAP, Kind.SET, Kind.STRUCT, Kind.POINTER}
)


class UnsupportedKindError(TypeError):
    """The value's type doesn't belong to any :class:`Kind`."""


_SIGNED = {1: Kind.INT8, 2: Kind.INT16, 4: Kind.INT32, 8: Kind.INT64}
_UNSIGNED = {1: Kind.UINT8, 2: Kind.UINT16, 4: Kind.UINT32, 8: Kind.UINT64}
_FIXED_WIDTH = frozenset({*_SIGNED.values(), *_UNSIGNED.values()})

#: Integer kinds, of any width.
INTEGERS = frozenset({Kind.INT, *_FIXED_WIDTH})

# https://docs.python.org/3/library/ctypes.html#fundamental-data-types
_CTYPES_CODES = {
    "?": Kind.BOOL,
    "f": Kind.FLOAT32,
    "d": Kind.FLOAT64,
    "g": Kind.FLOAT64,
    "F": Kind.COMPLEX64,
    "D": Kind.COMPLEX128,
    "G": Kind.COMPLEX128,
    "c": Kind.BYTES,
    "z": Kind.BYTES,
    "u": Kind.STRING,
    "Z": Kind.STRING,
    "P": Kind.UNSAFE_POINTER,
    "O": Kind.INTERFACE,
}

_CHANNELS = (queue.Queue, queue.SimpleQueue, asyncio.Queue)

_FUNCS = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    functools.partial,
)


def _classify_simple_cdata(tp: type[Any]) -> Kind:
    code: str = tp._type_  # type: ignore[attr-defined]
    if code in "bhilq":
        return _SIGNED[ctypes.sizeof(tp)]
    if code in "BHILQ":
        return _UNSIGNED[ctypes.sizeof(tp)]
    if code in _CTYPES_CODES:
        return _CTYPES_CODES[code]
    raise UnsupportedKindError(f"unsupported kind: ctypes code {code!r}")


def _is_named_tuple(tp: type[Any]) -> bool:
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def classify(tp: type[Any]) -> Kind:
    """Find the kind of values of type *tp*.

    Raises:
      UnsupportedKindError: if *tp* fits no kind and has no registered
        reducer.
    """
    if tp is types.NoneType:
        return Kind.NIL
    if tp in reducers.DISPATCH_TABLE:
        return Kind.CUSTOM
    if issubclass(tp, type):
        return Kind.TYPE
    if issubclass(tp, enum.Enum):
        return Kind.ENUM
    if issubclass(tp, ctypes._SimpleCData):
        return _classify_simple_cdata(tp)
    if issubclass(tp, ctypes.Structure):
        return Kind.STRUCT
    if issubclass(tp, ctypes.Array):
        return Kind.ARRAY
    if issubclass(tp, ctypes._Pointer):
        return Kind.POINTER
    if issubclass(tp, bool):
        return Kind.BOOL
    if issubclass(tp, int):
        return Kind.INT
    if issubclass(tp, float):
        return Kind.FLOAT64
    if issubclass(tp, complex):
        return Kind.COMPLEX128
    if issubclass(tp, str):
        return Kind.STRING
    if issubclass(tp, bytes | bytearray):
        return Kind.BYTES
    if (
        dataclasses.is_dataclass(tp)
        or _is_named_tuple(tp)
        or issubclass(tp, types.SimpleNamespace)
    ):
        return Kind.STRUCT
    if issubclass(tp, tuple):
        return Kind.ARRAY
    if issubclass(tp, list):
        return Kind.SLICE
    if issubclass(tp, dict):
        return Kind.MAP
    if issubclass(tp, set | frozenset):
        return Kind.SET
    if issubclass(tp, _CHANNELS):
        return Kind.CHANNEL
    if issubclass(tp, _FUNCS):
        return Kind.FUNC
    raise UnsupportedKindError(
        f"unsupported kind: {tp.__module__}.{utils.declared_name(tp)}"
    )


@dataclasses.dataclass(frozen=True, slots=True)
class TypeInfo:
    """What the formatter needs to know about a class.

    Attributes:
      kind(Kind):
      type: The class itself.
      name(str): The declared name; empty for anonymous types.
      module(str): The public module the class originates from.
      elem(TypeInfo | None): Element type of ctypes arrays and pointers.
      length(int | None): Length of ctypes arrays.
    """

    kind: Kind
    type: type[Any]
    name: str
    module: str
    elem: TypeInfo | None = None
    length: int | None = None

    @property
    def anonymous(self) -> bool:
        return not self.name

    @property
    def builtin(self) -> bool:
        "Types of the `builtins` module are never qualified"
        return self.module == "builtins"

    @property
    def predeclared(self) -> bool:
        "The fundamental ctypes types (``c_int32``, ``c_double``...)"
        return self.module == "ctypes" and issubclass(
            self.type, ctypes._SimpleCData
        )

    @property
    def exported(self) -> bool:
        if self.anonymous:
            # ctypes pointers and arrays are as visible as their elements
            return self.elem is None or self.elem.exported
        return all(utils.is_exported(part) for part in self.name.split("."))


def describe(tp: type[Any]) -> TypeInfo:
    """Build the :class:`TypeInfo` of *tp*."""
    kind = classify(tp)
    if kind is Kind.POINTER:
        elem = describe(tp._type_)  # type: ignore[attr-defined]
        if tp.__name__ == f"LP_{elem.type.__name__}":
            return TypeInfo(kind, tp, "", "", elem=elem)
    elif kind is Kind.ARRAY and issubclass(tp, ctypes.Array):
        elem = describe(tp._type_)
        length = tp._length_
        if tp.__name__ == f"{elem.type.__name__}_Array_{length}":
            return TypeInfo(kind, tp, "", "", elem=elem, length=length)
    module = utils.public_module(tp)
    if module == "ctypes" and kind in _FIXED_WIDTH:
        # c_int is an alias of c_int32 (or c_int64...) on every platform we
        # support, we print the fixed width name.
        return TypeInfo(kind, tp, f"c_{kind.value}", module)
    return TypeInfo(kind, tp, utils.declared_name(tp), module)
