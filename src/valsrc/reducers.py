"""``valsrc.reducers``: Support for extra types
===========================================

Values of types that have no literal syntax are printed as a call to a
constructor. :func:`register` tells the formatter which constructor to call and
with what arguments.
"""

from __future__ import annotations

import datetime
import decimal
import fractions
import inspect
import logging
import pathlib
import typing
import uuid
import weakref
from typing import Any, Callable, Type, TypeAlias, TypeVar

T = TypeVar("T")

Reduced: TypeAlias = tuple[Callable[..., T], tuple[Any, ...], dict[str, Any]]

Reducer: TypeAlias = Callable[[T], Reduced[T]]

logger = logging.getLogger(__name__)

DISPATCH_TABLE = weakref.WeakKeyDictionary[Type[Any], Reducer[Any]]()


def _infer_reducer_type(f: Reducer[T]) -> Type[T]:
    params = list(inspect.signature(f, eval_str=True).parameters.values())
    if len(params) != 1:
        raise ValueError(
            "A reducer takes the value to print as its only argument, "
            f"{f.__name__} takes {len(params)}"
        )
    ty: Type[T] | None = params[0].annotation
    if ty is inspect.Parameter.empty:
        raise ValueError(
            f"Cannot tell which type {f.__name__} reduces: its argument has no "
            "annotation"
        )
    origin = typing.get_origin(ty)
    if origin is not None:
        ty = origin
    assert ty is not None
    return ty


@typing.overload
def register(function: Reducer[T], /) -> Reducer[T]:  # pragma: no cover
    ...


@typing.overload
def register(
    *, type: Type[T] | None = None
) -> Callable[[Reducer[T]], Reducer[T]]:  # pragma: no cover
    ...


def register(
    function: Reducer[T] | None = None,
    /,
    *,
    type: Type[T] | None = None,
) -> Reducer[T] | Callable[[Reducer[T]], Reducer[T]]:
    """Register a function to use while printing values of a given type.

    *function* takes objects of type *T* and returns a tuple describing how to
    recreate them: a constructor, its positional arguments and its keyword
    arguments. The constructor is printed under its qualified name and the
    arguments are printed recursively.

    If *type* is not specified, :func:`register` uses the type annotation on
    the first argument to deduce which type to register *function* for.

    Here are three equivalent ways to print :class:`complex` as a call::

        >>> @register
        ... def _reduce_complex(c: complex):
        ...   return complex, (c.real, c.imag), {}

        >>> @register()
        ... def _reduce_complex(c: complex):
        ...   return complex, (c.real, c.imag), {}

        >>> @register(type=complex)
        ... def _reduce_complex(c: complex):
        ...   return complex, (c.real, c.imag), {}

        >>> del DISPATCH_TABLE[complex]

    Registrations are looked up by exact type: subclasses need their own.

    Args:

      function: The reduction we are registering

      type: The type we are registering the function for

    """

    def wrapper(function: Reducer[T]) -> Reducer[T]:
        cls = _infer_reducer_type(function) if type is None else type
        logger.debug("Registering %r for %r", function, cls)
        DISPATCH_TABLE[cls] = function
        return function

    if function is None:
        return wrapper
    return wrapper(function)


def get_reducer(ty: Type[T]) -> Reducer[T]:
    reducer = DISPATCH_TABLE.get(ty)
    if reducer is None:
        raise LookupError(f"No reducer registered for {ty.__name__}")
    return reducer


@register
def _reduce_decimal(d: decimal.Decimal) -> Reduced[decimal.Decimal]:
    return decimal.Decimal, (str(d),), {}


@register
def _reduce_fraction(f: fractions.Fraction) -> Reduced[fractions.Fraction]:
    return fractions.Fraction, (f.numerator, f.denominator), {}


@register
def _reduce_uuid(u: uuid.UUID) -> Reduced[uuid.UUID]:
    return uuid.UUID, (str(u),), {}


@register
def _reduce_range(r: range) -> Reduced[range]:
    if r.step != 1:
        return range, (r.start, r.stop, r.step), {}
    return range, (r.start, r.stop), {}


@register
def _reduce_date(d: datetime.date) -> Reduced[datetime.date]:
    return datetime.date, (d.year, d.month, d.day), {}


def _tz_kwargs(v: datetime.datetime | datetime.time) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if v.tzinfo is not None:
        kwargs["tzinfo"] = v.tzinfo
    if v.fold:
        kwargs["fold"] = v.fold
    return kwargs


@register
def _reduce_datetime(d: datetime.datetime) -> Reduced[datetime.datetime]:
    args = (d.year, d.month, d.day, d.hour, d.minute, d.second, d.microsecond)
    return datetime.datetime, args, _tz_kwargs(d)


@register
def _reduce_time(t: datetime.time) -> Reduced[datetime.time]:
    args = (t.hour, t.minute, t.second, t.microsecond)
    return datetime.time, args, _tz_kwargs(t)


@register
def _reduce_timedelta(d: datetime.timedelta) -> Reduced[datetime.timedelta]:
    parts = {
        "days": d.days,
        "seconds": d.seconds,
        "microseconds": d.microseconds,
    }
    return datetime.timedelta, (), {k: v for k, v in parts.items() if v}


@register
def _reduce_timezone(tz: datetime.timezone) -> Reduced[datetime.timezone]:
    offset = tz.utcoffset(None)
    name = tz.tzname(None)
    if name == datetime.timezone(offset).tzname(None):
        return datetime.timezone, (offset,), {}
    return datetime.timezone, (offset, name), {}


def _reduce_path(p: pathlib.PurePath) -> Reduced[pathlib.PurePath]:
    return type(p), (str(p),), {}


for _path_type in (
    pathlib.PurePath,
    pathlib.PurePosixPath,
    pathlib.PureWindowsPath,
    pathlib.Path,
    pathlib.PosixPath,
    pathlib.WindowsPath,
):
    register(_reduce_path, type=_path_type)
