from __future__ import annotations

import datetime
import decimal
import fractions
import pathlib
import uuid

import pytest

import valsrc
from valsrc import reducers

from . import utils


class Money:
    def __init__(self, amount, currency="EUR"):
        self.amount = amount
        self.currency = currency

    def __eq__(self, other):
        return (
            isinstance(other, Money)
            and self.amount == other.amount
            and self.currency == other.currency
        )


class Celsius:
    def __init__(self, degrees):
        self.degrees = degrees


@pytest.fixture
def money():
    @valsrc.register
    def _reduce_money(m: Money):
        return Money, (m.amount,), {"currency": m.currency}

    yield
    del reducers.DISPATCH_TABLE[Money]


def test_register(money):
    v = Money(decimal.Decimal("1.50"), currency="USD")
    res = valsrc.render_result(v, valsrc.Options(package_path=__name__))
    assert res.text == "Money(decimal.Decimal('1.50'), currency='USD')"
    assert res.imports == ("decimal",)
    assert utils.evaluate(res, __name__) == v


def test_register_explicit_type():
    def reduce(c):
        return Celsius, (c.degrees,), {}

    valsrc.register(reduce, type=Celsius)
    try:
        assert valsrc.render(Celsius(3)) == "test_reducers.Celsius(3)"
    finally:
        del reducers.DISPATCH_TABLE[Celsius]


def test_unregistered_type_is_unsupported():
    with pytest.raises(valsrc.UnsupportedKindError):
        valsrc.render(Celsius(3))


def test_register_needs_annotations():
    with pytest.raises(ValueError, match="annotation"):

        @valsrc.register
        def _reduce(c):
            return Celsius, (), {}

    with pytest.raises(ValueError, match="only argument"):

        @valsrc.register
        def _reduce2(c: Celsius, d: int):
            return Celsius, (), {}


def test_get_reducer():
    with pytest.raises(LookupError):
        reducers.get_reducer(Celsius)


@pytest.mark.parametrize(
    "v",
    [
        decimal.Decimal("3.14159"),
        decimal.Decimal("-Infinity"),
        fractions.Fraction(-2, 3),
        uuid.UUID("12345678-1234-5678-1234-567812345678"),
        range(3),
        range(10, 0, -2),
        datetime.date(2022, 2, 28),
        datetime.time(13, 37, 5, 12),
        datetime.datetime(2000, 1, 1, 12, 0, tzinfo=datetime.timezone.utc),
        datetime.datetime(2021, 11, 7, 1, 30, fold=1),
        datetime.timedelta(days=-1, seconds=5),
        datetime.timedelta(),
        datetime.timezone(datetime.timedelta(hours=2), "CEST"),
        pathlib.PurePosixPath("/usr/lib"),
        pathlib.PureWindowsPath("C:/Windows"),
    ],
)
def test_builtin_reducers(v):
    assert utils.roundtrip(v) == v


def test_builtin_reducer_text():
    assert valsrc.render(datetime.timedelta(hours=1)) == (
        "datetime.timedelta(seconds=3600)"
    )
    assert valsrc.render(range(2, 5)) == "range(2, 5)"
    assert valsrc.render(datetime.timezone.utc) == (
        "datetime.timezone(datetime.timedelta())"
    )
