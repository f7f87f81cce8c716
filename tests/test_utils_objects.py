"""
Tests for core_helpers/utils/objects.py

Covers the guards, deep clone, type checks, try_parse, zero values and
reflection-based property access.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Protocol
from uuid import UUID

import numpy as np
import pytest
from pydantic import BaseModel

from core_helpers.utils.objects import (
    INVARIANT,
    ConfigurationError,
    FormatProvider,
    MissingArgumentError,
    deep_clone,
    default_value,
    ensure_not_abstract,
    ensure_not_null,
    get_property_value,
    is_null_or_default,
    is_of_type,
    set_property_value,
    try_parse,
)


# ============================================================================
# Sample types
# ============================================================================

class Shape(ABC):
    @abstractmethod
    def area(self) -> float:
        ...


class Square(Shape):
    def __init__(self, side: float):
        self.side = side

    def area(self) -> float:
        return self.side * self.side


class Named(Protocol):
    name: str


class Color(Enum):
    RED = "red"
    GREEN = "green"


@dataclass
class Address:
    street: str
    city: str


@dataclass
class Customer:
    name: str
    tags: List[str] = field(default_factory=list)
    address: Optional[Address] = None


@dataclass(frozen=True)
class Money:
    amount: int = 0
    currency: str = ""


class Account(BaseModel):
    owner: str
    balance: float = 0.0
    history: List[float] = []


class FrozenAccount(BaseModel):
    model_config = {"frozen": True}

    owner: str


class Thermostat:
    unit = "C"

    def __init__(self, target: float):
        self.target = target
        self._calibration = 0.5

    @property
    def target_fahrenheit(self) -> float:
        return self.target * 9 / 5 + 32

    @property
    def label(self) -> str:
        return self._label

    @label.setter
    def label(self, value: str) -> None:
        self._label = value

    def reset(self) -> None:
        self.target = 20.0


# ============================================================================
# Guards
# ============================================================================

def test_ensure_not_abstract_raises_with_type_name():
    with pytest.raises(ConfigurationError, match="Shape"):
        ensure_not_abstract(Shape)


def test_ensure_not_abstract_rejects_protocol():
    with pytest.raises(ConfigurationError, match="Named"):
        ensure_not_abstract(Named)


def test_ensure_not_abstract_accepts_concrete_types():
    ensure_not_abstract(Square)
    ensure_not_abstract(Customer)
    ensure_not_abstract(int)


def test_ensure_not_null_raises_with_param_name():
    with pytest.raises(MissingArgumentError) as exc_info:
        ensure_not_null(None, "customer")

    assert exc_info.value.param_name == "customer"
    assert "customer" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.parametrize("value", [0, "", [], False, Customer(name="x")])
def test_ensure_not_null_accepts_falsy_values(value):
    ensure_not_null(value, "value")


# ============================================================================
# Deep clone
# ============================================================================

def test_deep_clone_dataclass_is_independent():
    original = Customer(name="Ada", tags=["vip"], address=Address("Main St", "Paris"))

    clone = deep_clone(original)

    assert clone == original
    assert clone is not original
    assert clone.address is not original.address
    assert isinstance(clone.address, Address)

    clone.tags.append("new")
    assert original.tags == ["vip"]


def test_deep_clone_pydantic_model():
    original = Account(owner="Ada", balance=10.5, history=[1.0, 2.5])

    clone = deep_clone(original)

    assert clone == original
    assert clone is not original
    assert clone.history is not original.history


def test_deep_clone_plain_object():
    original = Square(3.0)

    clone = deep_clone(original)

    assert clone is not original
    assert isinstance(clone, Square)
    assert clone.side == 3.0
    assert clone.area() == 9.0


def test_deep_clone_builtin_containers():
    original = {"a": [1, 2, {"b": "c"}]}

    clone = deep_clone(original)

    assert clone == original
    assert clone is not original
    assert clone["a"] is not original["a"]


def test_deep_clone_loses_non_string_dict_keys():
    """JSON object keys are strings; untyped dicts come back with string keys."""
    clone = deep_clone({1: "one"})
    assert clone == {"1": "one"}


def test_deep_clone_fails_on_unserializable_fields():
    holder = Square(1.0)
    holder.side = object()

    with pytest.raises(Exception):
        deep_clone(holder)


# ============================================================================
# Type checks and zero values
# ============================================================================

def test_is_of_type():
    assert is_of_type(Square(1.0), Shape)
    assert is_of_type(Square(1.0), Square)
    assert is_of_type(True, int)
    assert not is_of_type("1", int)


@pytest.mark.parametrize("cls,expected", [
    (int, 0),
    (float, 0.0),
    (bool, False),
    (Decimal, Decimal(0)),
    (timedelta, timedelta(0)),
    (time, time(0, 0)),
    (date, date.min),
    (datetime, datetime.min),
    (str, None),
    (list, None),
    (Square, None),
])
def test_default_value(cls, expected):
    assert default_value(cls) == expected


def test_default_value_numpy_and_frozen_dataclass():
    assert default_value(np.int32) == np.int32(0)
    assert isinstance(default_value(np.int32), np.int32)
    assert default_value(Money) == Money(0, "")
    assert default_value(Address) is None


@pytest.mark.parametrize("value,expected", [
    (None, True),
    (0, True),
    (123, False),
    (0.0, True),
    (-1.5, False),
    (False, True),
    (True, False),
    (Decimal("0.00"), True),
    (np.int64(0), True),
    (np.float32(2.5), False),
    (timedelta(), True),
    (time(0, 0), True),
    (time(0, 1), False),
    (Money(), True),
    (Money(5, "EUR"), False),
    ("", False),
    (Square(0), False),
])
def test_is_null_or_default(value, expected):
    assert is_null_or_default(value) is expected


def test_is_null_or_default_with_explicit_type():
    assert is_null_or_default(0, float)
    assert not is_null_or_default("0", int)


# ============================================================================
# try_parse
# ============================================================================

def test_try_parse_int():
    assert try_parse("123", int) == (True, 123)
    assert try_parse("  -42 ", int) == (True, -42)


@pytest.mark.parametrize("text", ["abc", "", "1.5", "1,000", "1_000", "12abc"])
def test_try_parse_int_failures_return_zero(text):
    assert try_parse(text, int) == (False, 0)


def test_try_parse_none_input():
    assert try_parse(None, int) == (False, 0)
    assert try_parse(None, str) == (False, None)


def test_try_parse_float_and_decimal_invariant():
    assert try_parse("1,234.5", float) == (True, 1234.5)
    assert try_parse("1e3", float) == (True, 1000.0)
    assert try_parse("10.25", Decimal) == (True, Decimal("10.25"))
    assert try_parse("ten", Decimal) == (False, Decimal(0))


def test_try_parse_with_custom_provider():
    german = FormatProvider(decimal_separator=",", group_separator=".", day_first=True)

    assert try_parse("1.234,5", float, german) == (True, 1234.5)
    assert try_parse("03/02/2025", date, german) == (True, date(2025, 2, 3))
    assert try_parse("03/02/2025", date, INVARIANT) == (True, date(2025, 3, 2))


@pytest.mark.parametrize("text,expected", [
    ("true", True),
    ("False", False),
    (" TRUE ", True),
])
def test_try_parse_bool(text, expected):
    assert try_parse(text, bool) == (True, expected)


def test_try_parse_bool_rejects_numbers():
    assert try_parse("1", bool) == (False, False)


def test_try_parse_dates_and_times():
    assert try_parse("2025-01-15 08:30:00", datetime) == (True, datetime(2025, 1, 15, 8, 30))
    assert try_parse("2025-01-15", date) == (True, date(2025, 1, 15))
    assert try_parse("08:30", time) == (True, time(8, 30))
    assert try_parse("1 days 02:00:00", timedelta) == (True, timedelta(days=1, hours=2))
    assert try_parse("not a date", datetime) == (False, datetime.min)
    assert try_parse("", date) == (False, date.min)


def test_try_parse_uuid_enum_and_str():
    value = "12345678-1234-5678-1234-567812345678"
    assert try_parse(value, UUID) == (True, UUID(value))
    assert try_parse("nope", UUID) == (False, None)
    assert try_parse("RED", Color) == (True, Color.RED)
    assert try_parse("PURPLE", Color) == (False, None)
    assert try_parse("hello", str) == (True, "hello")


def test_try_parse_numpy_integer_overflow():
    assert try_parse("127", np.int8) == (True, np.int8(127))
    ok, result = try_parse("128", np.int8)
    assert not ok
    assert result == 0
    assert try_parse("2.5", np.float32) == (True, np.float32(2.5))


def test_try_parse_unsupported_type():
    assert try_parse("[1, 2]", list) == (False, None)


# ============================================================================
# Reflection
# ============================================================================

def test_get_property_value_reads_attributes_and_properties():
    thermostat = Thermostat(20.0)

    assert get_property_value(thermostat, "target") == 20.0
    assert get_property_value(thermostat, "target_fahrenheit") == 68.0
    assert get_property_value(thermostat, "unit") == "C"


@pytest.mark.parametrize("name", ["missing", "Target", "_calibration", "reset", ""])
def test_get_property_value_returns_none_for_undeclared_members(name):
    assert get_property_value(Thermostat(20.0), name) is None


def test_set_then_get_round_trips():
    thermostat = Thermostat(20.0)

    set_property_value(thermostat, "target", 22.5)
    set_property_value(thermostat, "label", "hallway")

    assert get_property_value(thermostat, "target") == 22.5
    assert get_property_value(thermostat, "label") == "hallway"


def test_set_property_value_ignores_missing_and_read_only_members():
    thermostat = Thermostat(20.0)

    set_property_value(thermostat, "missing", 1)
    set_property_value(thermostat, "target_fahrenheit", 100.0)
    set_property_value(thermostat, "_calibration", 9.9)
    set_property_value(thermostat, "reset", None)

    assert not hasattr(thermostat, "missing")
    assert thermostat.target_fahrenheit == 68.0
    assert thermostat._calibration == 0.5
    assert callable(thermostat.reset)


def test_set_property_value_on_dataclass_and_pydantic_model():
    customer = Customer(name="Ada")
    account = Account(owner="Ada")

    set_property_value(customer, "name", "Grace")
    set_property_value(account, "balance", 99.0)

    assert get_property_value(customer, "name") == "Grace"
    assert get_property_value(account, "balance") == 99.0


def test_set_property_value_ignores_frozen_objects():
    money = Money(5, "EUR")
    frozen = FrozenAccount(owner="Ada")

    set_property_value(money, "amount", 10)
    set_property_value(frozen, "owner", "Grace")

    assert money.amount == 5
    assert frozen.owner == "Ada"


# ============================================================================
# Regression cases: read-only built-in fields, typed fields in plain objects
# ============================================================================

class Slotted:
    __slots__ = ("size",)

    def __init__(self, size: int):
        self.size = size


class Event:
    def __init__(self, when: datetime, duration: timedelta, title: str):
        self.when = when
        self.duration = duration
        self.title = title


class Reminder:
    due: date

    def __init__(self, due):
        self.due = due


def test_set_property_value_ignores_read_only_builtin_field():
    value = datetime(2025, 1, 15)

    set_property_value(value, "year", 2000)

    assert value.year == 2025
    assert get_property_value(value, "year") == 2025


def test_set_property_value_on_slots():
    slotted = Slotted(3)

    set_property_value(slotted, "size", 7)
    set_property_value(slotted, "colour", "red")

    assert get_property_value(slotted, "size") == 7
    assert get_property_value(slotted, "colour") is None


def test_deep_clone_plain_object_keeps_field_types():
    original = Event(datetime(2025, 1, 1), timedelta(hours=2), "launch")

    clone = deep_clone(original)

    assert clone is not original
    assert isinstance(clone.when, datetime)
    assert clone.when == datetime(2025, 1, 1)
    assert clone.duration == timedelta(hours=2)
    assert clone.title == "launch"


def test_deep_clone_plain_object_uses_class_annotations():
    clone = deep_clone(Reminder(date(2025, 3, 1)))
    assert clone.due == date(2025, 3, 1)
    assert type(clone.due) is date
