"""
Generic object helpers built on runtime introspection.

**Conceptual**: These are the small guards and conversions that service code
reaches for when it handles values it only knows at runtime:
  - guards: `ensure_not_null`, `ensure_not_abstract`;
  - type checks and zero values: `is_of_type`, `default_value`,
    `is_null_or_default`;
  - permissive conversion: `try_parse` turns text into a typed value and
    reports failure through a boolean instead of an exception;
  - copying: `deep_clone` round-trips a value through JSON (pydantic) to get
    a reference-independent copy;
  - reflection: `get_property_value` / `set_property_value` read and write a
    public attribute by name.

**Reflection rules**: a member is "declared" when `inspect.getattr_static`
finds it on the object or its class without running `__getattr__`. Names are
matched exactly (case-sensitive). Names with a leading underscore are private
and methods are not properties; both are treated as missing.
"""

import dataclasses
import inspect
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar, get_type_hints
from uuid import UUID

import numpy as np
import pandas as pd
from pydantic import BaseModel, TypeAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


class ConfigurationError(Exception):
    """
    Raised when a type is used in a way its definition does not allow.

    `ensure_not_abstract` raises it for abstract classes and protocols, which
    cannot be instantiated. It is a programming error, not something to retry.
    """


class MissingArgumentError(ValueError):
    """
    Raised when a required argument is None.

    Attributes:
        param_name: Name of the offending parameter, for diagnostics.
    """

    def __init__(self, param_name: str, message: str = "Value cannot be None."):
        self.param_name = param_name
        super().__init__(f"{message} (Parameter '{param_name}')")


@dataclass(frozen=True)
class FormatProvider:
    """
    Culture-style formatting rules used by `try_parse`.

    Attributes:
        decimal_separator: Separator between integer and fractional digits.
        group_separator: Thousands separator (accepted for float/Decimal only).
        day_first: Read ambiguous dates like 01/02/2025 as day/month.
    """
    decimal_separator: str = "."
    group_separator: str = ","
    day_first: bool = False


INVARIANT = FormatProvider()


def ensure_not_abstract(cls: type) -> None:
    """
    Fail if `cls` cannot be instantiated because it is abstract.

    Abstract base classes with unimplemented abstract methods and
    `typing.Protocol` classes both count as abstract.

    Raises:
        ConfigurationError: With the class name in the message.
    """
    if inspect.isabstract(cls) or getattr(cls, "_is_protocol", False):
        raise ConfigurationError(
            f"Ensure method failed for {cls.__name__} because it is an abstract class."
        )


def ensure_not_null(obj: Any, param_name: str) -> None:
    """
    Fail if `obj` is None.

    Raises:
        MissingArgumentError: Carrying `param_name`.
    """
    if obj is None:
        raise MissingArgumentError(param_name)


def deep_clone(obj: T, cls: Optional[Type[T]] = None) -> T:
    """
    Create a reference-independent copy of `obj` through a JSON round trip.

    **Conceptual**: The value is serialized to JSON and parsed back into a
    fresh instance, so nothing in the copy is shared with the original. This
    is the same trade-off as any serializer-based clone: only what JSON can
    carry survives.

    **Functionally**:
    - pydantic models: `model_dump_json()` then `model_validate_json()`.
    - dataclasses, builtins and other types pydantic understands: a
      `TypeAdapter` for `cls` dumps and validates, rebuilding nested
      dataclasses from the type hints.
    - plain class instances: each `__dict__` entry is round-tripped through
      a `TypeAdapter` for its annotated type (or the type of its current
      value) and attached to a new instance created without calling
      `__init__`. Nested custom objects are not JSON serializable and raise.

    **Fidelity limits** (inherent to the technique):
    - dict keys become strings unless the type hints say otherwise;
    - sets and tuples inside untyped containers come back as lists;
    - cyclic references raise a serialization error;
    - immutable scalars (small ints, interned strings) may come back as the
      very same object, since Python shares them.

    Args:
        obj: Value to clone.
        cls: Type to rebuild into (defaults to `type(obj)`).

    Returns:
        A new instance equal in field values to `obj`.
    """
    target = cls or type(obj)

    if isinstance(obj, BaseModel):
        return target.model_validate_json(obj.model_dump_json())

    if _is_plain_object(obj):
        hints = get_type_hints(target)
        clone = target.__new__(target)
        for name, value in vars(obj).items():
            adapter = TypeAdapter(hints.get(name, type(value)))
            clone.__dict__[name] = adapter.validate_json(adapter.dump_json(value))
        return clone

    adapter = TypeAdapter(target)
    return adapter.validate_json(adapter.dump_json(obj))


def _is_plain_object(obj: Any) -> bool:
    return (
        hasattr(obj, "__dict__")
        and not dataclasses.is_dataclass(obj)
        and not isinstance(obj, (type, Enum))
    )


def is_of_type(obj: Any, cls: type) -> bool:
    """True if `obj` is an instance of `cls` or of a subclass of it."""
    return isinstance(obj, cls)


# ---------------------------------------------------------------------------
# Zero values
# ---------------------------------------------------------------------------

_ZERO_VALUES: Dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    Decimal: Decimal(0),
    datetime: datetime.min,
    date: date.min,
    time: time(),
    timedelta: timedelta(),
}


def default_value(cls: type) -> Any:
    """
    Return the zero value of `cls`.

    **Functionally**:
    - numeric builtins, Decimal, bool: 0 / 0.0 / False;
    - numpy numeric scalars: `cls()` (e.g. `np.int64(0)`);
    - `datetime`, `date`: their `min`; `time`: midnight; `timedelta`: zero;
    - frozen dataclasses whose fields all have defaults: `cls()`;
    - anything else (str, lists, arbitrary classes): None.
    """
    if cls in _ZERO_VALUES:
        return _ZERO_VALUES[cls]
    if not isinstance(cls, type):
        return None
    if issubclass(cls, (np.number, np.bool_)):
        return cls()
    if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:
        if all(
            field.default is not dataclasses.MISSING
            or field.default_factory is not dataclasses.MISSING
            for field in dataclasses.fields(cls)
        ):
            return cls()
    return None


def is_null_or_default(value: Any, cls: Optional[type] = None) -> bool:
    """
    True if `value` is None or equals the zero value of its type.

    `cls` overrides the type used to look up the zero value (defaults to
    `type(value)`). Comparison uses the type's own `==`.

    Example:
        >>> is_null_or_default(0), is_null_or_default(123), is_null_or_default(None)
        (True, False, True)
    """
    if value is None:
        return True
    default = default_value(cls or type(value))
    if default is None:
        return False
    return bool(value == default)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _normalize_number(text: str, provider: FormatProvider) -> str:
    text = text.strip()
    if provider.group_separator:
        text = text.replace(provider.group_separator, "")
    return text.replace(provider.decimal_separator, ".")


def _parse_bool(text: str, provider: FormatProvider) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"String was not recognized as a valid boolean: {text!r}")


def _parse_int(text: str, provider: FormatProvider) -> int:
    value = text.strip()
    if not _INTEGER_PATTERN.match(value):
        raise ValueError(f"Input string was not in a correct integer format: {text!r}")
    return int(value)


def _parse_float(text: str, provider: FormatProvider) -> float:
    return float(_normalize_number(text, provider))


def _parse_decimal(text: str, provider: FormatProvider) -> Decimal:
    # decimal.InvalidOperation is an ArithmeticError
    return Decimal(_normalize_number(text, provider))


def _parse_timestamp(text: str, provider: FormatProvider) -> pd.Timestamp:
    timestamp = pd.to_datetime(text.strip(), dayfirst=provider.day_first)
    if pd.isna(timestamp):
        raise ValueError(f"String was not recognized as a valid date: {text!r}")
    return timestamp


def _parse_datetime(text: str, provider: FormatProvider) -> datetime:
    return _parse_timestamp(text, provider).to_pydatetime()


def _parse_date(text: str, provider: FormatProvider) -> date:
    return _parse_timestamp(text, provider).date()


def _parse_time(text: str, provider: FormatProvider) -> time:
    return time.fromisoformat(text.strip())


def _parse_timedelta(text: str, provider: FormatProvider) -> timedelta:
    delta = pd.Timedelta(text.strip())
    if pd.isna(delta):
        raise ValueError(f"String was not recognized as a valid duration: {text!r}")
    return delta.to_pytimedelta()


def _parse_uuid(text: str, provider: FormatProvider) -> UUID:
    return UUID(text.strip())


_CONVERTERS: Dict[type, Callable[[str, FormatProvider], Any]] = {
    str: lambda text, provider: text,
    bool: _parse_bool,
    int: _parse_int,
    float: _parse_float,
    Decimal: _parse_decimal,
    datetime: _parse_datetime,
    date: _parse_date,
    time: _parse_time,
    timedelta: _parse_timedelta,
    UUID: _parse_uuid,
}


def _numpy_integer_converter(cls: Type[np.integer]) -> Callable[[str, FormatProvider], Any]:
    bounds = np.iinfo(cls)

    def convert(text: str, provider: FormatProvider) -> np.integer:
        value = _parse_int(text, provider)
        if not bounds.min <= value <= bounds.max:
            raise OverflowError(
                f"Value {value} was either too large or too small for {cls.__name__}"
            )
        return cls(value)

    return convert


def _numpy_float_converter(cls: Type[np.floating]) -> Callable[[str, FormatProvider], Any]:
    return lambda text, provider: cls(_parse_float(text, provider))


def _enum_converter(cls: Type[Enum]) -> Callable[[str, FormatProvider], Any]:
    return lambda text, provider: cls[text.strip()]


def _converter_for(cls: type) -> Optional[Callable[[str, FormatProvider], Any]]:
    if cls in _CONVERTERS:
        return _CONVERTERS[cls]
    if not isinstance(cls, type):
        return None
    if issubclass(cls, Enum):
        return _enum_converter(cls)
    if issubclass(cls, np.integer):
        return _numpy_integer_converter(cls)
    if issubclass(cls, np.floating):
        return _numpy_float_converter(cls)
    return None


def try_parse(
    text: Optional[str],
    cls: Type[T],
    provider: Optional[FormatProvider] = None,
) -> Tuple[bool, T]:
    """
    Try to convert `text` into a value of type `cls`.

    **Conceptual**: Parsing user or file input usually wants "a value or a
    flag", not an exception to unwind. Every failure (bad format, overflow,
    unsupported target type, None input) comes back as `(False, default)`
    where `default` is `default_value(cls)`.

    **Supported targets**: str, bool ("true"/"false", any case), int, float,
    Decimal, numpy integer and float scalars (integers are range checked),
    datetime and date (parsed by pandas), time (ISO), timedelta (pandas
    duration strings), UUID, and Enum subclasses by member name.

    **Culture**: `provider` controls decimal and group separators and day-first
    date reading. The default, INVARIANT, uses "." and "," and month-first
    dates. Integers never accept group separators.

    Args:
        text: Input string.
        cls: Target type.
        provider: Formatting rules (defaults to INVARIANT).

    Returns:
        Tuple of (success flag, parsed value or zero value).

    Example:
        >>> try_parse("123", int)
        (True, 123)
        >>> try_parse("abc", int)
        (False, 0)
    """
    default = default_value(cls)
    if text is None:
        return False, default

    converter = _converter_for(cls)
    if converter is None:
        logger.debug("try_parse: no converter for %s", getattr(cls, "__name__", cls))
        return False, default

    try:
        return True, converter(text, provider or INVARIANT)
    except (ValueError, TypeError, KeyError, ArithmeticError) as exc:
        logger.debug("try_parse: %r is not a valid %s: %s", text, cls.__name__, exc)
        return False, default


# ---------------------------------------------------------------------------
# Reflection
# ---------------------------------------------------------------------------

def _lookup_member(obj: Any, name: str) -> Any:
    if not name or name.startswith("_"):
        return _MISSING
    member = inspect.getattr_static(obj, name, _MISSING)
    if member is _MISSING:
        return _MISSING
    if name not in getattr(obj, "__dict__", {}) and (
        inspect.isroutine(member) or isinstance(member, (staticmethod, classmethod))
    ):
        return _MISSING
    return member


def _is_frozen(obj: Any) -> bool:
    if dataclasses.is_dataclass(obj) and obj.__dataclass_params__.frozen:
        return True
    if isinstance(obj, BaseModel) and obj.model_config.get("frozen", False):
        return True
    return isinstance(obj, tuple)


def get_property_value(obj: Any, property_name: str) -> Any:
    """
    Read the public member `property_name` from `obj`.

    Returns None when the member does not exist, is private, or is a method.
    Properties are evaluated; unset slots read as None.
    """
    if _lookup_member(obj, property_name) is _MISSING:
        return None
    return getattr(obj, property_name, None)


def set_property_value(obj: Any, property_name: str, value: Any) -> None:
    """
    Assign `value` to the public member `property_name` of `obj`.

    Silently does nothing when the member does not exist (no new attributes
    are created), is private or a method, is a property without a setter, or
    when `obj` is frozen (frozen dataclass, frozen pydantic model, tuple)
    or the member is a read-only built-in field such as `datetime.year`.
    """
    member = _lookup_member(obj, property_name)
    if member is _MISSING:
        logger.debug(
            "set_property_value: %s has no member %r", type(obj).__name__, property_name
        )
        return
    if isinstance(member, property) and member.fset is None:
        logger.debug(
            "set_property_value: %s.%s is read-only", type(obj).__name__, property_name
        )
        return
    if _is_frozen(obj):
        logger.debug("set_property_value: %s is frozen", type(obj).__name__)
        return
    try:
        setattr(obj, property_name, value)
    except AttributeError:
        logger.debug(
            "set_property_value: %s.%s is not writable", type(obj).__name__, property_name
        )
