"""Optional scalar wrappers that distinguish "absent" from "present with value"."""

from __future__ import annotations

import math
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from aws_query_client.exceptions import InvalidParameterValueError


INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def _plain_decimal(text: str) -> str:
    # positional notation only, "1.0" -> "1", "1e-05" -> "0.00001"
    result = format(Decimal(text), "f")
    if "." in result:
        result = result.rstrip("0").rstrip(".")
    return result


def _to_float32(value: float) -> float:
    # older interpreters raise instead of rounding to inf
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def format_float32(value: float) -> str:
    """Shortest decimal that reads back as the same single precision float."""
    single = _to_float32(value)
    for precision in range(1, 10):
        text = f"{single:.{precision}g}"
        if _to_float32(float(text)) == single:
            return _plain_decimal(text)
    return _plain_decimal(repr(single))  # pragma: no cover


def format_float64(value: float) -> str:
    return _plain_decimal(repr(value))


def _check_int(value: int, low: int, high: int, kind: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{kind} value must be an int, got {type(value).__name__}"
        raise InvalidParameterValueError(msg)
    if not low <= value <= high:
        msg = f"{kind} value out of range: {value}"
        raise InvalidParameterValueError(msg)


def _check_float(value: float, kind: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{kind} value must be a number, got {type(value).__name__}"
        raise InvalidParameterValueError(msg)
    if not math.isfinite(value):
        msg = f"{kind} value must be finite: {value}"
        raise InvalidParameterValueError(msg)


class OptionalValue(ABC):
    """A scalar plus a presence flag.

    Absent wrappers never reach the wire, whatever ``value`` holds. Present
    wrappers are validated on construction, so every present wrapper has a
    valid wire format.
    """

    value: object
    present: bool

    def __post_init__(self) -> None:
        if self.present:
            self._validate()

    def _validate(self) -> None:
        pass

    @abstractmethod
    def format(self) -> str:
        """Return the wire representation of ``value``."""


@dataclass(frozen=True)
class StringValue(OptionalValue):
    value: str = ""
    present: bool = False

    def _validate(self) -> None:
        if not isinstance(self.value, str):
            msg = f"String value must be a str, got {type(self.value).__name__}"
            raise InvalidParameterValueError(msg)

    def format(self) -> str:
        return self.value


@dataclass(frozen=True)
class BooleanValue(OptionalValue):
    value: bool = False
    present: bool = False

    def _validate(self) -> None:
        if not isinstance(self.value, bool):
            msg = f"Boolean value must be a bool, got {type(self.value).__name__}"
            raise InvalidParameterValueError(msg)

    def format(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class IntegerValue(OptionalValue):
    value: int = 0
    present: bool = False

    def _validate(self) -> None:
        _check_int(self.value, INT32_MIN, INT32_MAX, "Integer")

    def format(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LongValue(OptionalValue):
    value: int = 0
    present: bool = False

    def _validate(self) -> None:
        _check_int(self.value, INT64_MIN, INT64_MAX, "Long")

    def format(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue(OptionalValue):
    value: float = 0.0
    present: bool = False

    def _validate(self) -> None:
        _check_float(self.value, "Float")
        if not math.isfinite(_to_float32(self.value)):
            msg = f"Float value out of single precision range: {self.value}"
            raise InvalidParameterValueError(msg)

    def format(self) -> str:
        return format_float32(self.value)


@dataclass(frozen=True)
class DoubleValue(OptionalValue):
    value: float = 0.0
    present: bool = False

    def _validate(self) -> None:
        _check_float(self.value, "Double")

    def format(self) -> str:
        return format_float64(self.value)


def string_value(value: str) -> StringValue:
    return StringValue(value, present=True)


def boolean_value(value: bool) -> BooleanValue:  # noqa: FBT001
    return BooleanValue(bool(value), present=True)


def true_value() -> BooleanValue:
    return BooleanValue(True, present=True)


def false_value() -> BooleanValue:
    return BooleanValue(False, present=True)


def integer_value(value: int) -> IntegerValue:
    return IntegerValue(value, present=True)


def long_value(value: int) -> LongValue:
    return LongValue(value, present=True)


def float_value(value: float) -> FloatValue:
    return FloatValue(value, present=True)


def double_value(value: float) -> DoubleValue:
    return DoubleValue(value, present=True)
