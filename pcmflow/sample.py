"""Sample formats, per-sample arithmetic and conversion between formats."""

from __future__ import annotations

import enum
import math
import operator
from collections.abc import Iterable, Iterator
from typing import Any

_I16_MIN = -32768
_I16_MAX = 32767
_U16_MAX = 65535
_U16_ZERO = 32768


def _wrap_i16(value: int) -> int:
    return ((value + 32768) & 0xFFFF) - 32768


def _wrap_u16(value: int) -> int:
    return value & 0xFFFF


def _div_trunc(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _float_to_int(value: float, low: int, high: int) -> int:
    """Truncate a float toward zero, saturating at the bounds; NaN gives 0."""
    if math.isnan(value):
        return 0
    if value <= low:
        return low
    if value >= high:
        return high
    return math.trunc(value)


def _round_half_away(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    return float(math.floor(value + 0.5) if value >= 0 else math.ceil(value - 0.5))


def _size_hint(source: Any) -> tuple[int, int | None]:
    """Lower and optional upper bound of the samples left in ``source``."""
    hint = getattr(source, "size_hint", None)
    if callable(hint):
        return hint()
    if hasattr(source, "__len__"):
        length = len(source)
        return length, length
    return operator.length_hint(source, 0), None


class SampleFormat(enum.Enum):
    """The representation of a single sample.

    - ``I16``: silence is 0, amplitudes span -32768..32767.
    - ``U16``: silence is 32768, amplitudes span 0..65535.
    - ``F32``: silence is 0.0, amplitudes span -1.0..1.0.
    """

    I16 = "i16"
    U16 = "u16"
    F32 = "f32"

    def lerp(self, first, second, numerator: int, denominator: int):
        """Linear interpolation from ``first`` towards ``second`` by numerator/denominator."""
        if self is SampleFormat.F32:
            return first + (second - first) * numerator / denominator
        value = first + _div_trunc((second - first) * numerator, denominator)
        return _wrap_i16(value) if self is SampleFormat.I16 else _wrap_u16(value)

    def amplify(self, value, factor: float):
        """Multiply a sample by ``factor``."""
        if self is SampleFormat.F32:
            return value * factor
        if self is SampleFormat.I16:
            return _float_to_int(value * factor, _I16_MIN, _I16_MAX)
        signed = convert_sample(value, SampleFormat.U16, SampleFormat.I16)
        amplified = SampleFormat.I16.amplify(signed, factor)
        return convert_sample(amplified, SampleFormat.I16, SampleFormat.U16)

    def saturating_add(self, first, second):
        """Add two samples, clamping integer formats to their range."""
        if self is SampleFormat.F32:
            return first + second
        total = first + second
        if self is SampleFormat.I16:
            return max(_I16_MIN, min(_I16_MAX, total))
        return max(0, min(_U16_MAX, total))

    def zero_value(self):
        """The sample value that means silence."""
        if self is SampleFormat.F32:
            return 0.0
        if self is SampleFormat.I16:
            return 0
        return _U16_ZERO


def _to_i16(value, source_format: SampleFormat) -> int:
    if source_format is SampleFormat.I16:
        return value
    if source_format is SampleFormat.U16:
        return value - _U16_ZERO
    if value >= 0:
        return _float_to_int(value * _I16_MAX, _I16_MIN, _I16_MAX)
    return _float_to_int(-value * _I16_MIN, _I16_MIN, _I16_MAX)


def _to_u16(value, source_format: SampleFormat) -> int:
    if source_format is SampleFormat.U16:
        return value
    if source_format is SampleFormat.I16:
        return value + _U16_ZERO
    scaled = _round_half_away((value + 1.0) * 0.5 * _U16_MAX)
    return _float_to_int(scaled, 0, _U16_MAX)


def _to_f32(value, source_format: SampleFormat) -> float:
    if source_format is SampleFormat.F32:
        return value
    if source_format is SampleFormat.U16:
        value = _to_i16(value, SampleFormat.U16)
    if value < 0:
        return value / -_I16_MIN
    return value / _I16_MAX


_CONVERTERS = {
    SampleFormat.I16: _to_i16,
    SampleFormat.U16: _to_u16,
    SampleFormat.F32: _to_f32,
}


def convert_sample(value, source_format: SampleFormat, target_format: SampleFormat):
    """Convert one sample from ``source_format`` to ``target_format``."""
    return _CONVERTERS[target_format](value, source_format)


class DataConverter:
    """Iterator that converts every sample of ``source`` to another format."""

    def __init__(
        self,
        source: Iterable,
        source_format: SampleFormat,
        target_format: SampleFormat,
    ) -> None:
        self._input: Iterator = iter(source)
        self.source_format = source_format
        self.target_format = target_format

    def __iter__(self) -> DataConverter:
        return self

    def __next__(self):
        value = next(self._input)
        return convert_sample(value, self.source_format, self.target_format)

    def __length_hint__(self) -> int:
        return _size_hint(self._input)[0]

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input