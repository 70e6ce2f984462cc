"""Conversion of an interleaved stream between channel counts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pcmflow.sample import _size_hint


class ChannelCountConverter:
    """Iterator that converts interleaved samples from one channel count to another.

    Extra input channels are dropped; missing output channels repeat the last
    input channel of the frame.
    """

    def __init__(self, source: Iterable, from_channels: int, to_channels: int) -> None:
        if from_channels < 1:
            raise ValueError("from_channels must be at least 1")
        if to_channels < 1:
            raise ValueError("to_channels must be at least 1")
        self._input: Iterator = iter(source)
        self.from_channels = from_channels
        self.to_channels = to_channels
        self._sample_repeat = None
        self._next_output_pos = 0

    def __iter__(self) -> ChannelCountConverter:
        return self

    def __next__(self):
        if self._next_output_pos == self.from_channels - 1:
            result = next(self._input, None)
            self._sample_repeat = result
        elif self._next_output_pos < self.from_channels:
            result = next(self._input, None)
        else:
            result = self._sample_repeat

        self._next_output_pos += 1
        if self._next_output_pos == self.to_channels:
            self._next_output_pos = 0
            for _ in range(self.from_channels - self.to_channels):
                next(self._input, None)

        if result is None:
            raise StopIteration
        return result

    def size_hint(self) -> tuple[int, int | None]:
        """Lower and optional upper bound of the samples still to come."""
        low, high = _size_hint(self._input)

        def scale(count: int) -> int:
            return (count // self.from_channels) * self.to_channels + self._next_output_pos

        return scale(low), None if high is None else scale(high)

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input