"""Conversion of an interleaved stream between sample rates."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterable, Iterator

from pcmflow.sample import SampleFormat, _size_hint


class SampleRateConverter:
    """Iterator that resamples interleaved samples by linear interpolation."""

    def __init__(
        self,
        source: Iterable,
        from_rate: int,
        to_rate: int,
        channels: int,
        sample_format: SampleFormat,
    ) -> None:
        if from_rate < 1:
            raise ValueError("from_rate must be at least 1")
        if to_rate < 1:
            raise ValueError("to_rate must be at least 1")
        if channels < 1:
            raise ValueError("channels must be at least 1")

        self._input: Iterator = iter(source)
        self.channels = channels
        self.sample_format = sample_format

        divisor = math.gcd(from_rate, to_rate)
        self._from = from_rate // divisor
        self._to = to_rate // divisor

        if from_rate == to_rate:
            self._current_frame: list = []
            self._next_frame: list = []
        else:
            self._current_frame = self._take_frame()
            self._next_frame = self._take_frame()

        self._current_frame_pos = 0
        self._next_output_frame_pos = 0
        self._output_buffer: deque = deque()

    def _take_frame(self) -> list:
        frame = []
        for _ in range(self.channels):
            sample = next(self._input, None)
            if sample is None:
                break
            frame.append(sample)
        return frame

    def _next_input_frame(self) -> None:
        self._current_frame_pos += 1
        self._current_frame = self._next_frame
        self._next_frame = self._take_frame()

    def __iter__(self) -> SampleRateConverter:
        return self

    def __next__(self):
        if self._from == self._to:
            return next(self._input)

        if self._output_buffer:
            return self._output_buffer.popleft()

        if self._next_output_frame_pos == self._to:
            self._next_output_frame_pos = 0
            self._next_input_frame()
            while self._current_frame_pos != self._from:
                self._next_input_frame()
            self._current_frame_pos = 0
        else:
            required_left = (self._from * self._next_output_frame_pos // self._to) % self._from
            while self._current_frame_pos != required_left:
                self._next_input_frame()

        numerator = (self._from * self._next_output_frame_pos) % self._to
        result = None
        for offset, (current, following) in enumerate(
            zip(self._current_frame, self._next_frame)
        ):
            sample = self.sample_format.lerp(current, following, numerator, self._to)
            if offset == 0:
                result = sample
            else:
                self._output_buffer.append(sample)

        self._next_output_frame_pos += 1

        if result is not None:
            return result
        if self._current_frame:
            first, *rest = self._current_frame
            self._output_buffer = deque(rest)
            self._current_frame = []
            return first
        raise StopIteration

    def size_hint(self) -> tuple[int, int | None]:
        """Lower and optional upper bound of the samples still to come."""
        low, high = _size_hint(self._input)
        if self._from == self._to:
            return low, high

        def apply(samples: int) -> int:
            after_chunk = samples
            if self._current_frame_pos == self._from - 1:
                after_chunk += len(self._next_frame)
            unread = max(0, self._from - (self._current_frame_pos + 2)) * self.channels
            after_chunk = max(0, after_chunk - unread)
            after_chunk = after_chunk * self._to // self._from
            current_chunk = (self._to - self._next_output_frame_pos) * self.channels
            return current_chunk + after_chunk + len(self._output_buffer)

        return apply(low), None if high is None else apply(high)

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def into_inner(self) -> Iterator:
        """Return the underlying iterator."""
        return self._input