"""A source of samples held in memory."""

from __future__ import annotations

import operator
from collections.abc import Iterable
from datetime import timedelta

from pcmflow.sample import SampleFormat

_NANOS_PER_SECOND = 1_000_000_000
_U64_MAX = 2**64 - 1


class SamplesBuffer:
    """A list of interleaved samples treated as a playable source."""

    def __init__(
        self,
        channels: int,
        sample_rate: int,
        data: Iterable,
        sample_format: SampleFormat = SampleFormat.F32,
    ) -> None:
        if channels == 0:
            raise ValueError("channels must not be zero")
        if sample_rate == 0:
            raise ValueError("sample_rate must not be zero")

        samples = tuple(data)
        scaled = _NANOS_PER_SECOND * len(samples)
        if scaled > _U64_MAX:
            raise OverflowError("buffer too long to compute its duration")
        duration_ns = scaled // sample_rate // channels

        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._duration = timedelta(microseconds=duration_ns // 1000)
        self._data = iter(samples)
        # Channels and rate never change within a buffer, so there is no
        # frame boundary to report.
        self._frame_len: int | None = None

    def __iter__(self) -> SamplesBuffer:
        return self

    def __next__(self):
        return next(self._data)

    def size_hint(self) -> tuple[int, int | None]:
        """Exact number of samples left, as a lower and upper bound."""
        remaining = operator.length_hint(self._data)
        return remaining, remaining

    def current_frame_len(self) -> int | None:
        """Samples until the format may change; unknown for a buffer."""
        return self._frame_len

    def total_duration(self) -> timedelta:
        """Playing time of the whole buffer."""
        return self._duration