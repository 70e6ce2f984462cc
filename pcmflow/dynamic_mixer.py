"""Mixer that plays multiple sounds at the same time."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterator
from datetime import timedelta

from pcmflow.channels import ChannelCountConverter
from pcmflow.sample import DataConverter, SampleFormat
from pcmflow.sample_rate import SampleRateConverter


def _current_frame_len(source) -> int | None:
    method = getattr(source, "current_frame_len", None)
    return method() if callable(method) else None


class _UniformSource:
    """Adapts a source to fixed channels, sample rate and sample format.

    When the source reports a frame length, its format is re-read at every
    frame boundary so that format changes are followed.
    """

    def __init__(self, source, channels: int, sample_rate: int, sample_format: SampleFormat):
        self._source = source
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._framed = False
        self._inner: Iterator = self._bootstrap()

    def _bootstrap(self) -> Iterator:
        source = self._source
        frame_len = _current_frame_len(source)
        self._framed = frame_len is not None
        source_format = getattr(source, "sample_format", self.sample_format)
        chunk = source if frame_len is None else itertools.islice(source, frame_len)
        resampled = SampleRateConverter(
            chunk, source.sample_rate, self.sample_rate, source.channels, source_format
        )
        remixed = ChannelCountConverter(resampled, source.channels, self.channels)
        return DataConverter(remixed, source_format, self.sample_format)

    def __iter__(self) -> _UniformSource:
        return self

    def __next__(self):
        try:
            return next(self._inner)
        except StopIteration:
            if not self._framed:
                raise
        self._inner = self._bootstrap()
        return next(self._inner)


def mixer(
    channels: int,
    sample_rate: int,
    sample_format: SampleFormat = SampleFormat.F32,
) -> tuple[DynamicMixerController, DynamicMixer]:
    """Build a mixer: a controller to add sounds and the mixed output source.

    Every sound added is converted to the given channels, rate and format.
    """
    controller = DynamicMixerController(channels, sample_rate, sample_format)
    return controller, DynamicMixer(controller)


class DynamicMixerController:
    """The input side of a mixer."""

    def __init__(self, channels: int, sample_rate: int, sample_format: SampleFormat) -> None:
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._lock = threading.Lock()
        self._pending: list = []
        self._has_pending = False

    def add(self, source) -> None:
        """Add a new source to mix with the existing ones."""
        uniform = _UniformSource(source, self.channels, self.sample_rate, self.sample_format)
        with self._lock:
            self._pending.append(uniform)
            self._has_pending = True


class DynamicMixer:
    """The output side of a mixer; yields the sum of all playing sources."""

    def __init__(self, controller: DynamicMixerController) -> None:
        self._input = controller
        self._current: list = []
        self._sample_count = 0
        # The output format is fixed, so there is never a frame boundary.
        self._frame_len: int | None = None
        # Sources may be added at any time, so the length is never known.
        self._duration: timedelta | None = None

    @property
    def channels(self) -> int:
        return self._input.channels

    @property
    def sample_rate(self) -> int:
        return self._input.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return self._input.sample_format

    def __iter__(self) -> DynamicMixer:
        return self

    def __next__(self):
        if self._input._has_pending:
            self._start_pending_sources()

        self._sample_count += 1
        total = self._sum_current_sources()

        if not self._current:
            raise StopIteration
        return total

    def _start_pending_sources(self) -> None:
        # A source only starts on a frame boundary of the output so that its
        # interleaved channels line up with the output channels.
        with self._input._lock:
            still_pending = []
            for source in self._input._pending:
                if self._sample_count % source.channels == 0:
                    self._current.append(source)
                else:
                    still_pending.append(source)
            self._input._pending = still_pending
            self._input._has_pending = bool(still_pending)

    def _sum_current_sources(self):
        sample_format = self.sample_format
        total = sample_format.zero_value()
        still_current = []
        for source in self._current:
            value = next(source, None)
            if value is not None:
                total = sample_format.saturating_add(total, value)
                still_current.append(source)
        self._current = still_current
        return total

    def size_hint(self) -> tuple[int, int | None]:
        """Nothing is known about how many samples remain."""
        return 0, None

    def current_frame_len(self) -> int | None:
        """The output format never changes."""
        return self._frame_len

    def total_duration(self) -> timedelta | None:
        """Sources may be added at any time, so the duration is unknown."""
        return self._duration