"""Queue that plays sounds one after the other."""

from __future__ import annotations

import threading
from datetime import timedelta

from pcmflow.sample import SampleFormat, _size_hint

# Frame length reported when neither the current sound nor its size hint
# gives a usable value.
_FRAME_THRESHOLD = 512


def _current_frame_len(source) -> int | None:
    method = getattr(source, "current_frame_len", None)
    return method() if callable(method) else None


class _Silence:
    """A fixed number of silent samples."""

    def __init__(self, channels: int, sample_rate: int, count: int, sample_format: SampleFormat):
        self.channels = channels
        self.sample_rate = sample_rate
        self.sample_format = sample_format
        self._remaining = count
        self._zero = sample_format.zero_value()

    def __iter__(self) -> _Silence:
        return self

    def __next__(self):
        if self._remaining <= 0:
            raise StopIteration
        self._remaining -= 1
        return self._zero

    def size_hint(self) -> tuple[int, int]:
        return self._remaining, self._remaining


def queue(
    keep_alive_if_empty: bool,
    sample_format: SampleFormat = SampleFormat.F32,
) -> tuple[SourcesQueueInput, SourcesQueueOutput]:
    """Build a queue: an input to append sounds and an output that plays them.

    If ``keep_alive_if_empty`` is true, the output plays silence while the
    queue is empty; otherwise it ends.
    """
    queue_input = SourcesQueueInput(keep_alive_if_empty, sample_format)
    return queue_input, SourcesQueueOutput(queue_input)


class SourcesQueueInput:
    """The input side of a queue."""

    def __init__(self, keep_alive_if_empty: bool, sample_format: SampleFormat) -> None:
        self.sample_format = sample_format
        self._keep_alive_if_empty = keep_alive_if_empty
        self._lock = threading.Lock()
        self._next_sounds: list = []

    def append(self, source) -> None:
        """Add a source to the end of the queue."""
        with self._lock:
            self._next_sounds.append((source, None))

    def append_with_signal(self, source) -> threading.Event:
        """Add a source to the end of the queue.

        The returned event is set once the sound has finished playing.
        """
        finished = threading.Event()
        with self._lock:
            self._next_sounds.append((source, finished))
        return finished

    def set_keep_alive_if_empty(self, keep_alive_if_empty: bool) -> None:
        """Set whether the output keeps playing silence when the queue is empty."""
        self._keep_alive_if_empty = keep_alive_if_empty


class SourcesQueueOutput:
    """The output side of a queue; plays the queued sounds in order."""

    def __init__(self, queue_input: SourcesQueueInput) -> None:
        self._input = queue_input
        self.sample_format = queue_input.sample_format
        self._current = _Silence(1, 48000, 0, queue_input.sample_format)
        self._signal_after_end: threading.Event | None = None
        # Sounds may be appended at any time, so the length is never known.
        self._duration: timedelta | None = None

    @property
    def channels(self) -> int:
        return self._current.channels

    @property
    def sample_rate(self) -> int:
        return self._current.sample_rate

    def __iter__(self) -> SourcesQueueOutput:
        return self

    def __next__(self):
        while True:
            sample = next(self._current, None)
            if sample is not None:
                return sample
            if not self._go_next():
                raise StopIteration

    def _go_next(self) -> bool:
        """Switch to the next queued sound; False if playback should stop."""
        if self._signal_after_end is not None:
            self._signal_after_end.set()
            self._signal_after_end = None

        with self._input._lock:
            if self._input._next_sounds:
                source, signal = self._input._next_sounds.pop(0)
            elif self._input._keep_alive_if_empty:
                # A short silence avoids spinning while waiting for new sounds.
                source = _Silence(1, 44100, 44100 * 10 // 1000, self.sample_format)
                signal = None
            else:
                return False

        self._current = source
        self._signal_after_end = signal
        return True

    def size_hint(self) -> tuple[int, int | None]:
        """Lower bound from the current sound; no upper bound."""
        return _size_hint(self._current)[0], None

    def current_frame_len(self) -> int:
        """Samples until the next point where the format may change.

        A boundary between two queued sounds must also be a frame boundary.
        """
        frame_len = _current_frame_len(self._current)
        if frame_len:
            return frame_len
        lower_bound = _size_hint(self._current)[0]
        if lower_bound > 0:
            return lower_bound
        return _FRAME_THRESHOLD

    def total_duration(self) -> timedelta | None:
        """Sounds may be appended at any time, so the duration is unknown."""
        return self._duration