"""Decoding of audio data into a source of 16-bit samples."""

from __future__ import annotations

from datetime import timedelta
from typing import BinaryIO

from pcmflow.errors import DecoderError, UnrecognizedFormatError
from pcmflow.sample import SampleFormat
from pcmflow.wav import WavDecoder

# Decoders tried in order when the format has to be detected.
_DECODERS = (WavDecoder,)


def _detect(data: BinaryIO):
    for decoder_type in _DECODERS:
        try:
            return decoder_type(data)
        except UnrecognizedFormatError:
            continue
    raise UnrecognizedFormatError()


class Decoder:
    """Source of audio samples decoded from a seekable stream.

    The format of the data is detected automatically.
    """

    sample_format = SampleFormat.I16

    def __init__(self, data: BinaryIO) -> None:
        self._inner = _detect(data)

    @classmethod
    def _wrap(cls, inner) -> Decoder:
        decoder = cls.__new__(cls)
        decoder._inner = inner
        return decoder

    @classmethod
    def new_wav(cls, data: BinaryIO) -> Decoder:
        """Build a decoder for WAV data."""
        return cls._wrap(WavDecoder(data))

    @classmethod
    def new_looped(cls, data: BinaryIO) -> LoopedDecoder:
        """Build a decoder that starts over from the beginning when it ends."""
        return LoopedDecoder(cls(data))

    @property
    def channels(self) -> int:
        return self._inner.channels

    @property
    def sample_rate(self) -> int:
        return self._inner.sample_rate

    def __iter__(self) -> Decoder:
        return self

    def __next__(self) -> int:
        return next(self._inner)

    def size_hint(self) -> tuple[int, int | None]:
        """Lower and optional upper bound of the samples left."""
        return self._inner.size_hint()

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def current_frame_len(self) -> int | None:
        """Samples until the format may next change, if known."""
        return self._inner.current_frame_len()

    def total_duration(self) -> timedelta | None:
        """Playing time of the whole stream, if known."""
        return self._inner.total_duration()


class LoopedDecoder:
    """Source that replays a decoded stream from the start forever.

    If the stream cannot be rewound or decoded again, the source ends.
    """

    sample_format = SampleFormat.I16

    def __init__(self, decoder: Decoder) -> None:
        self._inner = decoder._inner
        # A looped stream has no end, so its length is never known.
        self._duration: timedelta | None = None

    @property
    def channels(self) -> int:
        return 0 if self._inner is None else self._inner.channels

    @property
    def sample_rate(self) -> int:
        return 1 if self._inner is None else self._inner.sample_rate

    def __iter__(self) -> LoopedDecoder:
        return self

    def __next__(self) -> int:
        if self._inner is None:
            raise StopIteration
        try:
            return next(self._inner)
        except StopIteration:
            pass

        finished, self._inner = self._inner, None
        try:
            reader = finished.into_inner()
            reader.seek(0)
            restarted = type(finished)(reader)
        except (OSError, ValueError, DecoderError):
            raise StopIteration from None
        self._inner = restarted
        return next(restarted)

    def size_hint(self) -> tuple[int, int | None]:
        """Lower bound from the current pass; no upper bound."""
        if self._inner is None:
            return 0, None
        return self._inner.size_hint()[0], None

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def current_frame_len(self) -> int | None:
        """Samples until the format may next change, if known."""
        if self._inner is None:
            return 0
        return self._inner.current_frame_len()

    def total_duration(self) -> timedelta | None:
        """A looped stream has no end."""
        return self._duration