"""Decoder for uncompressed WAV data, producing 16-bit signed samples."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import BinaryIO

from pcmflow.errors import UnrecognizedFormatError
from pcmflow.sample import SampleFormat, _wrap_i16

_FORMAT_PCM = 0x0001
_FORMAT_IEEE_FLOAT = 0x0003
_FORMAT_EXTENSIBLE = 0xFFFE


class _Encoding(enum.Enum):
    INT = "int"
    FLOAT = "float"


class _InvalidWave(Exception):
    """The stream does not hold a WAV header that can be read."""


@dataclass(frozen=True)
class _WavSpec:
    encoding: _Encoding
    channels: int
    sample_rate: int
    bits_per_sample: int
    container_bytes: int
    sample_count: int


def _read_exact(data: BinaryIO, size: int) -> bytes:
    chunk = data.read(size)
    if len(chunk) < size:
        raise _InvalidWave("unexpected end of stream")
    return chunk


def _parse_fmt(body: bytes) -> tuple[_Encoding, int, int, int, int]:
    """Return encoding, channels, sample rate, valid bits and container bytes."""
    if len(body) < 16:
        raise _InvalidWave("fmt chunk too short")
    code, channels, sample_rate, _byte_rate, block_align, bits = struct.unpack(
        "<HHIIHH", body[:16]
    )
    container_bits = bits
    if code == _FORMAT_EXTENSIBLE:
        if len(body) < 40:
            raise _InvalidWave("extensible fmt chunk too short")
        (valid_bits,) = struct.unpack("<H", body[18:20])
        (code,) = struct.unpack("<H", body[24:26])
        if valid_bits == 0 or valid_bits > container_bits:
            raise _InvalidWave("invalid valid bits per sample")
        bits = valid_bits

    if channels == 0:
        raise _InvalidWave("no channels")
    if sample_rate == 0:
        raise _InvalidWave("zero sample rate")
    if container_bits == 0 or container_bits > 32:
        raise _InvalidWave("unsupported bits per sample")

    if code == _FORMAT_PCM:
        encoding = _Encoding.INT
    elif code == _FORMAT_IEEE_FLOAT:
        if bits != 32:
            raise _InvalidWave("only 32-bit floats are supported")
        encoding = _Encoding.FLOAT
    else:
        raise _InvalidWave(f"unsupported format code {code:#06x}")

    container_bytes = (container_bits + 7) // 8
    if block_align != channels * container_bytes:
        raise _InvalidWave("invalid block_align")
    return encoding, channels, sample_rate, bits, container_bytes


def _read_header(data: BinaryIO) -> _WavSpec:
    """Read the header up to the start of the sample data."""
    riff = _read_exact(data, 12)
    if riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
        raise _InvalidWave("not a RIFF/WAVE stream")

    fmt = None
    while True:
        chunk_id, size = struct.unpack("<4sI", _read_exact(data, 8))
        if chunk_id == b"fmt ":
            fmt = _parse_fmt(_read_exact(data, size))
            if size % 2:
                data.read(1)
        elif chunk_id == b"data":
            if fmt is None:
                raise _InvalidWave("data chunk before fmt chunk")
            encoding, channels, sample_rate, bits, container_bytes = fmt
            return _WavSpec(
                encoding=encoding,
                channels=channels,
                sample_rate=sample_rate,
                bits_per_sample=bits,
                container_bytes=container_bytes,
                sample_count=size // container_bytes,
            )
        else:
            _read_exact(data, size + size % 2)


def is_wave(data: BinaryIO) -> bool:
    """Tell whether the stream holds WAV data, leaving its position unchanged."""
    position = data.tell()
    try:
        _read_header(data)
    except (_InvalidWave, struct.error):
        return False
    finally:
        data.seek(position)
    return True


def _round_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def f32_to_i16(value: float) -> int:
    """Scale a float sample in -1.0..1.0 to 16 bits, clipping louder values."""
    clipped = -1.0 if math.isnan(value) else min(max(value, -1.0), 1.0)
    return math.trunc(_round_f32(clipped * 32767.0))


def i8_to_i16(value: int) -> int:
    """Scale an 8-bit sample to 16 bits by a factor of 256."""
    return _wrap_i16(value * 256)


def i24_to_i16(value: int) -> int:
    """Reduce a 24-bit sample to 16 bits."""
    return _wrap_i16(value >> 8)


def i32_to_i16(value: int) -> int:
    """Reduce a 32-bit sample to 16 bits."""
    return _wrap_i16(value >> 16)


_INT_CONVERSIONS = {
    8: i8_to_i16,
    16: lambda value: value,
    24: i24_to_i16,
    32: i32_to_i16,
}


class WavDecoder:
    """Source of 16-bit samples read from a seekable WAV stream."""

    sample_format = SampleFormat.I16

    def __init__(self, data: BinaryIO) -> None:
        if not is_wave(data):
            raise UnrecognizedFormatError()
        self._data = data
        self._spec = _read_header(data)
        self._samples_read = 0
        self.channels = self._spec.channels
        self.sample_rate = self._spec.sample_rate
        micros = 1_000_000 * self._spec.sample_count // (self.sample_rate * self.channels)
        self._total_duration = timedelta(microseconds=micros)
        # The format never changes within a WAV stream, so there is no frame boundary.
        self._frame_len: int | None = None

    def __iter__(self) -> WavDecoder:
        return self

    def _convert(self):
        spec = self._spec
        if spec.encoding is _Encoding.FLOAT and spec.bits_per_sample == 32:
            return f32_to_i16
        if spec.encoding is _Encoding.INT and spec.bits_per_sample in _INT_CONVERSIONS:
            return _INT_CONVERSIONS[spec.bits_per_sample]
        raise ValueError(
            f"Unimplemented wav spec: {spec.encoding.value}, {spec.bits_per_sample}"
        )

    def _read_raw(self):
        spec = self._spec
        raw = self._data.read(spec.container_bytes)
        if len(raw) < spec.container_bytes:
            return 0.0 if spec.encoding is _Encoding.FLOAT else 0
        if spec.encoding is _Encoding.FLOAT:
            return struct.unpack("<f", raw)[0]
        if spec.container_bytes == 1:
            value = raw[0] - 128
        else:
            value = int.from_bytes(raw, "little", signed=True)
        return value >> (spec.container_bytes * 8 - spec.bits_per_sample)

    def __next__(self) -> int:
        convert = self._convert()
        if self._samples_read >= self._spec.sample_count:
            raise StopIteration
        self._samples_read += 1
        return convert(self._read_raw())

    def size_hint(self) -> tuple[int, int]:
        """Exact number of samples left, as a lower and upper bound."""
        remaining = self._spec.sample_count - self._samples_read
        return remaining, remaining

    def __length_hint__(self) -> int:
        return self.size_hint()[0]

    def current_frame_len(self) -> int | None:
        """The format never changes, so there is no frame boundary."""
        return self._frame_len

    def total_duration(self) -> timedelta:
        """Playing time of the whole stream."""
        return self._total_duration

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._data