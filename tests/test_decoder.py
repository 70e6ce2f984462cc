import io
import itertools
import struct
import wave
from datetime import timedelta

import pytest

from pcmflow.decoder import Decoder, LoopedDecoder
from pcmflow.errors import DecoderError, UnrecognizedFormatError
from pcmflow.sample import SampleFormat


def _wav_stream(frames: bytes, channels: int = 1, rate: int = 44100, width: int = 2):
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(width)
        writer.setframerate(rate)
        writer.writeframes(frames)
    return io.BytesIO(buffer.getvalue())


def _pcm16(samples):
    return struct.pack(f"<{len(samples)}h", *samples)


SAMPLES = [10, -10, 20, -20, 30, -30]


def test_decodes_16_bit_samples():
    decoder = Decoder(_wav_stream(_pcm16(SAMPLES)))
    assert list(decoder) == SAMPLES


def test_reports_header_values():
    decoder = Decoder(_wav_stream(_pcm16(SAMPLES), channels=2, rate=22050))
    assert decoder.channels == 2
    assert decoder.sample_rate == 22050
    assert decoder.sample_format is SampleFormat.I16


def test_total_duration():
    decoder = Decoder(_wav_stream(_pcm16(SAMPLES), channels=2, rate=2))
    assert decoder.total_duration() == timedelta(seconds=1, milliseconds=500)


def test_size_hint_counts_down():
    decoder = Decoder(_wav_stream(_pcm16(SAMPLES)))
    assert decoder.size_hint() == (len(SAMPLES), len(SAMPLES))
    next(decoder)
    next(decoder)
    assert decoder.size_hint() == (len(SAMPLES) - 2, len(SAMPLES) - 2)


def test_current_frame_len_unknown_for_wav():
    decoder = Decoder(_wav_stream(_pcm16(SAMPLES)))
    assert decoder.current_frame_len() is None


def test_eight_bit_samples_are_scaled():
    decoder = Decoder(_wav_stream(bytes([129, 127]), width=1))
    assert list(decoder) == [256, -256]


def test_unrecognized_data_raises():
    with pytest.raises(UnrecognizedFormatError) as info:
        Decoder(io.BytesIO(b"this is not audio data at all"))
    assert str(info.value) == "Unrecognized format"


def test_new_wav_rejects_other_data():
    with pytest.raises(DecoderError):
        Decoder.new_wav(io.BytesIO(b"RIFF"))


def test_new_wav_decodes():
    decoder = Decoder.new_wav(_wav_stream(_pcm16(SAMPLES)))
    assert list(decoder) == SAMPLES


def test_new_looped_rejects_other_data():
    with pytest.raises(UnrecognizedFormatError):
        Decoder.new_looped(io.BytesIO(b"\x00" * 64))


def test_looped_repeats_stream():
    looped = Decoder.new_looped(_wav_stream(_pcm16(SAMPLES)))
    assert list(itertools.islice(looped, len(SAMPLES) * 3)) == SAMPLES * 3


def test_looped_from_decoder_keeps_format():
    looped = LoopedDecoder(Decoder(_wav_stream(_pcm16(SAMPLES), channels=2, rate=8000)))
    assert looped.channels == 2
    assert looped.sample_rate == 8000
    assert looped.total_duration() is None


def test_looped_size_hint_has_no_upper_bound():
    looped = Decoder.new_looped(_wav_stream(_pcm16(SAMPLES)))
    next(looped)
    assert looped.size_hint() == (len(SAMPLES) - 1, None)


def test_looped_empty_stream_ends():
    looped = Decoder.new_looped(_wav_stream(b""))
    assert list(looped) == []


def test_looped_ends_when_stream_cannot_rewind():
    stream = _wav_stream(_pcm16(SAMPLES))
    looped = Decoder.new_looped(stream)
    assert list(itertools.islice(looped, len(SAMPLES))) == SAMPLES
    stream.close()
    with pytest.raises(StopIteration):
        next(looped)
    assert looped.channels == 0
    assert looped.sample_rate == 1
    assert looped.current_frame_len() == 0
    assert looped.size_hint() == (0, None)
    with pytest.raises(StopIteration):
        next(looped)