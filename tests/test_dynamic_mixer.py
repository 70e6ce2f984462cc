import pytest

from pcmflow.buffer import SamplesBuffer
from pcmflow.dynamic_mixer import mixer
from pcmflow.sample import SampleFormat, convert_sample

I16 = SampleFormat.I16


def collect(rx):
    return list(rx)


def test_basic():
    tx, rx = mixer(1, 48000, I16)
    tx.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))
    tx.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], I16))

    assert rx.channels == 1
    assert rx.sample_rate == 48000
    assert next(rx) == 15
    assert next(rx) == -5
    assert next(rx) == 15
    assert next(rx) == -5
    with pytest.raises(StopIteration):
        next(rx)


def test_channels_conv():
    tx, rx = mixer(2, 48000, I16)
    tx.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))
    tx.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], I16))

    assert rx.channels == 2
    assert rx.sample_rate == 48000
    assert collect(rx) == [15, 15, -5, -5, 15, 15, -5, -5]


def test_rate_conv():
    tx, rx = mixer(1, 96000, I16)
    tx.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))
    tx.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], I16))

    assert rx.channels == 1
    assert rx.sample_rate == 96000
    assert collect(rx) == [15, 5, -5, 5, 15, 5, -5]


def test_start_afterwards():
    tx, rx = mixer(1, 48000, I16)
    tx.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))

    assert next(rx) == 10
    assert next(rx) == -10

    tx.add(SamplesBuffer(1, 48000, [5, 5, 6, 6, 7, 7, 7], I16))

    assert next(rx) == 15
    assert next(rx) == -5
    assert next(rx) == 6
    assert next(rx) == 6

    tx.add(SamplesBuffer(1, 48000, [2], I16))

    assert next(rx) == 9
    assert next(rx) == 7
    assert next(rx) == 7
    with pytest.raises(StopIteration):
        next(rx)


def test_empty_mixer_ends_immediately():
    _, rx = mixer(2, 44100, I16)
    assert collect(rx) == []
    assert rx.size_hint() == (0, None)


def test_pending_source_waits_for_frame_boundary():
    tx, rx = mixer(2, 48000, I16)
    tx.add(SamplesBuffer(2, 48000, [1, 1, 1, 1], I16))
    assert next(rx) == 1
    tx.add(SamplesBuffer(2, 48000, [5, 6], I16))
    assert collect(rx) == [1, 6, 7]


def test_integer_sum_saturates():
    tx, rx = mixer(1, 48000, I16)
    tx.add(SamplesBuffer(1, 48000, [30000, -30000], I16))
    tx.add(SamplesBuffer(1, 48000, [30000, -30000], I16))
    assert collect(rx) == [32767, -32768]


def test_sample_format_conversion():
    tx, rx = mixer(1, 48000, SampleFormat.F32)
    tx.add(SamplesBuffer(1, 48000, [16384, -16384], I16))
    assert collect(rx) == [
        convert_sample(16384, I16, SampleFormat.F32),
        convert_sample(-16384, I16, SampleFormat.F32),
    ]


def test_source_metadata():
    _, rx = mixer(2, 22050, I16)
    assert rx.size_hint() == (0, None)
    assert rx.current_frame_len() is None
    assert rx.total_duration() is None
    assert rx.sample_format is I16