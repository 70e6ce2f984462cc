import pytest

from pcmflow.buffer import SamplesBuffer
from pcmflow.sample import SampleFormat
from pcmflow.sources_queue import queue

I16 = SampleFormat.I16


def test_immediate_end():
    _, rx = queue(False, I16)
    assert list(rx) == []
    assert rx.size_hint() == (0, None)


def test_keep_alive():
    tx, rx = queue(True, I16)
    tx.append(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))

    assert next(rx) == 10
    assert next(rx) == -10
    assert next(rx) == 10
    assert next(rx) == -10

    for _ in range(100000):
        assert next(rx) == 0


def test_keep_alive_silence_uses_format_zero():
    _, rx = queue(True, SampleFormat.U16)
    assert [next(rx) for _ in range(10)] == [SampleFormat.U16.zero_value()] * 10


def test_sounds_play_in_order():
    tx, rx = queue(False, I16)
    tx.append(SamplesBuffer(1, 48000, [10, -10, 10, -10], I16))
    tx.append(SamplesBuffer(2, 96000, [5, 5, 5, 5], I16))
    assert list(rx) == [10, -10, 10, -10, 5, 5, 5, 5]


def test_channels_follow_current_sound():
    tx, rx = queue(False, I16)
    tx.append(SamplesBuffer(2, 96000, [1, 2], I16))
    assert next(rx) == 1
    assert rx.channels == 2
    assert rx.sample_rate == 96000


def test_append_with_signal():
    tx, rx = queue(False, I16)
    finished = tx.append_with_signal(SamplesBuffer(1, 48000, [1, 2, 3], I16))
    assert [next(rx) for _ in range(3)] == [1, 2, 3]
    assert not finished.is_set()
    with pytest.raises(StopIteration):
        next(rx)
    assert finished.is_set()


def test_set_keep_alive_if_empty_stops_output():
    tx, rx = queue(True, I16)
    tx.append(SamplesBuffer(1, 48000, [7], I16))
    assert next(rx) == 7
    assert next(rx) == 0
    tx.set_keep_alive_if_empty(False)
    remaining = list(rx)
    assert all(sample == 0 for sample in remaining)
    with pytest.raises(StopIteration):
        next(rx)


def test_current_frame_len_uses_size_hint():
    tx, rx = queue(False, I16)
    tx.append(SamplesBuffer(1, 48000, [1, 2, 3, 4], I16))
    assert next(rx) == 1
    assert rx.current_frame_len() == 3
    assert rx.size_hint() == (3, None)


def test_current_frame_len_falls_back_to_threshold():
    _, rx = queue(False, I16)
    assert rx.current_frame_len() == 512
    assert rx.size_hint() == (0, None)


def test_total_duration_unknown():
    tx, rx = queue(False, I16)
    tx.append(SamplesBuffer(1, 48000, [1], I16))
    assert rx.total_duration() is None
    assert list(rx) == [1]