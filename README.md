# pcmflow

Iterator-based building blocks for raw PCM audio samples, in pure Python
with no third-party dependencies.

Every source is an ordinary Python iterator that yields one sample at a time,
with channels interleaved. Sources also expose `channels`, `sample_rate` and,
where it applies, `size_hint()`, `current_frame_len()` and `total_duration()`.
They can be chained: decode a WAV stream, convert its sample format, change
its channel count and sample rate, mix it with other sounds or queue it after
them.

## Installation

```
pip install pcmflow
```

## Sample formats (`pcmflow.sample`)

`SampleFormat` has three members:

- `SampleFormat.I16`: signed 16-bit integers, silence is `0`.
- `SampleFormat.U16`: unsigned 16-bit integers, silence is `32768`.
- `SampleFormat.F32`: floats in -1.0..1.0, silence is `0.0`.

Each member provides `zero_value()`, `lerp(first, second, numerator,
denominator)`, `amplify(value, factor)` and `saturating_add(first, second)`;
the integer formats clamp or wrap to their 16-bit range.

`convert_sample(value, source_format, target_format)` converts one value.
`DataConverter(source, source_format, target_format)` converts a whole
iterator lazily; `into_inner()` returns the wrapped iterator.

## Buffers (`pcmflow.buffer`)

`SamplesBuffer(channels, sample_rate, data, sample_format=SampleFormat.F32)`
turns a sequence of samples into a source. Zero channels or a zero sample
rate raise `ValueError`. `total_duration()` returns a `datetime.timedelta`:
six samples in two channels at 2 Hz play for 1.5 seconds.

## Conversions

- `pcmflow.channels.ChannelCountConverter(source, from_channels, to_channels)`
  drops extra channels or repeats the last one. From two channels to three,
  `[1, 2, 1, 2]` becomes `[1, 2, 2, 1, 2, 2]`; from three to two,
  `[1, 2, 3, 1, 2, 3]` becomes `[1, 2, 1, 2]`.
- `pcmflow.sample_rate.SampleRateConverter(source, from_rate, to_rate,
  channels, sample_format)` resamples by linear interpolation. From 2000 Hz
  to 3000 Hz in stereo, `[2, 16, 4, 18, 6, 20, 8, 22]` becomes
  `[2, 16, 3, 17, 4, 18, 6, 20, 7, 21, 8, 22]`.

Counts or rates below 1 raise `ValueError`. Both converters offer
`size_hint()`, support `operator.length_hint()` and have `into_inner()`.

## Mixing (`pcmflow.dynamic_mixer`)

`mixer(channels, sample_rate, sample_format=SampleFormat.F32)` returns a
controller and an output. Sources given to the controller's `add()` are
converted to the mixer's channel count, sample rate and sample format, and
summed sample by sample (saturating for integer formats). A new source
starts only on an output frame boundary so its channels line up. The output
ends as soon as no source is playing.

```python
from pcmflow.buffer import SamplesBuffer
from pcmflow.dynamic_mixer import mixer
from pcmflow.sample import SampleFormat

controller, output = mixer(1, 48000, SampleFormat.I16)
controller.add(SamplesBuffer(1, 48000, [10, -10, 10, -10], SampleFormat.I16))
controller.add(SamplesBuffer(1, 48000, [5, 5, 5, 5], SampleFormat.I16))
print(list(output))  # [15, -5, 15, -5]
```

## Queueing (`pcmflow.sources_queue`)

`queue(keep_alive_if_empty, sample_format=SampleFormat.F32)` returns an input
and an output. Sources appended with `append()` play one after another.
`append_with_signal()` also returns a `threading.Event` that is set once that
source has finished. When the queue runs dry the output either ends or, if
kept alive, yields short bursts of silence until something is appended;
`set_keep_alive_if_empty()` changes this at any time.

## Decoding (`pcmflow.decoder`, `pcmflow.wav`)

`Decoder(data)` reads a seekable binary file object and yields signed 16-bit
samples. The only format it recognises is WAV (plain PCM, IEEE float, or the
extensible header), with 8, 16, 24 or 32-bit integer samples or 32-bit float
samples; other data raises `pcmflow.errors.UnrecognizedFormatError`, a
subclass of `DecoderError`. A WAV file with another integer bit depth is
accepted but raises `ValueError` when read.

- `Decoder.new_wav(data)` accepts WAV data only.
- `Decoder.new_looped(data)` returns a `LoopedDecoder` that rewinds the stream
  and starts again each time it ends; if it cannot, the source ends.

`pcmflow.wav` also exposes `WavDecoder`, `is_wave(data)` (which leaves the
stream position unchanged) and the sample helpers `f32_to_i16`, `i8_to_i16`,
`i24_to_i16` and `i32_to_i16`.

`pcmflow.errors.Mp4Type.from_str()` parses MP4-family extensions such as
`"m4a"` or `"MOV"`, whatever their case, and raises `ValueError` otherwise.

## What it does not do

pcmflow produces samples; it does not play them. There is no connection to
a sound device, no playback sink and no command-line program. Only WAV is
decoded: MP3, FLAC, Ogg Vorbis and MP4/AAC data are not recognised, and
`Mp4Type` only names extensions.

## Running the tests

```
pip install -e ".[test]"
pytest
```