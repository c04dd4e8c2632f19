# dxsynth

Building blocks for a DX7-style FM synthesizer, computed in fixed point
(mostly Q24: `1 << 24` stands for 1.0). The package needs nothing outside
the standard library.

## Modules

- `dxsynth.module`: `Module`, the abstract base of block processors, with
  `LG_N = 6` and `N = 64` samples per block. `process(inbufs, control_in,
  control_last)` returns a list of output buffers.
- `dxsynth.sin`: sine of a Q24 phase by table (`lookup`) or polynomial
  (`compute`), and a more accurate Q30 version (`compute10`).
- `dxsynth.exp2`: `exp2_lookup` (Q24 in and out; raises `ValueError` for
  arguments of 7.0 and above) and `tanh_lookup`.
- `dxsynth.freqlut`: `FreqLut(sample_rate)`; `lookup(logfreq)` turns a Q24
  log2 frequency in Hz into a per-sample Q24 phase increment (raises
  `ValueError` at 2**21 Hz and above).
- `dxsynth.env`: `Env(rates, levels, outlevel, rate_scaling)`, the four-stage
  DX7 envelope with `getsample()`, `keydown(down)` and `setparam(param,
  value)`, and `scale_outlevel(outlevel)`.
- `dxsynth.fm_op_kernel`: single operators for one block: `compute` (phase
  modulated by an input block), `compute_pure` (plain sine) and `compute_fb`
  (self-feedback, state kept in a `FeedbackState`). Each returns a new list of
  64 samples, summed onto `add_to` when that is given.
- `dxsynth.fm_core`: `FmCore.compute(output, params, algorithm, fb_state,
  feedback_shift)` runs six operators (`FmOpParams`: gains, freq, phase)
  through one of the 32 algorithms in `ALGORITHMS` (zero-based), writing into
  `output` in place and advancing each operator's phase. `OpFlags` names the
  routing bits, `n_out(ops)` counts carriers and `dump_algorithms()` returns a
  text description of all algorithms.
- `dxsynth.lfo`: `Lfo(sample_rate)`, the DX7 LFO: `reset(params)` from the six
  patch bytes, `getsample()`, `getdelay()` and `keydown()`; `Waveform` names
  the six waveforms.
- `dxsynth.resofilter`: `ResoFilter(freqlut)`, a four-pole ladder filter whose
  controls are Q24 log cutoff, resonance and overdrive; also
  `compute_alpha`, `make_state_transition` and `dump_matrix`.
- `dxsynth.sawtooth`: `Sawtooth(sample_rate)`, a band-limited sawtooth built on
  per-slice wavetables (`build_tables`); its control is a Q24 log2 frequency.
- `dxsynth.fir`: `SimpleFirFilter(kernel)` and `HalfRateFirFilter(kernel, n)`;
  `process(inp, n)` takes `n + nk - 1` float samples and returns `n` outputs.
- `dxsynth.ringbuffer`: `RingBuffer`, a thread-safe 64 KiB byte queue for one
  producer and one consumer; `write` blocks while the buffer is full and
  `read(size)` raises `ValueError` if fewer bytes are available.
- `dxsynth.wavout`: `WavOut(filename, sample_rate, n_samples)`, a context
  manager that writes 16-bit mono WAV files from Q24 samples.

## Example

Render a one-operator tone with an envelope to a WAV file:

```python
from dxsynth import fm_op_kernel
from dxsynth.env import Env
from dxsynth.wavout import WavOut

sample_rate = 44100
n_samples = 64 * 1000
freq = 150358          # phase increment per sample, Q24
env = Env([70, 50, 30, 80], [99, 90, 70, 0], 99 * 32, 0)

phase = 0
gain_last = 0
with WavOut("tone.wav", sample_rate, n_samples) as wav:
    for block in range(n_samples // 64):
        if block == 500:
            env.keydown(False)
        level = env.getsample()
        gain = int((1 << 8) * 2 ** (level / (1 << 24)))
        samples = fm_op_kernel.compute_pure(phase, freq, gain_last, gain, None)
        gain_last = gain
        phase += freq * 64
        wav.write_data(samples)
```

## What it does not do

This is a library of signal-processing parts. It has no command-line
program, does not read MIDI or load patch banks, does not allocate voices or
assemble complete notes from patches, and does not play sound on an audio
device: output goes to lists of samples or to WAV files.

## Tests

Install with the `test` extra and run `pytest`.