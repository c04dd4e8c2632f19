"""Band-limited sawtooth oscillator using per-slice wavetables."""

import functools
import math
from typing import NamedTuple

from .exp2 import exp2_lookup
from .module import Module

LG_N_SAMPLES = 10
N_SAMPLES = 1 << LG_N_SAMPLES
N_PARTIALS_MAX = N_SAMPLES // 2

LG_SLICES_PER_OCTAVE = 2
SLICES_PER_OCTAVE = 1 << LG_SLICES_PER_OCTAVE
SLICE_SHIFT = 24 - LG_SLICES_PER_OCTAVE
SLICE_EXTRA = 3

N_SLICES = 36
# 0.5 * (log2(440/44100) + log2(440/48000) + 2/12) + 1/64 - 3, in Q24
SLICE_BASE = 161217316
LOW_FREQ_LIMIT = -SLICE_BASE

_NEG2OVERPI = -0.63661977236758138
_PHASE_MASK = (1 << 24) - 1
_TABLE_SHIFT = 24 - LG_N_SAMPLES
_INTERP_SHIFT = SLICE_SHIFT - SLICE_EXTRA


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


class _Tables(NamedTuple):
    freq_off: int
    slices: tuple


def _add_partial(lut, k):
    """Add partial ``k`` of the sawtooth series to ``lut`` (Q30), in place."""
    scale = _NEG2OVERPI / k
    if (N_PARTIALS_MAX - k) <= (N_PARTIALS_MAX >> 2):
        scale = scale * (N_PARTIALS_MAX - k) / (N_PARTIALS_MAX >> 2)
    dphase = k * 2 * math.pi / N_SAMPLES
    ds_d = (1 << 30) * scale * math.sin(dphase)
    cm2_d = (1 << 29) * (2 * (math.cos(dphase) - 1))
    dshift = 0
    while dshift < 16:
        limit = -(1 << (30 - dshift))
        if ds_d < limit or cm2_d < limit:
            break
        dshift += 1
    ds = _to_int32(math.floor((1 << dshift) * ds_d + 0.5))
    cm2 = _to_int32(math.floor((1 << dshift) * cm2_d + 0.5))
    s = 0
    rounding = (1 << dshift) >> 1
    for i in range(N_SAMPLES // 2):
        lut[i] = _to_int32(lut[i] + s)
        ds = _to_int32(ds + ((cm2 * s + (1 << 28)) >> 29))
        s = _to_int32(s + (_to_int32(ds + rounding) >> dshift))


@functools.lru_cache(maxsize=1)
def _build_slices():
    lut = [0] * (N_SAMPLES // 2)
    slices = [None] * N_SLICES
    slice_inc = 2.0 ** (1.0 / SLICES_PER_OCTAVE)
    f_0 = slice_inc ** (N_SLICES - 1) * 0.5 ** (SLICE_BASE * 1.0 / (1 << 24))
    n_partials_last = 0
    for j in range(N_SLICES - 1, -1, -1):
        n_partials = min(math.floor(0.5 / f_0), N_PARTIALS_MAX)
        for k in range(n_partials_last + 1, n_partials + 1):
            _add_partial(lut, k)
        table = [0] * N_SAMPLES
        for i in range(1, N_SAMPLES // 2):
            value = (lut[i] + 32) >> 6
            table[i] = value
            table[N_SAMPLES - i] = -value
        slices[j] = tuple(table)
        n_partials_last = n_partials
        f_0 *= 1.0 / slice_inc
    return tuple(slices)


def build_tables(sample_rate):
    """Return the frequency offset for ``sample_rate`` and the slice wavetables.

    ``freq_off`` converts a Q24 log2 frequency in Hz to a log2 phase step;
    ``slices`` holds ``N_SLICES`` tables of ``N_SAMPLES`` Q24 values, each
    with fewer partials than the one below it.
    """
    if sample_rate <= 0:
        raise ValueError(f"sample rate must be positive: {sample_rate}")
    freq_off = int(-(1 << 24) * math.log(sample_rate) / math.log(2))
    return _Tables(freq_off, _build_slices())


class Sawtooth(Module):
    """Sawtooth oscillator; the control is a Q24 log2 frequency in Hz."""

    def __init__(self, sample_rate):
        self._tables = build_tables(sample_rate)
        self.phase = 0

    @staticmethod
    def compute(phase):
        """Return the naive (aliasing) sawtooth value for a Q24 phase."""
        return phase * 2 - (1 << 24)

    def _lookup_1(self, phase, slice_ix):
        table = self._tables.slices[slice_ix]
        phase_int = (phase >> _TABLE_SHIFT) & (N_SAMPLES - 1)
        lowbits = phase & ((1 << _TABLE_SHIFT) - 1)
        y0 = table[phase_int]
        y1 = table[(phase_int + 1) & (N_SAMPLES - 1)]
        return y0 + (((y1 - y0) * lowbits) >> _TABLE_SHIFT)

    def _lookup_2(self, phase, slice_ix, slice_lowbits):
        y4 = self._lookup_1(phase, slice_ix)
        y5 = self._lookup_1(phase, slice_ix + 1)
        return y4 + (((y5 - y4) * slice_lowbits) >> _INTERP_SHIFT)

    def process(self, inbufs, control_in, control_last):
        """Generate one block of ``n`` samples; returns ``[output]``."""
        actual_logf = control_last[0] + self._tables.freq_off
        f = exp2_lookup(actual_logf)
        p = self.phase

        if actual_logf < LOW_FREQ_LIMIT - (1 << _INTERP_SHIFT):
            def sample(ph):
                return self.compute(ph)
        elif actual_logf < LOW_FREQ_LIMIT:
            # Blend the computed wave into the lowest table.
            slice_ix = (LOW_FREQ_LIMIT + SLICE_BASE + (1 << SLICE_SHIFT) - 1) >> SLICE_SHIFT
            blend = actual_logf - LOW_FREQ_LIMIT + (1 << _INTERP_SHIFT)

            def sample(ph):
                yc = self.compute(ph)
                yl = self._lookup_1(ph, slice_ix + 1)
                return yc + (((yl - yc) * blend) >> _INTERP_SHIFT)
        else:
            slice_ix = (actual_logf + SLICE_BASE + (1 << SLICE_SHIFT) - 1) >> SLICE_SHIFT
            slice_start = (1 << SLICE_SHIFT) - (1 << _INTERP_SHIFT)
            slice_lowbits = (
                (actual_logf + SLICE_BASE) & ((1 << SLICE_SHIFT) - 1)
            ) - slice_start
            if slice_ix > N_SLICES - 2 and (slice_ix > N_SLICES - 1 or slice_lowbits > 0):
                slice_ix = N_SLICES - 1
                slice_lowbits = 0
            if slice_lowbits <= 0:
                def sample(ph):
                    return self._lookup_1(ph, slice_ix)
            else:
                def sample(ph):
                    return self._lookup_2(ph, slice_ix, slice_lowbits)

        out = []
        for _ in range(self.n):
            out.append(sample(p))
            p = (p + f) & _PHASE_MASK
        self.phase = p
        return [out]