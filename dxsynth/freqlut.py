"""Conversion of log frequency (Q24, one unit per octave) to phase increment."""

import math

LG_N_SAMPLES = 10
N_SAMPLES = 1 << LG_N_SAMPLES
_SAMPLE_SHIFT = 24 - LG_N_SAMPLES
MAX_LOGFREQ_INT = 20


class FreqLut:
    """Lookup table mapping log2 frequency in Hz to a per-sample Q24 phase step."""

    def __init__(self, sample_rate):
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive: {sample_rate}")
        self.sample_rate = sample_rate
        y = (1 << (24 + MAX_LOGFREQ_INT)) / sample_rate
        inc = 2.0 ** (1.0 / N_SAMPLES)
        table = []
        for _ in range(N_SAMPLES + 1):
            table.append(math.floor(y + 0.5))
            y *= inc
        self._table = tuple(table)

    def lookup(self, logfreq):
        """Return the Q24 phase increment for a Q24 log2 frequency.

        Raises ValueError for frequencies of 2**21 Hz and above.
        """
        hibits = logfreq >> 24
        if hibits > MAX_LOGFREQ_INT:
            raise ValueError(f"log frequency out of range: {logfreq}")
        ix = (logfreq & 0xFFFFFF) >> _SAMPLE_SHIFT
        y0 = self._table[ix]
        y1 = self._table[ix + 1]
        lowbits = logfreq & ((1 << _SAMPLE_SHIFT) - 1)
        y = y0 + (((y1 - y0) * lowbits) >> _SAMPLE_SHIFT)
        return y >> (MAX_LOGFREQ_INT - hibits)