"""DX7-compatible low-frequency oscillator with delayed onset."""

from enum import IntEnum

from . import sin
from .module import N

_MASK32 = 0xFFFFFFFF
_HALF = 1 << 31


class Waveform(IntEnum):
    """LFO waveform numbers as stored in a patch."""

    TRIANGLE = 0
    SAW_DOWN = 1
    SAW_UP = 2
    SQUARE = 3
    SINE = 4
    SAMPLE_HOLD = 5


class Lfo:
    """One LFO; samples and delay values are 0..1 in Q24, one per block."""

    def __init__(self, sample_rate):
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive: {sample_rate}")
        # 1 << 32 / 15.5 s / 11, per block
        self._unit = int(N * 25190424 / sample_rate + 0.5) & _MASK32
        self._phase = 0
        self._delta = 0
        self._waveform = 0
        self._randstate = 0
        self._sync = False
        self._delaystate = 0
        self._delayinc = 0
        self._delayinc2 = 0

    def reset(self, params):
        """Load rate, delay, sync and waveform from the six LFO patch bytes.

        ``params`` is rate, delay, pitch depth, amp depth, sync, waveform.
        """
        params = list(params)
        if len(params) < 6:
            raise ValueError("LFO parameters need six values")
        rate = params[0]
        delay = params[1]
        if not 0 <= delay <= 99:
            raise ValueError(f"LFO delay must be in 0..99: {delay}")
        sr = 1 if rate == 0 else (165 * rate) >> 6
        sr *= 11 if sr < 160 else 11 + ((sr - 160) >> 4)
        self._delta = (self._unit * sr) & _MASK32
        a = 99 - delay
        if a == 99:
            self._delayinc = _MASK32
            self._delayinc2 = _MASK32
        else:
            a = (16 + (a & 15)) << (1 + (a >> 4))
            self._delayinc = (self._unit * a) & _MASK32
            a &= 0xFF80
            a = max(0x80, a)
            self._delayinc2 = (self._unit * a) & _MASK32
        self._waveform = params[5] & 0xFF
        self._sync = params[4] != 0

    def getsample(self):
        """Advance by one block and return the waveform value."""
        self._phase = (self._phase + self._delta) & _MASK32
        phase = self._phase
        waveform = self._waveform
        if waveform == Waveform.TRIANGLE:
            x = phase >> 7
            if phase >> 31:
                x = ~x
            return x & ((1 << 24) - 1)
        if waveform == Waveform.SAW_DOWN:
            return ((~phase & _MASK32) ^ _HALF) >> 8
        if waveform == Waveform.SAW_UP:
            return (phase ^ _HALF) >> 8
        if waveform == Waveform.SQUARE:
            return ((~phase & _MASK32) >> 7) & (1 << 24)
        if waveform == Waveform.SINE:
            return (1 << 23) + (sin.lookup(phase >> 8) >> 1)
        if waveform == Waveform.SAMPLE_HOLD:
            if phase < self._delta:
                self._randstate = (self._randstate * 179 + 17) & 0xFF
            x = self._randstate ^ 0x80
            return (x + 1) << 16
        return 1 << 23

    def getdelay(self):
        """Advance the onset delay by one block and return its ramp value."""
        delta = self._delayinc if self._delaystate < _HALF else self._delayinc2
        d = (self._delaystate + delta) & _MASK32
        if d < self._delayinc:
            return 1 << 24
        self._delaystate = d
        if d < _HALF:
            return 0
        return (d >> 7) & ((1 << 24) - 1)

    def keydown(self):
        """Restart the delay, and the phase too when sync is on."""
        if self._sync:
            self._phase = _HALF - 1
        self._delaystate = 0