"""Fixed-point sine: table lookup and polynomial approximations.

Phases are Q24 (``1 << 24`` is one full cycle) unless noted otherwise.
"""

import math

LG_N_SAMPLES = 10
N_SAMPLES = 1 << LG_N_SAMPLES

_SHIFT = 24 - LG_N_SAMPLES
_ROUND = 1 << 29

# Chebyshev polynomial coefficients for the Q24 approximation.
_C8_0 = 16777216
_C8_2 = -331168742
_C8_4 = 1089453524
_C8_6 = -1430910663
_C8_8 = 950108533

# Coefficients for the more accurate Q30 approximation.
_C10_0 = 1 << 30
_C10_2 = -1324675874  # scaled by 4
_C10_4 = 1089501821
_C10_6 = -1433689867
_C10_8 = 1009356886
_C10_10 = -421101352


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


def _build_table():
    """Return ``(delta, value)`` pairs for one cycle of a Q24 sine."""
    dphase = 2 * math.pi / N_SAMPLES
    c = math.floor(math.cos(dphase) * (1 << 30) + 0.5)
    s = math.floor(math.sin(dphase) * (1 << 30) + 0.5)
    u, v = 1 << 30, 0
    half = []
    for _ in range(N_SAMPLES // 2):
        half.append((v + 32) >> 6)
        u, v = (u * c - v * s + _ROUND) >> 30, (u * s + v * c + _ROUND) >> 30
    values = half + [-y for y in half]
    deltas = [nxt - cur for cur, nxt in zip(values, values[1:])]
    deltas.append(-values[-1])
    return tuple(zip(deltas, values))


_TABLE = _build_table()


def lookup(phase):
    """Sine of a Q24 phase by interpolated table lookup, Q24 result."""
    lowbits = phase & ((1 << _SHIFT) - 1)
    dy, y0 = _TABLE[(phase >> _SHIFT) & (N_SAMPLES - 1)]
    return y0 + ((dy * lowbits) >> _SHIFT)


def compute(phase):
    """Sine of a Q24 phase by polynomial evaluation, Q24 result."""
    x = (phase & ((1 << 23) - 1)) - (1 << 22)
    x2 = (x * x) >> 16
    y = _C8_8
    for coeff in (_C8_6, _C8_4, _C8_2, _C8_0):
        y = ((y * x2) >> 32) + coeff
    y = _to_int32(y)
    return y ^ -((phase >> 23) & 1)


def compute10(phase):
    """A more accurate sine: Q30 phase (``1 << 30`` per cycle), Q30 result."""
    x = (phase & ((1 << 29) - 1)) - (1 << 28)
    x2 = _to_int32((x * x) >> 26)
    y = _C10_10
    for coeff, shift in (
        (_C10_8, 34),
        (_C10_6, 34),
        (_C10_4, 34),
        (_C10_2, 32),
        (_C10_0, 30),
    ):
        y = ((y * x2) >> shift) + coeff
    y = _to_int32(y)
    return y ^ -((phase >> 29) & 1)