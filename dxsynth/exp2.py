"""Fixed-point base-2 exponential and hyperbolic tangent by table lookup."""

import math

EXP2_LG_N_SAMPLES = 10
EXP2_N_SAMPLES = 1 << EXP2_LG_N_SAMPLES

TANH_LG_N_SAMPLES = 10
TANH_N_SAMPLES = 1 << TANH_LG_N_SAMPLES

_EXP2_SHIFT = 24 - EXP2_LG_N_SAMPLES
_TANH_SHIFT = 26 - TANH_LG_N_SAMPLES


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


def _with_deltas(values, last):
    deltas = [nxt - cur for cur, nxt in zip(values, values[1:])]
    deltas.append(last - values[-1])
    return tuple(zip(deltas, values))


def _build_exp2_table():
    inc = 2.0 ** (1.0 / EXP2_N_SAMPLES)
    y = float(1 << 30)
    values = []
    for _ in range(EXP2_N_SAMPLES):
        values.append(math.floor(y + 0.5))
        y *= inc
    return _with_deltas(values, 1 << 31)


def _dtanh(y):
    return 1 - y * y


def _build_tanh_table():
    # Integrate tanh from its differential equation with 4th-order Runge-Kutta.
    step = 4.0 / TANH_N_SAMPLES
    y = 0.0
    values = []
    for _ in range(TANH_N_SAMPLES):
        values.append(int((1 << 24) * y + 0.5))
        k1 = _dtanh(y)
        k2 = _dtanh(y + 0.5 * step * k1)
        k3 = _dtanh(y + 0.5 * step * k2)
        k4 = _dtanh(y + step * k3)
        y += (step / 6) * (k1 + k4 + 2 * (k2 + k3))
    return _with_deltas(values, int((1 << 24) * y + 0.5))


_EXP2_TABLE = _build_exp2_table()
_TANH_TABLE = _build_tanh_table()


def exp2_lookup(x):
    """Return 2**x with x in Q24 and the result in Q24.

    Raises ValueError when the result would not fit in 31 bits (x >= 7.0).
    """
    hibits = x >> 24
    if hibits > 6:
        raise ValueError(f"exp2 argument out of range: {x}")
    lowbits = x & ((1 << _EXP2_SHIFT) - 1)
    dy, y0 = _EXP2_TABLE[(x >> _EXP2_SHIFT) & (EXP2_N_SAMPLES - 1)]
    y = y0 + ((dy * lowbits) >> _EXP2_SHIFT)
    return y >> (6 - hibits)


def tanh_lookup(x):
    """Return tanh(x) with x in Q24 (as a 32-bit value) and the result in Q24."""
    x = _to_int32(x)
    signum = x >> 31
    x ^= signum
    if x >= (4 << 24):
        if x >= (17 << 23):
            return signum ^ (1 << 24)
        sx = (-48408812 * x) >> 24
        return signum ^ ((1 << 24) - 2 * exp2_lookup(sx))
    lowbits = x & ((1 << _TANH_SHIFT) - 1)
    dy, y0 = _TANH_TABLE[(x >> _TANH_SHIFT) & (TANH_N_SAMPLES - 1)]
    y = y0 + ((dy * lowbits) >> _TANH_SHIFT)
    return y ^ signum