"""Resonant four-pole ladder low-pass filter.

The filter is discretised by computing the matrix exponential of the
ladder's Jacobian (Taylor series followed by repeated squaring). With a
non-zero overdrive a sigmoid non-linearity is applied to each stage.

Matrices are 4x4, stored column-major as flat lists of 16 floats. A state
transition is a 5x5 matrix of which the bottom 5x4 part is stored: the
first four values are the input column, the other sixteen the 4x4 state
matrix.
"""

import math

from .module import N, Module

_TAYLOR_TERMS = 4
_SQUARINGS = 4
_TAYLOR_SCALES = (1.0, 1 / 2.0, 1 / 6.0, 1 / 24.0)
_MAX_RESONANCE = 3.98
_LINEAR_OVERDRIVE = 0.01


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


def _matmult4(a, b):
    """Return the product of two column-major 4x4 matrices."""
    return [
        sum(a[k * 4 + row] * b[col * 4 + k] for k in range(4))
        for col in range(4)
        for row in range(4)
    ]


def _matvec4(a, v):
    """Return a column-major 4x4 matrix applied to a 4-vector."""
    return [sum(a[k * 4 + row] * v[k] for k in range(4)) for row in range(4)]


def compute_alpha(freqlut, logf):
    """Return the Q24 filter coefficient for a Q24 log cutoff frequency."""
    return min(1 << 24, freqlut.lookup(logf))


def make_state_transition(f0, k):
    """Return the 20-value state transition for coefficient ``f0`` and resonance ``k``.

    Both arguments are Q24; the resonance is clamped to just under 4.
    """
    f = f0 * (1.0 / (1 << (24 + _SQUARINGS)))
    k_f = min(k * (1.0 / (1 << 24)), _MAX_RESONANCE)

    # The top row of the Jacobian is all zeros.
    j = [0.0] * 20
    j[0] = f
    j[4] = -f
    j[5] = f
    j[9] = -f
    j[10] = f
    j[14] = -f
    j[15] = f
    j[16] = -k_f * f
    j[19] = -f

    # The top row of the exponential is [1 0 0 0 0].
    a = [0.0] * 20
    a[4] = a[9] = a[14] = a[19] = 1.0

    c = list(j)
    for i, scale in enumerate(_TAYLOR_SCALES[:_TAYLOR_TERMS]):
        a = [x + scale * y for x, y in zip(a, c)]
        if i < _TAYLOR_TERMS - 1:
            c = _matvec4(c[4:], j[:4]) + _matmult4(c[4:], j[4:])

    for _ in range(_SQUARINGS):
        vec = _matvec4(a[4:], a[:4])
        mat = _matmult4(a[4:], a[4:])
        a = [x + y for x, y in zip(a[:4], vec)] + mat
    return a


def dump_matrix(a):
    """Format a 20-value state transition as its full 5x5 matrix."""
    lines = []
    for row in range(5):
        values = []
        for col in range(5):
            if row == 0:
                x = 1.0 if col == 0 else 0.0
            else:
                x = a[col * 4 + (row - 1)]
            values.append("%6f " % x)
        prefix = "[" if row == 0 else " "
        suffix = "]" if row == 4 else ""
        lines.append(prefix + "[" + "".join(values) + "]" + suffix)
    return "\n".join(lines) + "\n"


def _sigmoid(x, overdrive):
    xs = overdrive * x * (1.0 / (1 << 24))
    return x / math.sqrt(1 + xs * xs)


class ResoFilter(Module):
    """Ladder filter controlled by cutoff, resonance and overdrive.

    Controls are three Q24 values: log cutoff frequency, resonance (4.0 is
    self-oscillation) and overdrive.
    """

    def __init__(self, freqlut):
        self._freqlut = freqlut
        self._x = [0.0] * 4

    def process(self, inbufs, control_in, control_last):
        """Filter one block of ``n`` samples; returns ``[output]``."""
        if len(control_in) < 3:
            raise ValueError("filter controls need cutoff, resonance and overdrive")
        ibuf = inbufs[0]
        if len(ibuf) != N:
            raise ValueError(f"input must hold {N} samples, got {len(ibuf)}")
        overdrive = control_in[2] * (1.0 / (1 << 24))
        a = make_state_transition(
            compute_alpha(self._freqlut, control_in[0]), control_in[1]
        )
        b = a[:4]
        m = a[4:]
        x = self._x
        out = []
        if overdrive < _LINEAR_OVERDRIVE:
            for sample in ibuf:
                signal = float(sample)
                tmp = _matvec4(m, x)
                x = [t + signal * bk for t, bk in zip(tmp, b)]
                out.append(_to_int32(int(x[3])))
        else:
            ogain = 1 + overdrive
            k = control_in[1] * (1.0 / (1 << 24))
            for i in range(4):
                a[4 + 5 * i] -= 1.0
                a[16 + i] += k * a[i]
            b = a[:4]
            m = a[4:]
            for sample in ibuf:
                signal = float(sample)
                tx = [_sigmoid(v, overdrive) for v in x]
                tmp = _matvec4(m, tx)
                xin = _sigmoid(signal - k * x[3], overdrive)
                x = [v + t + xin * bk for v, t, bk in zip(x, tmp, b)]
                out.append(_to_int32(int(x[3] * ogain)))
        self._x = x
        return [out]