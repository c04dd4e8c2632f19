"""FM operator kernels: one block of sine output with a linear gain ramp.

Phases and frequencies are Q24 (``1 << 24`` is one full cycle). Gains are
Q24 linear. For sample ``i`` the gain is
``gain1 + (1 + i) / N * (gain2 - gain1)``.
"""

from dataclasses import dataclass

from . import sin
from .module import LG_N, N


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


@dataclass
class FeedbackState:
    """The last two output samples of an operator with self-feedback."""

    y0: int = 0
    y: int = 0


def _gain_step(gain1, gain2):
    return (gain2 - gain1 + (N >> 1)) >> LG_N


def _finish(samples, add_to):
    """Return ``samples``, summed onto ``add_to`` when it is given."""
    if add_to is None:
        return samples
    if len(add_to) != N:
        raise ValueError(f"buffer to add to must hold {N} samples, got {len(add_to)}")
    return [_to_int32(base + y) for base, y in zip(add_to, samples)]


def _modulated(phase0, freq, gain1, gain2, offsets):
    dgain = _gain_step(gain1, gain2)
    gain = gain1
    phase = phase0
    out = []
    for offset in offsets:
        gain += dgain
        y = sin.lookup(phase + offset)
        out.append(_to_int32((y * gain) >> 24))
        phase += freq
    return out


def compute(input, phase0, freq, gain1, gain2, add_to=None):
    """Run an operator phase-modulated by ``input``, without feedback.

    Returns a new block of ``N`` samples; when ``add_to`` is given the
    result is summed onto it.
    """
    if len(input) != N:
        raise ValueError(f"input must hold {N} samples, got {len(input)}")
    return _finish(_modulated(phase0, freq, gain1, gain2, input), add_to)


def compute_pure(phase0, freq, gain1, gain2, add_to=None):
    """Run an unmodulated sine operator, without feedback."""
    return _finish(_modulated(phase0, freq, gain1, gain2, [0] * N), add_to)


def compute_fb(phase0, freq, gain1, gain2, fb_state, fb_shift, add_to=None):
    """Run an operator that modulates itself through ``fb_state``.

    ``fb_state`` is updated in place with the last two raw outputs.
    """
    dgain = _gain_step(gain1, gain2)
    gain = gain1
    phase = phase0
    y0 = fb_state.y0
    y = fb_state.y
    out = []
    for _ in range(N):
        gain += dgain
        scaled_fb = _to_int32(y0 + y) >> (fb_shift + 1)
        y0 = y
        y = sin.lookup(phase + scaled_fb)
        y = _to_int32((y * gain) >> 24)
        out.append(y)
        phase += freq
    fb_state.y0 = y0
    fb_state.y = y
    return _finish(out, add_to)