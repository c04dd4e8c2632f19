"""Six-operator FM core routing operators through the 32 DX7 algorithms."""

from dataclasses import dataclass, field
from enum import IntFlag

from . import fm_op_kernel
from .module import LG_N, N

_LEVEL_THRESH = 1120


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


class OpFlags(IntFlag):
    """Routing flags of one operator within an algorithm."""

    OUT_BUS_ONE = 1 << 0
    OUT_BUS_TWO = 1 << 1
    OUT_BUS_ADD = 1 << 2
    IN_BUS_ONE = 1 << 4
    IN_BUS_TWO = 1 << 5
    FB_IN = 1 << 6
    FB_OUT = 1 << 7


# One entry per algorithm, operators in processing order (op 6 first).
ALGORITHMS = (
    (0xC1, 0x11, 0x11, 0x14, 0x01, 0x14),  # 1
    (0x01, 0x11, 0x11, 0x14, 0xC1, 0x14),  # 2
    (0xC1, 0x11, 0x14, 0x01, 0x11, 0x14),  # 3
    (0x41, 0x11, 0x94, 0x01, 0x11, 0x14),  # 4
    (0xC1, 0x14, 0x01, 0x14, 0x01, 0x14),  # 5
    (0x41, 0x94, 0x01, 0x14, 0x01, 0x14),  # 6
    (0xC1, 0x11, 0x05, 0x14, 0x01, 0x14),  # 7
    (0x01, 0x11, 0xC5, 0x14, 0x01, 0x14),  # 8
    (0x01, 0x11, 0x05, 0x14, 0xC1, 0x14),  # 9
    (0x01, 0x05, 0x14, 0xC1, 0x11, 0x14),  # 10
    (0xC1, 0x05, 0x14, 0x01, 0x11, 0x14),  # 11
    (0x01, 0x05, 0x05, 0x14, 0xC1, 0x14),  # 12
    (0xC1, 0x05, 0x05, 0x14, 0x01, 0x14),  # 13
    (0xC1, 0x05, 0x11, 0x14, 0x01, 0x14),  # 14
    (0x01, 0x05, 0x11, 0x14, 0xC1, 0x14),  # 15
    (0xC1, 0x11, 0x02, 0x25, 0x05, 0x14),  # 16
    (0x01, 0x11, 0x02, 0x25, 0xC5, 0x14),  # 17
    (0x01, 0x11, 0x11, 0xC5, 0x05, 0x14),  # 18
    (0xC1, 0x14, 0x14, 0x01, 0x11, 0x14),  # 19
    (0x01, 0x05, 0x14, 0xC1, 0x14, 0x14),  # 20
    (0x01, 0x14, 0x14, 0xC1, 0x14, 0x14),  # 21
    (0xC1, 0x14, 0x14, 0x14, 0x01, 0x14),  # 22
    (0xC1, 0x14, 0x14, 0x01, 0x14, 0x04),  # 23
    (0xC1, 0x14, 0x14, 0x14, 0x04, 0x04),  # 24
    (0xC1, 0x14, 0x14, 0x04, 0x04, 0x04),  # 25
    (0xC1, 0x05, 0x14, 0x01, 0x14, 0x04),  # 26
    (0x01, 0x05, 0x14, 0xC1, 0x14, 0x04),  # 27
    (0x04, 0xC1, 0x11, 0x14, 0x01, 0x14),  # 28
    (0xC1, 0x14, 0x01, 0x14, 0x04, 0x04),  # 29
    (0x04, 0xC1, 0x11, 0x14, 0x04, 0x04),  # 30
    (0xC1, 0x14, 0x04, 0x04, 0x04, 0x04),  # 31
    (0xC4, 0x04, 0x04, 0x04, 0x04, 0x04),  # 32
)


@dataclass
class FmOpParams:
    """Per-operator parameters: gains at block start and end, Q24 freq and phase."""

    gain: list = field(default_factory=lambda: [0, 0])
    freq: int = 0
    phase: int = 0


def n_out(ops):
    """Count the operators of an algorithm that add to the output bus."""
    return sum(1 for flags in ops if (flags & 7) == OpFlags.OUT_BUS_ADD)


def _bus_name(flags, one, two):
    if flags & one:
        return "1"
    if flags & two:
        return "2"
    return "0"


def dump_algorithms():
    """Describe the routing of every algorithm, one line each."""
    lines = []
    for number, ops in enumerate(ALGORITHMS, start=1):
        parts = [f"{number}:"]
        for flags in ops:
            text = "[" if flags & OpFlags.FB_IN else ""
            text += _bus_name(flags, OpFlags.IN_BUS_ONE, OpFlags.IN_BUS_TWO) + "->"
            text += _bus_name(flags, OpFlags.OUT_BUS_ONE, OpFlags.OUT_BUS_TWO)
            if flags & OpFlags.OUT_BUS_ADD:
                text += "+"
            if flags & OpFlags.FB_OUT:
                text += "]"
            parts.append(text)
        parts.append(str(n_out(ops)))
        lines.append(" ".join(parts))
    return "\n".join(lines)


class FmCore:
    """Runs six operators for one block, with two scratch buses."""

    def __init__(self):
        self._buses = ([0] * N, [0] * N)

    def compute(self, output, params, algorithm, fb_state, feedback_shift):
        """Add one block of the algorithm's output to ``output`` in place.

        ``algorithm`` is zero-based. Operator phases in ``params`` advance
        by one block and ``fb_state`` carries the feedback operator's state.
        """
        if not 0 <= algorithm < len(ALGORITHMS):
            raise ValueError(f"algorithm must be in 0..{len(ALGORITHMS) - 1}: {algorithm}")
        if len(output) != N:
            raise ValueError(f"output must hold {N} samples, got {len(output)}")
        if len(params) != 6:
            raise ValueError(f"six operator parameters are needed, got {len(params)}")
        ops = ALGORITHMS[algorithm]
        has_contents = [True, False, False]
        for flags, param in zip(ops, params):
            add = bool(flags & OpFlags.OUT_BUS_ADD)
            inbus = (flags >> 4) & 3
            outbus = flags & 3
            target = output if outbus == 0 else self._buses[outbus - 1]
            gain1, gain2 = param.gain
            if gain1 >= _LEVEL_THRESH or gain2 >= _LEVEL_THRESH:
                if not has_contents[outbus]:
                    add = False
                add_to = target if add else None
                if inbus == 0 or not has_contents[inbus]:
                    if (flags & 0xC0) == 0xC0 and feedback_shift < 16:
                        result = fm_op_kernel.compute_fb(
                            param.phase, param.freq, gain1, gain2,
                            fb_state, feedback_shift, add_to,
                        )
                    else:
                        result = fm_op_kernel.compute_pure(
                            param.phase, param.freq, gain1, gain2, add_to
                        )
                else:
                    result = fm_op_kernel.compute(
                        self._buses[inbus - 1], param.phase, param.freq,
                        gain1, gain2, add_to,
                    )
                target[:] = result
                has_contents[outbus] = True
            elif not add:
                has_contents[outbus] = False
            param.phase = _to_int32(param.phase + (param.freq << LG_N))
        return output