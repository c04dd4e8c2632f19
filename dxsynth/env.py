"""DX7-style envelope generator in Q24 log-level format."""

from .module import LG_N

_LEVEL_LUT = (
    0, 5, 9, 13, 17, 20, 23, 25, 27, 29,
    31, 33, 35, 37, 39, 41, 42, 43, 45, 46,
)

_JUMP_TARGET = 1716


def _to_int32(value):
    return ((value + (1 << 31)) & 0xFFFFFFFF) - (1 << 31)


def scale_outlevel(outlevel):
    """Map a 0..99 DX7 output level to the internal 0..127 level scale."""
    if outlevel < 0:
        raise ValueError(f"output level must not be negative: {outlevel}")
    return 28 + outlevel if outlevel >= 20 else _LEVEL_LUT[outlevel]


class Env:
    """Four-stage envelope, sampled once per block.

    ``rates`` and ``levels`` hold DX7 parameter values (0..99), ``outlevel``
    is in microsteps (99 * 32 is nominal full scale) and ``rate_scaling`` is
    in qRate units (0..63). Samples are Q24 with ``1 << 24`` per doubling.
    """

    def __init__(self, rates, levels, outlevel, rate_scaling):
        rates = list(rates)
        levels = list(levels)
        if len(rates) != 4 or len(levels) != 4:
            raise ValueError("an envelope needs exactly four rates and four levels")
        self._rates = rates
        self._levels = levels
        self._outlevel = outlevel
        self._rate_scaling = rate_scaling
        self._level = 0
        self._targetlevel = 0
        self._rising = False
        self._ix = 0
        self._inc = 0
        self._down = True
        self._advance(0)

    def getsample(self):
        """Advance by one block and return the current level."""
        if self._ix < 3 or (self._ix < 4 and not self._down):
            if self._rising:
                if self._level < (_JUMP_TARGET << 16):
                    self._level = _JUMP_TARGET << 16
                step = (((17 << 24) - self._level) >> 24) * self._inc
                self._level = _to_int32(self._level + step)
                if self._level >= self._targetlevel:
                    self._level = self._targetlevel
                    self._advance(self._ix + 1)
            else:
                self._level = _to_int32(self._level - self._inc)
                if self._level <= self._targetlevel:
                    self._level = self._targetlevel
                    self._advance(self._ix + 1)
        return self._level

    def keydown(self, down):
        """Press or release the key; only a change of state has an effect."""
        if self._down != down:
            self._down = down
            self._advance(0 if down else 3)

    def setparam(self, param, value):
        """Set rate 0..3 (params 0..3) or level 0..3 (params 4..7); others are ignored."""
        if 0 <= param < 4:
            self._rates[param] = value
        elif 4 <= param < 8:
            self._levels[param - 4] = value

    def _advance(self, newix):
        self._ix = newix
        if self._ix >= 4:
            return
        actuallevel = scale_outlevel(self._levels[self._ix]) >> 1
        actuallevel = (actuallevel << 6) + self._outlevel - 4256
        actuallevel = max(actuallevel, 16)
        self._targetlevel = actuallevel << 16
        self._rising = self._targetlevel > self._level

        qrate = (self._rates[self._ix] * 41) >> 6
        qrate += self._rate_scaling
        qrate = min(qrate, 63)
        self._inc = (4 + (qrate & 3)) << (2 + LG_N + (qrate >> 2))