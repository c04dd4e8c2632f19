"""Base class for signal-processing blocks that run on fixed-size blocks."""

from abc import ABC, abstractmethod

LG_N = 6
N = 1 << LG_N


class Module(ABC):
    """A block processor that produces ``n`` samples per call."""

    lg_n = LG_N
    n = N

    @abstractmethod
    def process(self, inbufs, control_in, control_last):
        """Process one block of ``n`` samples and return the output buffers.

        ``control_last`` holds the control values at the start of the block
        and ``control_in`` those at its end.
        """