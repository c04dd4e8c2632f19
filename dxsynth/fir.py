"""FIR filtering by direct convolution, plain and half-rate polyphase."""

from abc import ABC, abstractmethod

MAX_KERNEL_SIZE = 256


class FirFilter(ABC):
    """A filter that turns ``n + nk - 1`` input samples into ``n`` outputs."""

    @abstractmethod
    def process(self, inp, n):
        """Filter ``inp`` and return a list of ``n`` output samples."""


def _check_input(inp, n, nk):
    if n < 0:
        raise ValueError(f"sample count must not be negative: {n}")
    needed = n + nk - 1
    if len(inp) < needed:
        raise ValueError(f"input must hold at least {needed} samples, got {len(inp)}")


class SimpleFirFilter(FirFilter):
    """Direct-form convolution with a fixed kernel.

    Output ``i`` is ``sum(kernel[m] * inp[i + nk - 1 - m])``.
    """

    def __init__(self, kernel):
        kernel = [float(v) for v in kernel]
        if not kernel:
            raise ValueError("kernel must not be empty")
        self._k = kernel[::-1]

    @property
    def nk(self):
        """The number of taps."""
        return len(self._k)

    def process(self, inp, n):
        _check_input(inp, n, self.nk)
        k = self._k
        nk = len(k)
        return [
            sum(kj * x for kj, x in zip(k, inp[i:i + nk]))
            for i in range(n)
        ]


class HalfRateFirFilter(FirFilter):
    """The same convolution as :class:`SimpleFirFilter`, split into three
    half-length filters running at half the sample rate.

    ``kernel`` must have an even number of taps, at most 256; ``n`` is the
    largest block size that :meth:`process` accepts.
    """

    def __init__(self, kernel, n):
        kernel = [float(v) for v in kernel]
        nk = len(kernel)
        if nk == 0 or nk % 2:
            raise ValueError(f"kernel size must be even and non-zero: {nk}")
        if nk > MAX_KERNEL_SIZE:
            raise ValueError(f"kernel size must be at most {MAX_KERNEL_SIZE}: {nk}")
        if n < 0:
            raise ValueError(f"block size must not be negative: {n}")
        self._nk = nk
        self._max_n = n
        evens = kernel[0::2]
        odds = kernel[1::2]
        self._k2 = odds
        self._f0 = SimpleFirFilter(evens)
        self._f1 = SimpleFirFilter([b0 + b2 for b0, b2 in zip(evens, odds)])
        self._f2 = SimpleFirFilter(odds)

    def process(self, inp, n):
        if n % 2:
            raise ValueError(f"block size must be even: {n}")
        if n > self._max_n:
            raise ValueError(f"block size {n} exceeds the configured {self._max_n}")
        _check_input(inp, n, self._nk)
        n2 = n >> 1
        nk2 = self._nk >> 1
        n2in = n2 + nk2 - 1

        odd_in = [inp[i * 2 + 1] for i in range(n2in)]
        even_in = [inp[i * 2 + 2] for i in range(n2in)]
        sum_in = [a0 + a2 for a0, a2 in zip(odd_in, even_in)]
        i2 = [inp[0]] + even_in

        y0 = self._f0.process(odd_in, n2)
        y1 = self._f1.process(sum_in, n2)
        y2 = self._f2.process(even_in, n2)

        k2 = self._k2
        z2m2 = sum(k2[nk2 - 1 - i] * i2[i] for i in range(nk2))
        out = []
        for m0, m1, m2 in zip(y0, y1, y2):
            out.append(m0 + z2m2)
            out.append(m1 - m0 - m2)
            z2m2 = m2
        return out