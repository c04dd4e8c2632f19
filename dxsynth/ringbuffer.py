"""Single-producer, single-consumer byte ring buffer."""

import threading

BUF_SIZE = 65536
_MASK = BUF_SIZE - 1


class RingBuffer:
    """A fixed 64 KiB ring of bytes; one slot is always kept free."""

    def __init__(self):
        self._buf = bytearray(BUF_SIZE)
        self._rd = 0
        self._wr = 0
        self._cond = threading.Condition()

    def bytes_available(self):
        """Return the number of bytes available for reading."""
        with self._cond:
            return (self._wr - self._rd) & _MASK

    def write_bytes_available(self):
        """Return the number of bytes that can be written without blocking."""
        with self._cond:
            return (self._rd - self._wr - 1) & _MASK

    def read(self, size):
        """Read and return exactly ``size`` bytes.

        Raises ValueError if fewer than ``size`` bytes are available.
        """
        with self._cond:
            available = (self._wr - self._rd) & _MASK
            if size < 0 or size > available:
                raise ValueError(f"cannot read {size} bytes, {available} available")
            rd = self._rd
            fragment = min(size, BUF_SIZE - rd)
            data = bytes(self._buf[rd:rd + fragment]) + bytes(self._buf[:size - fragment])
            self._rd = (rd + size) & _MASK
            self._cond.notify_all()
            return data

    def write(self, data):
        """Write all of ``data``, blocking while the buffer is full."""
        view = memoryview(bytes(data))
        while view:
            with self._cond:
                self._cond.wait_for(lambda: ((self._rd - self._wr - 1) & _MASK) > 0)
                wr = self._wr
                space = (self._rd - wr - 1) & _MASK
                wr_size = min(len(view), space)
                fragment = min(wr_size, BUF_SIZE - wr)
                self._buf[wr:wr + fragment] = view[:fragment]
                if wr_size > fragment:
                    self._buf[:wr_size - fragment] = view[fragment:wr_size]
                self._wr = (wr + wr_size) & _MASK
                self._cond.notify_all()
            view = view[wr_size:]