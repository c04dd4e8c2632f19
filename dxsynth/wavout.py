"""Writer for 16-bit mono PCM WAV files from Q24 samples."""

import struct

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


class WavOut:
    """A WAV file of ``n_samples`` 16-bit mono samples, header written up front."""

    def __init__(self, filename, sample_rate, n_samples):
        rate = int(sample_rate)
        self._file = open(filename, "wb")
        self._file.write(
            _HEADER.pack(
                b"RIFF",
                36 + 2 * n_samples,
                b"WAVE",
                b"fmt ",
                16,
                1,  # audio format: PCM
                1,  # channels
                rate,
                2 * rate,
                2,  # block align
                16,  # bits per sample
                b"data",
                2 * n_samples,
            )
        )

    def write_data(self, buf):
        """Write Q24 samples as dithered, clipped 16-bit values."""
        delta = 0x100
        out = bytearray()
        for val in buf:
            if val < -(1 << 24):
                clip_val = 0x8000
            elif val >= (1 << 24):
                clip_val = 0x7FFF
            else:
                clip_val = (val + delta) >> 9
            delta = (delta + val) & 0x1FF
            out += (clip_val & 0xFFFF).to_bytes(2, "little")
        self._file.write(out)

    def close(self):
        """Close the file."""
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()