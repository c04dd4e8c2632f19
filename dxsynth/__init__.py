"""Fixed-point FM synthesis building blocks: operators, envelopes, LFO, filters and WAV output."""

__version__ = "0.1.0"

__all__ = [
    "env",
    "exp2",
    "fir",
    "fm_core",
    "fm_op_kernel",
    "freqlut",
    "lfo",
    "module",
    "resofilter",
    "ringbuffer",
    "sawtooth",
    "sin",
    "wavout",
]