import math

import pytest

from dxsynth.freqlut import FreqLut

Q24 = 1 << 24


def test_full_rate_frequency_is_one_cycle_per_sample():
    lut = FreqLut(1 << 20)
    assert lut.lookup(20 << 24) == Q24


@pytest.mark.parametrize("freq", [27.5, 440.0, 1000.0, 8000.0])
def test_lookup_matches_frequency(freq):
    sample_rate = 44100.0
    lut = FreqLut(sample_rate)
    logfreq = round(math.log2(freq) * Q24)
    expected = freq / sample_rate * Q24
    assert abs(lut.lookup(logfreq) - expected) <= max(1.0, expected * 1e-4)


@pytest.mark.parametrize("logfreq", [5 << 24, (8 << 24) + 123457, (12 << 24) + 9999])
def test_octave_up_doubles_increment(logfreq):
    lut = FreqLut(48000.0)
    low = lut.lookup(logfreq)
    high = lut.lookup(logfreq + Q24)
    assert abs(high - 2 * low) <= 1


def test_lookup_is_monotonic():
    lut = FreqLut(44100.0)
    values = [lut.lookup(x) for x in range(4 << 24, 14 << 24, 333331)]
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_higher_sample_rate_gives_smaller_increment():
    logfreq = round(math.log2(440.0) * Q24)
    assert FreqLut(96000.0).lookup(logfreq) < FreqLut(44100.0).lookup(logfreq)


@pytest.mark.parametrize("sample_rate", [0, -44100.0])
def test_non_positive_sample_rate_raises(sample_rate):
    with pytest.raises(ValueError):
        FreqLut(sample_rate)


def test_logfreq_out_of_range_raises():
    lut = FreqLut(44100.0)
    with pytest.raises(ValueError):
        lut.lookup(21 << 24)