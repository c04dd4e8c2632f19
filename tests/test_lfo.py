import pytest

from dxsynth.lfo import Lfo, Waveform

FULL = 1 << 24


def make(rate=50, delay=0, sync=0, waveform=0):
    lfo = Lfo(44100)
    lfo.reset([rate, delay, 0, 0, sync, waveform])
    return lfo


@pytest.mark.parametrize("waveform", list(Waveform))
def test_samples_within_unit_range(waveform):
    lfo = make(rate=70, waveform=waveform)
    samples = [lfo.getsample() for _ in range(500)]
    assert all(0 <= s <= FULL for s in samples)


def test_square_takes_only_two_values():
    lfo = make(rate=80, waveform=Waveform.SQUARE)
    samples = {lfo.getsample() for _ in range(500)}
    assert samples == {0, FULL}


def test_saw_down_mirrors_saw_up():
    up = make(rate=60, waveform=Waveform.SAW_UP)
    down = make(rate=60, waveform=Waveform.SAW_DOWN)
    for _ in range(200):
        assert up.getsample() + down.getsample() == FULL - 1


def test_sample_and_hold_values_are_steps():
    lfo = make(rate=99, waveform=Waveform.SAMPLE_HOLD)
    samples = [lfo.getsample() for _ in range(300)]
    assert all(s % (1 << 16) == 0 for s in samples)
    assert len(set(samples)) > 1


def test_unknown_waveform_gives_midpoint():
    lfo = make(waveform=9)
    assert lfo.getsample() == 1 << 23


def test_sync_restarts_phase():
    a = make(rate=40, sync=1, waveform=Waveform.TRIANGLE)
    b = make(rate=40, sync=1, waveform=Waveform.TRIANGLE)
    for _ in range(37):
        a.getsample()
    a.keydown()
    b.keydown()
    assert [a.getsample() for _ in range(50)] == [b.getsample() for _ in range(50)]


def test_no_delay_reaches_full_quickly():
    lfo = make(delay=0)
    lfo.keydown()
    values = [lfo.getdelay() for _ in range(5)]
    assert values[-1] == FULL
    assert all(0 <= v <= FULL for v in values)


def test_delay_ramps_monotonically_to_full():
    lfo = make(delay=50)
    lfo.keydown()
    values = [lfo.getdelay() for _ in range(2000)]
    assert values[0] == 0
    assert all(x <= y for x, y in zip(values, values[1:]))
    assert values[-1] == FULL


def test_longer_delay_takes_longer():
    def onset(delay):
        lfo = make(delay=delay)
        lfo.keydown()
        return next(i for i in range(10000) if lfo.getdelay() > 0)

    assert onset(70) > onset(30)


def test_invalid_delay_rejected():
    lfo = Lfo(44100)
    with pytest.raises(ValueError):
        lfo.reset([50, 120, 0, 0, 0, 0])


def test_too_few_params_rejected():
    lfo = Lfo(44100)
    with pytest.raises(ValueError):
        lfo.reset([50, 0, 0])


def test_invalid_sample_rate_rejected():
    with pytest.raises(ValueError):
        Lfo(0)