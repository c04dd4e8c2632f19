import pytest

from dxsynth.env import Env, scale_outlevel

FULL = 99 << 5


def _run(env, count):
    return [env.getsample() for _ in range(count)]


def _samples_to_settle(env, limit=100000):
    previous = env.getsample()
    for count in range(1, limit):
        current = env.getsample()
        if current == previous:
            return count
        previous = current
    raise AssertionError("envelope did not settle")


@pytest.mark.parametrize("outlevel, expected", [(0, 0), (5, 20), (19, 46)])
def test_scale_outlevel_table(outlevel, expected):
    assert scale_outlevel(outlevel) == expected


def test_scale_outlevel_is_linear_above_table():
    values = [scale_outlevel(n) for n in range(20, 100)]
    assert all(b - a == 1 for a, b in zip(values, values[1:]))
    assert scale_outlevel(20) > scale_outlevel(19)


def test_scale_outlevel_negative_raises():
    with pytest.raises(ValueError):
        scale_outlevel(-1)


def test_wrong_number_of_stages_raises():
    with pytest.raises(ValueError):
        Env([99, 99, 99], [99, 99, 99, 0], FULL, 0)


def test_attack_jumps_to_jump_target():
    env = Env([20, 99, 99, 99], [99, 99, 99, 0], FULL, 0)
    assert env.getsample() >= 1716 << 16


def test_attack_is_monotonic_then_sustains():
    env = Env([30, 99, 99, 99], [99, 99, 99, 0], FULL, 0)
    samples = _run(env, 3000)
    assert all(a <= b for a, b in zip(samples, samples[1:]))
    assert samples[-1] == samples[-2] == max(samples)


def test_release_falls_to_floor():
    env = Env([99, 99, 99, 99], [99, 99, 99, 0], FULL, 0)
    sustain = _run(env, 100)[-1]
    env.keydown(False)
    released = _run(env, 200)
    assert released[-1] == 16 << 16
    assert released[-1] < sustain
    assert all(a >= b for a, b in zip(released, released[1:]))


def test_sustain_is_linear_in_outlevel():
    low = _run(Env([99, 99, 99, 99], [99, 99, 99, 0], FULL, 0), 100)[-1]
    high = _run(Env([99, 99, 99, 99], [99, 99, 99, 0], FULL + 32, 0), 100)[-1]
    assert high - low == 32 << 16


def test_repeated_keydown_has_no_effect():
    plain = Env([40, 50, 60, 70], [99, 80, 70, 0], FULL, 0)
    pressed = Env([40, 50, 60, 70], [99, 80, 70, 0], FULL, 0)
    a = _run(plain, 50)
    b = []
    for _ in range(50):
        pressed.keydown(True)
        b.append(pressed.getsample())
    assert a == b


def test_setparam_level_matches_constructed_envelope():
    modified = Env([99, 99, 99, 99], [99, 99, 99, 0], FULL, 0)
    modified.setparam(7, 60)
    reference = Env([99, 99, 99, 99], [99, 99, 99, 60], FULL, 0)
    _run(modified, 100)
    _run(reference, 100)
    modified.keydown(False)
    reference.keydown(False)
    assert _run(modified, 300) == _run(reference, 300)


def test_setparam_unknown_param_is_ignored():
    modified = Env([50, 50, 50, 50], [99, 80, 70, 0], FULL, 0)
    modified.setparam(8, 0)
    modified.setparam(-1, 0)
    reference = Env([50, 50, 50, 50], [99, 80, 70, 0], FULL, 0)
    assert _run(modified, 500) == _run(reference, 500)


def test_faster_rate_settles_sooner():
    slow = _samples_to_settle(Env([40, 99, 99, 99], [99, 99, 99, 0], FULL, 0))
    fast = _samples_to_settle(Env([80, 99, 99, 99], [99, 99, 99, 0], FULL, 0))
    assert fast < slow


def test_rate_scaling_speeds_up_envelope():
    plain = _samples_to_settle(Env([40, 99, 99, 99], [99, 99, 99, 0], FULL, 0))
    scaled = _samples_to_settle(Env([40, 99, 99, 99], [99, 99, 99, 0], FULL, 8))
    assert scaled < plain