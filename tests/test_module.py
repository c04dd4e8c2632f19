import pytest

from dxsynth.module import LG_N, N, Module


class _Gain(Module):
    def process(self, inbufs, control_in, control_last):
        return [[sample * control_in[0] for sample in inbufs[0][: self.n]]]


def test_module_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Module()


def test_subclass_without_process_is_abstract():
    incomplete = type("Incomplete", (Module,), {})
    assert issubclass(incomplete, Module)
    assert "process" in Module.__abstractmethods__
    assert "process" in incomplete.__abstractmethods__
    with pytest.raises(TypeError):
        Module()
    with pytest.raises(TypeError):
        incomplete()


def test_subclass_processes_one_block():
    assert Module.register(_Gain) is _Gain
    gain = _Gain()
    assert isinstance(gain, Module)
    assert gain.n == 1 << gain.lg_n
    assert (N, LG_N) == (gain.n, gain.lg_n)
    inp = list(range(2 * gain.n))
    (out,) = gain.process([inp], [3], [3])
    assert len(out) == N
    assert out == [3 * i for i in range(N)]