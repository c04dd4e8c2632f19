import struct
import wave

from dxsynth.wavout import WavOut


def test_header_is_readable_as_wav(tmp_path):
    path = tmp_path / "out.wav"
    with WavOut(str(path), 44100.0, 4) as w:
        w.write_data([0, 0, 0, 0])
    with wave.open(str(path), "rb") as r:
        assert r.getnchannels() == 1
        assert r.getsampwidth() == 2
        assert r.getframerate() == 44100
        assert r.getnframes() == 4


def test_header_chunk_tags(tmp_path):
    path = tmp_path / "out.wav"
    with WavOut(path, 48000, 2) as w:
        w.write_data([0, 0])
    data = path.read_bytes()
    assert data[0:4] == b"RIFF"
    assert data[8:12] == b"WAVE"
    assert data[12:16] == b"fmt "
    assert data[36:40] == b"data"
    assert len(data) == 44 + 2 * 2


def test_clipping(tmp_path):
    path = tmp_path / "out.wav"
    with WavOut(path, 44100, 3) as w:
        w.write_data([0, 1 << 24, -(1 << 24) - 1])
    samples = struct.unpack("<3h", path.read_bytes()[44:])
    assert samples == (0, 0x7FFF, -0x8000)


def test_exact_values_convert_without_dither_error(tmp_path):
    path = tmp_path / "out.wav"
    values = [1000 << 9] * 5 + [-(1000 << 9)] * 5
    with WavOut(path, 44100, len(values)) as w:
        w.write_data(values)
    samples = struct.unpack("<10h", path.read_bytes()[44:])
    assert samples == (1000,) * 5 + (-1000,) * 5


def test_multiple_writes_append(tmp_path):
    path = tmp_path / "out.wav"
    w = WavOut(path, 22050, 6)
    w.write_data([0] * 3)
    w.write_data([0] * 3)
    w.close()
    with wave.open(str(path), "rb") as r:
        assert r.readframes(6) == bytes(12)