"""Tests for core value types."""

import numpy as np
import pytest

from hooklight.models import AudioSignal, Candidate, InputError, TimeRange


class TestAudioSignal:
    def test_duration(self):
        signal = AudioSignal(samples=np.zeros(22050), sample_rate=44100)
        assert signal.duration_seconds == pytest.approx(0.5)
        assert len(signal) == 22050

    def test_samples_are_read_only_copy(self):
        source = np.ones(10)
        signal = AudioSignal(samples=source, sample_rate=10)
        with pytest.raises(ValueError):
            signal.samples[0] = 5.0
        source[0] = 3.0
        assert signal.samples[0] == 1.0
        assert source.flags.writeable

    @pytest.mark.parametrize("sr", [0, -8000])
    def test_rejects_bad_sample_rate(self, sr):
        with pytest.raises(InputError):
            AudioSignal(samples=np.zeros(10), sample_rate=sr)


class TestTimeRange:
    def test_touching_ranges_overlap(self):
        assert TimeRange(0, 30).overlaps(TimeRange(30, 35))
        assert TimeRange(30, 35).overlaps(TimeRange(0, 30))

    def test_disjoint_ranges(self):
        assert not TimeRange(0, 10).overlaps(TimeRange(10.5, 12))

    def test_contains_is_inclusive(self):
        r = TimeRange(5, 15)
        assert r.contains(5) and r.contains(15)
        assert not r.contains(15.01)


def test_candidate_to_dict_keys():
    c = Candidate(
        start=10.0,
        end=40.0,
        audio_energy=0.9,
        text_score=1.5,
        combined_score=1.35,
        reason="Bold claim",
        category="Hook",
    )
    d = c.to_dict()
    assert d["combined_score"] == 1.35
    assert d["category"] == "Hook"
    assert Candidate.from_dict(d) == c
    assert c.duration == 30.0


def test_input_error_is_value_error():
    assert issubclass(InputError, ValueError)
