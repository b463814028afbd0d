"""Tests for analysis_hook module."""

import numpy as np
import pytest

from hooklight.analysis_hook import HookConfig, find_hook, locate_hook
from hooklight.models import AudioSignal, InputError, TimeRange

SR = 100


class TestFindHook:
    """Tests for the sliding-window hook search."""

    def test_finds_loudest_span(self):
        samples = np.zeros(60 * SR)
        samples[30 * SR : 45 * SR] = 0.5
        assert find_hook(samples, SR, 15.0) == TimeRange(30.0, 45.0)

    def test_silent_signal_starts_at_zero(self):
        samples = np.zeros(60 * SR)
        assert find_hook(samples, SR, 15.0) == TimeRange(0.0, 15.0)

    def test_short_signal_clamped_to_duration(self):
        samples = np.full(10 * SR, 0.3)
        hook = find_hook(samples, SR, 15.0)
        assert hook.start == 0.0
        assert hook.end == pytest.approx(10.0)

    def test_earliest_window_wins_ties(self):
        samples = np.full(40 * SR, 0.2)
        assert find_hook(samples, SR, 15.0).start == 0.0

    def test_constant_signal_starts_at_zero_at_full_rate(self):
        """Equal windows at 44.1 kHz still resolve to the earliest one."""
        samples = np.full(180 * 44100, 0.2)
        assert find_hook(samples, 44100, 15.0) == TimeRange(0.0, 15.0)

    def test_identical_bursts_pick_the_first_at_full_rate(self):
        sr = 44100
        samples = np.zeros(300 * sr)
        samples[50 * sr : 65 * sr] = 0.3
        samples[200 * sr : 215 * sr] = 0.3
        assert find_hook(samples, sr, 15.0) == TimeRange(50.0, 65.0)

    def test_hook_inside_signal(self):
        rng = np.random.default_rng(5)
        samples = rng.uniform(-0.5, 0.5, size=90 * SR)
        hook = find_hook(samples, SR, 15.0)
        assert 0.0 <= hook.start <= hook.end <= 90.0
        assert hook.end - hook.start <= 15.0 + 1e-9

    def test_start_lands_on_step_grid(self):
        rng = np.random.default_rng(9)
        samples = rng.normal(scale=0.1, size=60 * SR)
        hook = find_hook(samples, SR, 15.0, step_s=0.25)
        assert (hook.start * 4) == pytest.approx(round(hook.start * 4))

    def test_deterministic(self):
        rng = np.random.default_rng(1)
        samples = rng.normal(size=30 * SR)
        assert find_hook(samples, SR, 5.0) == find_hook(samples, SR, 5.0)

    def test_invalid_sample_rate(self):
        with pytest.raises(InputError):
            find_hook(np.zeros(100), 0, 15.0)

    def test_invalid_duration(self):
        with pytest.raises(InputError):
            find_hook(np.zeros(100), SR, 0.0)


def test_locate_hook_uses_config():
    samples = np.zeros(40 * SR)
    samples[20 * SR : 25 * SR] = 0.8
    signal = AudioSignal(samples=samples, sample_rate=SR)
    hook = locate_hook(signal, HookConfig(duration_seconds=5.0, step_seconds=0.5))
    assert hook == TimeRange(20.0, 25.0)


def test_hook_config_from_profile():
    cfg = HookConfig.from_profile({"duration_seconds": 10})
    assert cfg.duration_seconds == 10.0
    assert cfg.step_seconds == 0.25
