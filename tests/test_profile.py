"""Tests for YAML profile loading."""

import pytest

from hooklight.profile import default_profile, load_profile


def test_none_returns_defaults():
    assert load_profile(None) == default_profile()


def test_overrides_are_deep_merged(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "analysis:\n"
        "  highlights:\n"
        "    count: 3\n"
        "services:\n"
        "  transcription:\n"
        "    endpoint: https://stt.example.test/transcribe\n",
        encoding="utf-8",
    )
    profile = load_profile(path)
    assert profile["analysis"]["highlights"]["count"] == 3
    assert profile["analysis"]["highlights"]["threshold"] == 0.7
    assert profile["analysis"]["hook"]["duration_seconds"] == 15.0
    assert profile["services"]["transcription"]["endpoint"] == "https://stt.example.test/transcribe"
    assert profile["services"]["transcription"]["language"] == "he"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_profile(path) == default_profile()


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_profile(tmp_path / "nope.yaml")


def test_defaults_are_fresh_copies():
    a = default_profile()
    a["analysis"]["highlights"]["count"] = 99
    assert default_profile()["analysis"]["highlights"]["count"] == 5
