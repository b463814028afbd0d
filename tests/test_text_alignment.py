"""Tests for transcript alignment and text scoring."""

from typing import List
from unittest.mock import MagicMock

import pytest

from hooklight.analysis_text import (
    StrongSentence,
    TextPeak,
    align_sentence,
    category_score,
    map_sentences_to_timestamps,
    score_sentences,
    score_text,
    word_overlap_ratio,
)
from hooklight.transcription.base import TranscriptResult, TranscriptSegment


def _segments() -> List[TranscriptSegment]:
    return [
        TranscriptSegment(start=0.0, end=5.0, text="hello there"),
        TranscriptSegment(start=5.0, end=10.0, text="the quick brown fox"),
        TranscriptSegment(start=10.0, end=14.0, text="nobody tells you this"),
    ]


class FakeClassifier:
    def __init__(self, sentences: List[StrongSentence]):
        self.sentences = sentences
        self.calls: List[str] = []

    def classify(self, full_text: str) -> List[StrongSentence]:
        self.calls.append(full_text)
        return list(self.sentences)


class TestWordOverlap:
    def test_partial_overlap(self):
        assert word_overlap_ratio("the quick brown fox jumps", "the quick brown fox") == pytest.approx(0.8)

    def test_substring_words_match_case_insensitively(self):
        assert word_overlap_ratio("the quick brown fox jumps", "The quick, brown fox!") == pytest.approx(0.8)

    def test_empty_inputs(self):
        assert word_overlap_ratio("", "anything") == 0.0
        assert word_overlap_ratio("anything", "   ") == 0.0


class TestAlignSentence:
    def test_exact_containment_sentence_contains_segment(self):
        seg = align_sentence("the quick brown fox jumps", _segments())
        assert (seg.start, seg.end) == (5.0, 10.0)

    def test_exact_containment_segment_contains_sentence(self):
        seg = align_sentence("nobody tells", _segments())
        assert (seg.start, seg.end) == (10.0, 14.0)

    def test_fuzzy_match_accepted_at_threshold(self):
        segments = [TranscriptSegment(start=3.0, end=8.0, text="The quick, brown fox!")]
        seg = align_sentence("the quick brown fox jumps", segments)
        assert seg is segments[0]

    def test_fuzzy_match_rejected_below_threshold(self):
        segments = [TranscriptSegment(start=3.0, end=8.0, text="the quick brown fox")]
        # Only "fox" matches: 1 of 5 words.
        assert align_sentence("fox sleeps all day long", segments) is None

    def test_exact_pass_beats_earlier_fuzzy_candidate(self):
        segments = [
            TranscriptSegment(start=0.0, end=4.0, text="The quick, brown fox!"),
            TranscriptSegment(start=20.0, end=25.0, text="the quick brown fox"),
        ]
        seg = align_sentence("the quick brown fox jumps", segments)
        assert seg.start == 20.0

    def test_first_exact_match_wins(self):
        segments = [
            TranscriptSegment(start=1.0, end=2.0, text="same words"),
            TranscriptSegment(start=7.0, end=9.0, text="same words"),
        ]
        assert align_sentence("same words", segments).start == 1.0

    def test_blank_segment_never_matches(self):
        segments = [
            TranscriptSegment(start=0.0, end=1.0, text="   "),
            TranscriptSegment(start=1.0, end=2.0, text="real content here"),
        ]
        seg = align_sentence("real content here", segments)
        assert seg.start == 1.0


def test_map_sentences_drops_unmatched():
    sentences = [
        StrongSentence(sentence="nobody tells you this", reason="Secret", category="Hook"),
        StrongSentence(sentence="completely unrelated words", reason="?", category="Insight"),
    ]
    mapped = map_sentences_to_timestamps(sentences, _segments())
    assert len(mapped) == 1
    assert mapped[0].start == 10.0
    assert mapped[0].end == 14.0
    assert mapped[0].is_aligned
    # Inputs are not modified.
    assert sentences[0].start is None


@pytest.mark.parametrize(
    "category,expected",
    [("Hook", 1.5), ("Punchline", 1.3), ("Question", 1.2), ("Insight", 1.1), ("Rant", 1.0), ("", 1.0)],
)
def test_category_score(category, expected):
    assert category_score(category) == expected


def test_score_sentences_builds_text_peaks():
    sentences = [
        StrongSentence(sentence="hello there", reason="Warm open", category="Question"),
        StrongSentence(sentence="nobody tells you this", reason="Secret", category="Mystery"),
    ]
    peaks = score_sentences(sentences, _segments())
    assert peaks == [
        TextPeak(start=0.0, end=5.0, reason="Warm open", category="Question", score=1.2),
        TextPeak(start=10.0, end=14.0, reason="Secret", category="Mystery", score=1.0),
    ]


class TestScoreText:
    def test_classifies_full_text(self):
        classifier = FakeClassifier([
            StrongSentence(sentence="the quick brown fox", reason="Vivid", category="Punchline"),
        ])
        transcript = TranscriptResult(segments=_segments())
        peaks = score_text(transcript, classifier)
        assert classifier.calls == ["hello there the quick brown fox nobody tells you this"]
        assert peaks == [TextPeak(start=5.0, end=10.0, reason="Vivid", category="Punchline", score=1.3)]

    def test_empty_transcript_skips_classifier(self):
        classifier = MagicMock()
        assert score_text(TranscriptResult(segments=[]), classifier) == []
        classifier.classify.assert_not_called()

    def test_blank_text_skips_classifier(self):
        classifier = MagicMock()
        transcript = TranscriptResult(segments=[TranscriptSegment(start=0.0, end=1.0, text="  ")])
        assert score_text(transcript, classifier) == []
        classifier.classify.assert_not_called()

    def test_classifier_returning_nothing(self):
        transcript = TranscriptResult(segments=_segments())
        assert score_text(transcript, FakeClassifier([])) == []


def test_strong_sentence_dict_uses_type_key():
    s = StrongSentence(sentence="x", reason="y", category="Hook", start=1.0, end=2.0)
    d = s.to_dict()
    assert d["type"] == "Hook"
    assert d["start_time"] == 1.0
    assert StrongSentence.from_dict(d) == s
    assert "start_time" not in StrongSentence(sentence="x", reason="y", category="Hook").to_dict()
