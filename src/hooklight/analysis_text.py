"""Text-side highlight scoring.

Strong sentences come from an external classifier as free text. They are
aligned back onto timestamped transcript segments (exact containment first,
then word-overlap fuzzy matching) and scored by category.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .transcription.base import TranscriptResult, TranscriptSegment

logger = logging.getLogger(__name__)

CATEGORIES = ("Hook", "Insight", "Question", "Punchline")

CATEGORY_SCORES: Dict[str, float] = {
    "Hook": 1.5,
    "Punchline": 1.3,
    "Question": 1.2,
    "Insight": 1.1,
}
DEFAULT_CATEGORY_SCORE = 1.0

FUZZY_MATCH_THRESHOLD = 0.7


@dataclass
class StrongSentence:
    """A sentence flagged by the classifier, optionally aligned to a segment."""
    sentence: str
    reason: str
    category: str
    start: Optional[float] = None
    end: Optional[float] = None

    @property
    def is_aligned(self) -> bool:
        return self.start is not None and self.end is not None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "sentence": self.sentence,
            "reason": self.reason,
            "type": self.category,
        }
        if self.is_aligned:
            d["start_time"] = self.start
            d["end_time"] = self.end
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StrongSentence":
        start = d.get("start_time")
        end = d.get("end_time")
        return cls(
            sentence=str(d.get("sentence", "")),
            reason=str(d.get("reason", "")),
            category=str(d.get("type", d.get("category", ""))),
            start=float(start) if start is not None else None,
            end=float(end) if end is not None else None,
        )


@dataclass(frozen=True)
class TextPeak:
    """An aligned, scored strong sentence."""
    start: float
    end: float
    reason: str
    category: str
    score: float


class SentenceClassifier(Protocol):
    def classify(self, full_text: str) -> List[StrongSentence]:
        """Return strong sentences found in `full_text` (empty on failure)."""
        ...


def category_score(category: str) -> float:
    return CATEGORY_SCORES.get(category, DEFAULT_CATEGORY_SCORE)


def _contains_match(sentence: str, segment_text: str) -> bool:
    seg = segment_text.strip()
    if not seg:
        return False
    return sentence in segment_text or seg in sentence


def word_overlap_ratio(sentence: str, segment_text: str) -> float:
    """Fraction of sentence words that match some segment word.

    Two words match when either one contains the other (case-insensitive).
    """
    sentence_words = sentence.lower().split()
    segment_words = segment_text.lower().split()
    if not sentence_words or not segment_words:
        return 0.0
    matched = sum(
        1 for word in sentence_words
        if any(seg_word in word or word in seg_word for seg_word in segment_words)
    )
    return matched / len(sentence_words)


def align_sentence(
    sentence: str,
    segments: Sequence[TranscriptSegment],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> Optional[TranscriptSegment]:
    """Find the transcript segment a classified sentence came from.

    Exact containment (either direction) wins over fuzzy matching; within each
    pass the first segment in transcript order wins.
    """
    for segment in segments:
        if _contains_match(sentence, segment.text):
            return segment

    for segment in segments:
        if word_overlap_ratio(sentence, segment.text) >= fuzzy_threshold:
            return segment

    return None


def map_sentences_to_timestamps(
    strong_sentences: Sequence[StrongSentence],
    segments: Sequence[TranscriptSegment],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> List[StrongSentence]:
    """Align sentences to segments; unmatched sentences are dropped."""
    aligned: List[StrongSentence] = []
    for s in strong_sentences:
        segment = align_sentence(s.sentence, segments, fuzzy_threshold=fuzzy_threshold)
        if segment is None:
            logger.debug(f"No transcript segment matches sentence: {s.sentence[:80]!r}")
            continue
        aligned.append(StrongSentence(
            sentence=s.sentence,
            reason=s.reason,
            category=s.category,
            start=segment.start,
            end=segment.end,
        ))
    return aligned


def score_sentences(
    strong_sentences: Sequence[StrongSentence],
    segments: Sequence[TranscriptSegment],
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> List[TextPeak]:
    """Align and score classified sentences."""
    mapped = map_sentences_to_timestamps(strong_sentences, segments, fuzzy_threshold=fuzzy_threshold)
    return [
        TextPeak(
            start=float(s.start),  # type: ignore[arg-type]
            end=float(s.end),  # type: ignore[arg-type]
            reason=s.reason,
            category=s.category,
            score=category_score(s.category),
        )
        for s in mapped
    ]


def score_text(
    transcript: TranscriptResult,
    classifier: SentenceClassifier,
    *,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> List[TextPeak]:
    """Classify the full transcript text and turn strong sentences into text peaks."""
    if not transcript.segments or not transcript.text.strip():
        return []

    strong = classifier.classify(transcript.text)
    peaks = score_sentences(strong, transcript.segments, fuzzy_threshold=fuzzy_threshold)
    logger.info(f"Aligned {len(peaks)}/{len(strong)} strong sentences to transcript segments")
    return peaks
