"""LLM-backed strong-sentence classification."""
from __future__ import annotations

import logging
import time as _time
from dataclasses import dataclass
from typing import Any, Dict, List

from ..analysis_text import CATEGORIES, StrongSentence
from .llm_client import LLMClient, LLMClientConfig, LLMClientError

logger = logging.getLogger(__name__)


STRONG_SENTENCES_PROMPT = """You are an expert podcast producer. Your task is to analyze the following podcast transcript and identify the most powerful and engaging sentences that would make great hooks or clips for social media reels.

Analyze the provided transcript and return a JSON object with a single key "strong_sentences" holding an array of objects. Each object represents a single "strong" sentence and must contain the following fields:
- "sentence": The exact sentence from the transcript.
- "reason": A brief explanation of why this sentence is powerful (e.g., "Intriguing question", "Controversial statement", "Actionable advice", "Emotional peak").
- "type": Classify the sentence into exactly one of these categories: {categories}.

The transcript is:
---
{transcript}
---

Return ONLY the JSON object, without any additional text or explanations."""


def build_classification_prompt(full_text: str) -> str:
    categories = ", ".join(f'"{c}"' for c in CATEGORIES)
    return STRONG_SENTENCES_PROMPT.format(categories=categories, transcript=full_text)


def parse_strong_sentences(parsed: Any) -> List[StrongSentence]:
    """Turn a parsed LLM reply into strong sentences.

    Accepts `{"strong_sentences": [...]}` or a bare list. Items without a
    sentence are dropped.
    """
    items: List[Any] = []
    if isinstance(parsed, list):
        items = parsed
    elif isinstance(parsed, dict):
        val = parsed.get("strong_sentences")
        if isinstance(val, list):
            items = val

    out: List[StrongSentence] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        sentence = str(item.get("sentence") or "").strip()
        if not sentence:
            continue
        category = str(item.get("type") or item.get("category") or "").strip()
        if category not in CATEGORIES:
            logger.debug(f"Classifier returned unknown category {category!r}")
        out.append(StrongSentence(
            sentence=sentence,
            reason=str(item.get("reason") or ""),
            category=category,
        ))
    return out


@dataclass(frozen=True)
class ClassifierConfig:
    enabled: bool = True
    llm: LLMClientConfig = LLMClientConfig()

    @classmethod
    def from_profile(cls, classifier_cfg: Dict[str, Any]) -> "ClassifierConfig":
        return cls(
            enabled=bool(classifier_cfg.get("enabled", True)),
            llm=LLMClientConfig.from_profile(classifier_cfg),
        )


class LLMSentenceClassifier:
    """Asks an LLM for strong sentences. Never raises on service failure."""

    def __init__(self, client: LLMClient):
        self.client = client

    @classmethod
    def from_config(cls, cfg: ClassifierConfig) -> "LLMSentenceClassifier":
        return cls(LLMClient(cfg.llm))

    def classify(self, full_text: str) -> List[StrongSentence]:
        if not full_text.strip():
            return []

        prompt = build_classification_prompt(full_text)
        try:
            logger.info(f"Requesting strong sentences ({len(prompt)} chars prompt)")
            start = _time.time()
            parsed = self.client.complete(prompt, json_mode=True)
            elapsed = _time.time() - start
        except LLMClientError as e:
            logger.warning(f"Text classification failed: {e}")
            return []

        sentences = parse_strong_sentences(parsed)
        if not sentences:
            logger.warning("Classifier reply held no usable strong sentences")
        else:
            logger.info(f"Classifier returned {len(sentences)} strong sentences in {elapsed:.1f}s")
        return sentences
