"""AI module for LLM-based sentence classification."""

from .llm_client import (
    LLMClient,
    LLMClientConfig,
    LLMClientError,
    LLMResponseError,
    LLMServerUnavailableError,
)
from .classifier import (
    ClassifierConfig,
    LLMSentenceClassifier,
    build_classification_prompt,
    parse_strong_sentences,
)

__all__ = [
    # LLM Client
    "LLMClient",
    "LLMClientConfig",
    "LLMClientError",
    "LLMResponseError",
    "LLMServerUnavailableError",
    # Classifier
    "ClassifierConfig",
    "LLMSentenceClassifier",
    "build_classification_prompt",
    "parse_strong_sentences",
]
