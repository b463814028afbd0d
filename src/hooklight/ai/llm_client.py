"""HTTP client for an OpenAI-compatible chat-completions server.

Used for sentence classification. Requests JSON output and extracts JSON from
the reply even when the model wraps it in prose or a code fence.
"""
from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMClientConfig:
    """Configuration for LLM client."""
    endpoint: str = "http://127.0.0.1:11435"
    timeout_s: float = 60.0
    max_tokens: int = 2048
    temperature: float = 0.2
    model_name: str = "local-gguf"
    api_key: Optional[str] = None

    @classmethod
    def from_profile(cls, ai_cfg: Dict[str, Any]) -> "LLMClientConfig":
        return cls(
            endpoint=str(ai_cfg.get("endpoint", "http://127.0.0.1:11435")).rstrip("/"),
            timeout_s=float(ai_cfg.get("timeout_s", 60.0)),
            max_tokens=int(ai_cfg.get("max_tokens", 2048)),
            temperature=float(ai_cfg.get("temperature", 0.2)),
            model_name=str(ai_cfg.get("model_name", "local-gguf")),
            api_key=ai_cfg.get("api_key"),
        )


class LLMClientError(Exception):
    """Base exception for LLM client errors."""
    pass


class LLMServerUnavailableError(LLMClientError):
    """Raised when the LLM server is not reachable."""
    pass


class LLMResponseError(LLMClientError):
    """Raised when the LLM response is invalid."""
    pass


def extract_json_from_response(text: str) -> Any:
    """Extract JSON from LLM response text.

    Handles markdown code blocks and leading/trailing chatter. Supports both
    JSON objects and arrays.
    """
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    code_block_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if code_block_match:
        try:
            return json.loads(code_block_match.group(1).strip())
        except json.JSONDecodeError:
            pass

    # Outermost object first: a wrapper object usually contains an array.
    for pattern in (r"\{[\s\S]*\}", r"\[[\s\S]*\]"):
        match = re.search(pattern, text)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass

    raise LLMResponseError(f"Could not extract JSON from response: {text[:200]}...")


class LLMClient:
    """Minimal chat-completions client (stdlib HTTP)."""

    def __init__(self, cfg: LLMClientConfig):
        self.cfg = cfg

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.cfg.api_key:
            headers["Authorization"] = f"Bearer {self.cfg.api_key}"
        return headers

    def complete(
        self,
        prompt: str,
        *,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = True,
    ) -> Any:
        """Send a completion request to the LLM server.

        Returns:
            Parsed JSON (json_mode=True) or the raw reply text.

        Raises:
            LLMServerUnavailableError: If server is not reachable
            LLMResponseError: If response is invalid
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        body: Dict[str, Any] = {
            "model": self.cfg.model_name,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.cfg.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.cfg.max_tokens,
            "stream": False,
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        req = urllib.request.Request(
            f"{self.cfg.endpoint}/v1/chat/completions",
            data=json.dumps(body).encode("utf-8"),
            headers=self._headers(),
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.cfg.timeout_s) as resp:
                response_data = json.loads(resp.read().decode("utf-8"))
        except urllib.error.URLError as e:
            raise LLMServerUnavailableError(f"LLM server unavailable: {e}") from e
        except TimeoutError as e:
            raise LLMServerUnavailableError(f"LLM server timeout: {e}") from e
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"LLM server returned non-JSON body: {e}") from e

        try:
            content = response_data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMResponseError(f"Invalid response structure: {e}") from e

        logger.debug(f"LLM reply ({len(content or '')} chars)")
        if not json_mode:
            return content
        return extract_json_from_response(content or "")
