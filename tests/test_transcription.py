"""Tests for transcript types and the HTTP transcription client."""

from unittest.mock import MagicMock

import pytest
import requests

from hooklight.transcription import (
    HttpTranscriber,
    Transcriber,
    TranscriberConfig,
    TranscriberError,
    TranscriptResult,
    TranscriptSegment,
)


def _response(status=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


SERVICE_PAYLOAD = {
    "text": "hello there. the quick brown fox",
    "language": "he",
    "segments": [
        {"id": 0, "start": 0.0, "end": 2.5, "text": "hello there.", "avg_logprob": -0.2},
        {"id": 1, "start": 2.5, "end": 6.0, "text": "the quick brown fox", "no_speech_prob": 0.01},
    ],
}


class TestTranscriptResult:
    def test_from_dict_keeps_extra_segment_fields(self):
        result = TranscriptResult.from_dict(SERVICE_PAYLOAD)
        assert len(result.segments) == 2
        assert result.segments[0].metadata == {"id": 0, "avg_logprob": -0.2}
        assert result.segments[1].metadata["no_speech_prob"] == 0.01
        assert result.language == "he"
        assert result.duration_seconds == 6.0

    def test_text_joined_from_segments_when_missing(self):
        result = TranscriptResult(segments=[
            TranscriptSegment(start=0, end=1, text=" one "),
            TranscriptSegment(start=1, end=2, text=""),
            TranscriptSegment(start=2, end=3, text="two"),
        ])
        assert result.text == "one two"

    def test_segment_to_dict_includes_metadata(self):
        seg = TranscriptSegment.from_dict(SERVICE_PAYLOAD["segments"][0])
        assert seg.to_dict() == SERVICE_PAYLOAD["segments"][0]


class TestHttpTranscriber:
    """Tests for HttpTranscriber with a mocked session."""

    def _transcriber(self, session, language="he"):
        cfg = TranscriberConfig(endpoint="https://stt.example.test/transcribe", language=language, timeout_s=30)
        return HttpTranscriber(cfg, session=session)

    def test_successful_transcription(self):
        session = MagicMock()
        session.post.return_value = _response(payload=SERVICE_PAYLOAD)

        result = self._transcriber(session).transcribe("https://cdn.example.test/a.mp3")

        assert [s.text for s in result.segments] == ["hello there.", "the quick brown fox"]
        args, kwargs = session.post.call_args
        assert args[0] == "https://stt.example.test/transcribe"
        assert kwargs["json"] == {"file_url": "https://cdn.example.test/a.mp3", "language": "he"}
        assert kwargs["timeout"] == 30

    def test_language_omitted_when_unset(self):
        session = MagicMock()
        session.post.return_value = _response(payload=SERVICE_PAYLOAD)
        self._transcriber(session, language=None).transcribe("u")
        assert session.post.call_args.kwargs["json"] == {"file_url": "u"}

    def test_error_payload(self):
        session = MagicMock()
        session.post.return_value = _response(status=200, payload={"error": "bad audio"})
        with pytest.raises(TranscriberError, match="bad audio"):
            self._transcriber(session).transcribe("u")

    def test_http_error_status(self):
        session = MagicMock()
        session.post.return_value = _response(status=502, text="bad gateway")
        with pytest.raises(TranscriberError, match="502"):
            self._transcriber(session).transcribe("u")

    def test_missing_segments(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"text": "hi"})
        with pytest.raises(TranscriberError):
            self._transcriber(session).transcribe("u")

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TranscriberError):
            self._transcriber(session).transcribe("u")

    def test_requires_endpoint(self):
        with pytest.raises(TranscriberError):
            HttpTranscriber(TranscriberConfig())

    def test_satisfies_protocol(self):
        assert isinstance(self._transcriber(MagicMock()), Transcriber)


def test_transcriber_config_from_profile():
    cfg = TranscriberConfig.from_profile({"endpoint": "http://x", "language": None})
    assert cfg.endpoint == "http://x"
    assert cfg.language is None
    assert cfg.timeout_s == 600.0
