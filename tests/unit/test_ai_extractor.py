"""Tests for the AiFigureExtractor."""

import json
import threading
from decimal import Decimal
from unittest.mock import MagicMock, patch

from vatdoc.extraction.models import ExtractedContent, ImagePayload
from vatdoc.figures.ai.ai_extractor import AiFigureExtractor
from vatdoc.figures.ai.exceptions import AiNetworkError
from vatdoc.figures.models import CandidateSource


def _make_extractor(client: MagicMock | None = None, **kwargs: object) -> AiFigureExtractor:
    if client is None:
        client = MagicMock()
    return AiFigureExtractor(client=client, model="test-model", **kwargs)  # type: ignore[arg-type]


def _valid_json_response(**overrides: object) -> str:
    data: dict[str, object] = {
        "sales_vat": 23.0,
        "purchase_vat": None,
        "total_amount": 123.0,
        "line_items": [],
        "confidence": 0.9,
    }
    data.update(overrides)
    return json.dumps(data)


def _text(text: str = "VAT 23.00\nTotal 123.00") -> ExtractedContent:
    return ExtractedContent(kind="text", text=text)


class TestExtractSuccess:
    def test_returns_ai_candidate(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        candidate = _make_extractor(client).extract(_text(), "SALES")
        assert candidate.source is CandidateSource.AI
        assert candidate.sales_vat == Decimal("23.00")
        assert candidate.confidence == 0.9
        assert candidate.warnings == ()

    def test_strips_code_fences(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = (
            "```json\n" + _valid_json_response() + "\n```"
        )
        candidate = _make_extractor(client).extract(_text(), "SALES")
        assert candidate.sales_vat == Decimal("23.00")

    def test_prompt_carries_category_and_truncated_text(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        extractor = _make_extractor(client, max_input_chars=10)
        extractor.extract(_text("0123456789SECRET-TAIL"), "PURCHASES")

        kwargs = client.create_chat_completion.call_args.kwargs
        assert "PURCHASES" in kwargs["user_prompt"]
        assert "0123456789" in kwargs["user_prompt"]
        assert "SECRET-TAIL" not in kwargs["user_prompt"]
        assert kwargs["model"] == "test-model"
        assert kwargs["json_schema"]["type"] == "object"
        assert kwargs["image"] is None

    def test_temperature_is_clamped(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client, temperature=0.9).extract(_text(), "SALES")
        assert client.create_chat_completion.call_args.kwargs["temperature"] == 0.2

    def test_sends_image_payload(self, png_bytes: bytes) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        image = ImagePayload(png_bytes, "image/png")
        content = ExtractedContent(kind="text", image=image)
        candidate = _make_extractor(client).extract(content, "SALES")
        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["image"] is image
        assert "attached image" in kwargs["user_prompt"]
        assert candidate.sales_vat == Decimal("23.00")


class TestExtractFallbacks:
    def _assert_unavailable(self, candidate, fragment: str) -> None:  # type: ignore[no-untyped-def]
        assert candidate.source is CandidateSource.AI
        assert candidate.confidence == 0.0
        assert not candidate.has_figures
        assert candidate.warnings[0].startswith("AiUnavailable:")
        assert fragment in candidate.warnings[0]

    def test_invalid_json(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = "not json {{"
        with patch("vatdoc.figures.ai.ai_extractor.Log"):
            candidate = _make_extractor(client).extract(_text(), "SALES")
        self._assert_unavailable(candidate, "Invalid JSON")

    def test_non_object_json(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = "[1, 2]"
        with patch("vatdoc.figures.ai.ai_extractor.Log"):
            candidate = _make_extractor(client).extract(_text(), "SALES")
        self._assert_unavailable(candidate, "must be an object")

    def test_schema_violation(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response(confidence=7)
        with patch("vatdoc.figures.ai.ai_extractor.Log"):
            candidate = _make_extractor(client).extract(_text(), "SALES")
        self._assert_unavailable(candidate, "confidence")

    def test_network_error(self) -> None:
        client = MagicMock()
        client.create_chat_completion.side_effect = AiNetworkError("AI provider network error")
        with patch("vatdoc.figures.ai.ai_extractor.Log"):
            candidate = _make_extractor(client).extract(_text(), "SALES")
        self._assert_unavailable(candidate, "network error")

    def test_unexpected_error_is_logged_with_traceback(self) -> None:
        client = MagicMock()
        client.create_chat_completion.side_effect = KeyError("choices")
        with patch("vatdoc.figures.ai.ai_extractor.Log") as mock_log:
            candidate = _make_extractor(client).extract(_text(), "SALES")
        self._assert_unavailable(candidate, "unexpected error")
        mock_log.exception.assert_called_once()

    def test_timeout(self) -> None:
        release = threading.Event()
        client = MagicMock()
        client.create_chat_completion.side_effect = lambda **_: release.wait(5) and "{}"
        try:
            with patch("vatdoc.figures.ai.ai_extractor.Log"):
                candidate = _make_extractor(client, timeout_seconds=0.1).extract(_text(), "SALES")
        finally:
            release.set()
        self._assert_unavailable(candidate, "exceeded")

    def test_empty_content_skips_the_call(self) -> None:
        client = MagicMock()
        with patch("vatdoc.figures.ai.ai_extractor.Log"):
            candidate = _make_extractor(client).extract(_text("   "), "SALES")
        client.create_chat_completion.assert_not_called()
        self._assert_unavailable(candidate, "no text or image")
