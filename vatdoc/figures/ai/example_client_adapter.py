"""Offline figure client.

Returns a fixed response without touching the network. Used when
``ai_provider=example`` for local runs and integration tests.
"""

import json
from typing import ClassVar

from vatdoc.extraction.models import ImagePayload
from vatdoc.figures.ai.client_base import BaseFigureClient


class ExampleClientAdapter(BaseFigureClient):
    """Adapter that answers every request with the same canned figures."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "sales_vat": None,
        "purchase_vat": None,
        "total_amount": None,
        "line_items": [],
        "confidence": 0.0,
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE
        self.calls = 0

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        image: ImagePayload | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema, image
        self.calls += 1
        return json.dumps(self._response)
