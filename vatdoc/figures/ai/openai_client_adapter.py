import base64

import httpx
import openai

from vatdoc.extraction.models import ImagePayload
from vatdoc.figures.ai.client_base import BaseFigureClient
from vatdoc.figures.ai.exceptions import AiExtractionError, AiNetworkError

SCHEMA_NAME = "vat_figures"


class OpenAIClientAdapter(BaseFigureClient):
    """Figure client for any OpenAI-compatible chat completions endpoint.

    Retries are disabled: the caller owns the deadline and a retried request
    would only eat into it.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": _user_content(user_prompt, image)},
        ]
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format=_strict_schema(json_schema),
                messages=messages,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AiNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIStatusError as exc:
            raise AiNetworkError(f"AI provider API error (HTTP {exc.status_code}): {exc}") from exc
        except openai.APIError as exc:
            raise AiNetworkError(f"AI provider API error: {exc}") from exc

        return _reply_text(response)


def _strict_schema(json_schema: dict[str, object]) -> dict[str, object]:
    return {
        "type": "json_schema",
        "json_schema": {"name": SCHEMA_NAME, "strict": True, "schema": json_schema},
    }


def _user_content(
    user_prompt: str,
    image: ImagePayload | None,
) -> str | list[dict[str, object]]:
    if image is None:
        return user_prompt
    data_url = f"data:{image.mime_type};base64,{base64.b64encode(image.content).decode('ascii')}"
    return [
        {"type": "text", "text": user_prompt},
        {"type": "image_url", "image_url": {"url": data_url}},
    ]


def _reply_text(response: object) -> str:
    choices = getattr(response, "choices", None)
    if not choices:
        raise AiExtractionError("AI returned no choices")
    text = choices[0].message.content
    if text is None:
        raise AiExtractionError("AI returned empty response")
    return text
