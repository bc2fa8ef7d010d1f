"""AI-assisted VAT figure extraction."""

import json
from pathlib import Path

from vatdoc.extraction.models import ExtractedContent
from vatdoc.figures.ai.client_base import BaseFigureClient
from vatdoc.figures.ai.exceptions import AiExtractionError
from vatdoc.figures.ai.prompt_loader import load_json_schema, load_prompt_template
from vatdoc.figures.ai.validator import validate_and_build
from vatdoc.figures.models import CandidateSource, FigureCandidate
from vatdoc.logging.logger import Log
from vatdoc.runtime.deadline import DeadlineExceededError, run_with_deadline

DEFAULT_SYSTEM_PROMPT = (
    "You extract VAT figures from Irish business documents and answer only with JSON."
)


class AiFigureExtractor:
    """Asks an AI provider for VAT figures; failures become zero-confidence candidates."""

    def __init__(
        self,
        *,
        client: BaseFigureClient,
        model: str,
        temperature: float = 0.0,
        timeout_seconds: float = 45,
        max_input_chars: int = 20000,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._timeout_seconds = timeout_seconds
        self._max_input_chars = max_input_chars
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def extract(self, content: ExtractedContent, category: str) -> FigureCandidate:
        if not content.text.strip() and content.image is None:
            return self._unavailable("document has no text or image to analyse")
        try:
            candidate = run_with_deadline(
                lambda: self._request(content, category),
                self._timeout_seconds,
                name="ai-extract",
            )
        except DeadlineExceededError:
            return self._unavailable(f"request exceeded {self._timeout_seconds:g}s")
        except AiExtractionError as exc:
            return self._unavailable(str(exc))
        except Exception as exc:
            Log.exception(f"Unexpected AI extraction failure: {exc}")
            return self._unavailable(f"unexpected error: {exc}")

        Log.info(
            f"AI candidate: sales={candidate.sales_vat} purchase={candidate.purchase_vat} "
            f"confidence={candidate.confidence:.2f}"
        )
        return candidate

    def _request(self, content: ExtractedContent, category: str) -> FigureCandidate:
        prompt = self._build_prompt(content, category)
        Log.debug(f"AI figure prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
            image=content.image,
        )
        Log.debug(f"AI raw response:\n{raw_response}")
        return validate_and_build(self._parse_json(raw_response))

    def _build_prompt(self, content: ExtractedContent, category: str) -> str:
        if content.image is not None and not content.text:
            document_text = "(see the attached image)"
        else:
            document_text = content.text[: self._max_input_chars]
        return self._prompt_template.format(
            category=category or "UNKNOWN",
            json_schema=self._json_schema,
            document_text=document_text,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AiExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AiExtractionError("JSON response must be an object")
        return parsed

    @staticmethod
    def _unavailable(detail: str) -> FigureCandidate:
        Log.warning(f"AI extraction unavailable: {detail}")
        return FigureCandidate(
            source=CandidateSource.AI,
            confidence=0.0,
            warnings=(f"AiUnavailable: {detail}",),
        )
