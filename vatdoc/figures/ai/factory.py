from typing import ClassVar

from vatdoc.config.settings import Settings
from vatdoc.figures.ai.ai_extractor import AiFigureExtractor
from vatdoc.figures.ai.example_client_adapter import ExampleClientAdapter
from vatdoc.figures.ai.openai_client_adapter import OpenAIClientAdapter


class AiFigureExtractorFactory:
    """Creates the configured AI figure extractor, or None when AI is disabled."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> AiFigureExtractor | None:
        if not settings.ai_enabled:
            return None
        provider = settings.ai_provider.lower()
        if provider == "example":
            return AiFigureExtractor(
                client=ExampleClientAdapter(),
                model="example",
                timeout_seconds=settings.ai_timeout_seconds,
                max_input_chars=settings.ai_max_input_chars,
            )
        client = OpenAIClientAdapter(
            api_key=settings.ai_api_key,
            timeout_seconds=settings.ai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return AiFigureExtractor(
            client=client,
            model=settings.ai_model_name,
            temperature=settings.ai_temperature,
            timeout_seconds=settings.ai_timeout_seconds,
            max_input_chars=settings.ai_max_input_chars,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return settings.ai_base_url.strip() or None
        if provider == "openai_compatible":
            url = settings.ai_base_url.strip()
            if not url:
                raise ValueError("ai_base_url is required for ai_provider=openai_compatible")
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return settings.ai_base_url.strip() or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown AI provider '{provider}'. Choose from: {supported}")
