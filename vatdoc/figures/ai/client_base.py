from abc import ABC, abstractmethod

from vatdoc.extraction.models import ImagePayload


class BaseFigureClient(ABC):
    """Contract for provider-specific AI chat clients."""

    @abstractmethod
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
        """Return the provider's raw response text.

        Raises:
            AiNetworkError: on connection, timeout or API failures.
            AiExtractionError: when the provider returns no content.
        """
