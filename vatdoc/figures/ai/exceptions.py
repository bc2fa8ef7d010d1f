class AiExtractionError(Exception):
    """Raised when the AI provider returns nothing usable."""


class AiValidationError(AiExtractionError):
    """Raised when the AI response violates the figure schema."""


class AiNetworkError(AiExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
