from dataclasses import dataclass, field

DEFAULT_ALLOWED_EXTENSIONS = frozenset({"pdf", "csv", "xlsx", "xls", "jpg", "jpeg", "png"})


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration snapshot handed to the pipeline at construction time."""

    max_file_size_bytes: int = 10 * 1024 * 1024
    allowed_extensions: frozenset[str] = field(default=DEFAULT_ALLOWED_EXTENSIONS)
    ai_enabled: bool = True
    pdf_timeout_seconds: float = 30
    ai_timeout_seconds: float = 45
    max_pdf_pages: int = 50
    max_concurrent_documents: int = 3
    document_timeout_seconds: float = 120
