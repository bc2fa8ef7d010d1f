from pydantic_settings import BaseSettings, SettingsConfigDict

from vatdoc.config.pipeline_config import PipelineConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    max_file_size_bytes: int = 10 * 1024 * 1024
    allowed_file_types: str = "pdf,csv,xlsx,xls,jpg,jpeg,png"

    pdf_engine: str = "pdfplumber"
    pdf_timeout_seconds: float = 30
    max_pdf_pages: int = 50

    ai_enabled: bool = True
    ai_provider: str = "openai"
    ai_api_key: str = ""
    ai_model_name: str = "gpt-4o-mini"
    ai_base_url: str = ""
    ai_temperature: float = 0.0
    ai_timeout_seconds: float = 45
    ai_max_input_chars: int = 20000

    max_concurrent_documents: int = 3
    document_timeout_seconds: float = 120

    def pipeline_config(self) -> PipelineConfig:
        """Freeze the pipeline-relevant settings into an immutable snapshot."""
        extensions = frozenset(
            ext.strip().lower().lstrip(".")
            for ext in self.allowed_file_types.split(",")
            if ext.strip()
        )
        return PipelineConfig(
            max_file_size_bytes=self.max_file_size_bytes,
            allowed_extensions=extensions,
            ai_enabled=self.ai_enabled,
            pdf_timeout_seconds=self.pdf_timeout_seconds,
            ai_timeout_seconds=self.ai_timeout_seconds,
            max_pdf_pages=self.max_pdf_pages,
            max_concurrent_documents=max(1, self.max_concurrent_documents),
            document_timeout_seconds=self.document_timeout_seconds,
        )
