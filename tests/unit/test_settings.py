import pytest
from pydantic import ValidationError

from vatdoc.config.pipeline_config import DEFAULT_ALLOWED_EXTENSIONS, PipelineConfig
from vatdoc.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_max_file_size_is_ten_mib(self) -> None:
        s = Settings()
        assert s.max_file_size_bytes == 10 * 1024 * 1024

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_timeouts(self) -> None:
        s = Settings()
        assert s.pdf_timeout_seconds == 30
        assert s.ai_timeout_seconds == 45

    def test_default_max_pdf_pages(self) -> None:
        s = Settings()
        assert s.max_pdf_pages == 50

    def test_default_ai_provider(self) -> None:
        s = Settings()
        assert s.ai_provider == "openai"


class TestSettingsFromEnv:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AI_ENABLED", "false")
        monkeypatch.setenv("MAX_CONCURRENT_DOCUMENTS", "5")
        monkeypatch.setenv("PDF_ENGINE", "pymupdf")
        s = Settings()
        assert s.ai_enabled is False
        assert s.max_concurrent_documents == 5
        assert s.pdf_engine == "pymupdf"

    def test_invalid_int_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_PDF_PAGES", "many")
        with pytest.raises(ValidationError):
            Settings()


class TestPipelineConfigSnapshot:
    def test_defaults_match_settings(self) -> None:
        config = Settings().pipeline_config()
        assert config == PipelineConfig()
        assert config.allowed_extensions == DEFAULT_ALLOWED_EXTENSIONS

    def test_extensions_are_normalized(self) -> None:
        s = Settings(allowed_file_types=" PDF, .csv ,,png")
        assert s.pipeline_config().allowed_extensions == frozenset({"pdf", "csv", "png"})

    def test_concurrency_is_at_least_one(self) -> None:
        s = Settings(max_concurrent_documents=0)
        assert s.pipeline_config().max_concurrent_documents == 1

    def test_snapshot_is_immutable(self) -> None:
        config = Settings().pipeline_config()
        with pytest.raises(AttributeError):
            config.ai_enabled = False  # type: ignore[misc]
