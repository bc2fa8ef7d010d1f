"""Size, extension, MIME and signature checks for submitted files."""

from pathlib import PurePath
from typing import ClassVar

from vatdoc.config.pipeline_config import PipelineConfig
from vatdoc.intake.models import RawDocument, ValidationResult
from vatdoc.processor.exceptions import FailureReason


class FileValidator:
    """Fail-closed allow-list check run before any extraction."""

    MIME_TYPES: ClassVar[dict[str, frozenset[str]]] = {
        "pdf": frozenset({"application/pdf"}),
        "csv": frozenset({"text/csv", "application/csv"}),
        "xlsx": frozenset(
            {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"}
        ),
        "xls": frozenset({"application/vnd.ms-excel"}),
        "jpg": frozenset({"image/jpeg"}),
        "jpeg": frozenset({"image/jpeg"}),
        "png": frozenset({"image/png"}),
    }

    SIGNATURES: ClassVar[dict[str, tuple[bytes, ...]]] = {
        "pdf": (b"%PDF",),
        "xlsx": (b"PK\x03\x04",),
        "xls": (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",),
        "jpg": (b"\xff\xd8\xff",),
        "jpeg": (b"\xff\xd8\xff",),
        "png": (b"\x89PNG\r\n\x1a\n",),
    }

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config

    def validate(self, document: RawDocument) -> ValidationResult:
        extension = self.extension_of(document.file_name)

        if document.size_bytes > self._config.max_file_size_bytes:
            limit_mib = self._config.max_file_size_bytes / 1024 / 1024
            return self._reject(
                extension,
                FailureReason.TOO_LARGE,
                f"File size exceeds maximum limit of {limit_mib:g}MB",
            )
        if document.size_bytes == 0:
            return self._reject(extension, FailureReason.INVALID_FORMAT, "File is empty")
        if not extension or extension not in self._config.allowed_extensions:
            allowed = ", ".join(sorted(self._config.allowed_extensions))
            return self._reject(
                extension,
                FailureReason.INVALID_FORMAT,
                f"File type '{extension}' is not allowed. Allowed types: {allowed}",
            )

        known_mime_types = self.MIME_TYPES.get(extension)
        if known_mime_types is None:
            return self._reject(
                extension,
                FailureReason.INVALID_FORMAT,
                f"File type '{extension}' is allowed but has no known MIME types",
            )
        mime_type = self._normalize_mime(document.declared_mime_type)
        if mime_type not in known_mime_types:
            return self._reject(
                extension,
                FailureReason.INVALID_FORMAT,
                f"Invalid MIME type '{mime_type}' for {extension} file",
            )

        signatures = self.SIGNATURES.get(extension)
        if signatures and not document.content.startswith(signatures):
            return self._reject(
                extension,
                FailureReason.INVALID_FORMAT,
                f"File content does not look like a {extension} file",
            )

        return ValidationResult(is_valid=True, detected_extension=extension)

    @staticmethod
    def extension_of(file_name: str) -> str:
        return PurePath(file_name).suffix.lower().lstrip(".")

    @staticmethod
    def _normalize_mime(mime_type: str) -> str:
        return mime_type.split(";", 1)[0].strip().lower()

    @staticmethod
    def _reject(extension: str, reason: FailureReason, message: str) -> ValidationResult:
        return ValidationResult(
            is_valid=False,
            detected_extension=extension,
            failure_reason=reason,
            message=message,
        )
