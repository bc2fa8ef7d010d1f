import uuid
from dataclasses import dataclass, field

from vatdoc.processor.exceptions import FailureReason


@dataclass(frozen=True)
class RawDocument:
    """A submitted file as received from the upload collaborator."""

    content: bytes = field(repr=False)
    file_name: str
    declared_mime_type: str
    category: str
    document_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the file validation check."""

    is_valid: bool
    detected_extension: str = ""
    failure_reason: FailureReason | None = None
    message: str = ""
