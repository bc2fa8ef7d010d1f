from pathlib import Path

from vatdoc.figures.ai.exceptions import AiExtractionError

PROMPT_DIR = Path(__file__).parent / "prompts"
PROMPT_FILE = "figure_prompt.txt"
SCHEMA_FILE = "figure_schema.json"


def load_prompt_template(path: Path | None = None) -> str:
    """Return the figure prompt; placeholders are category, json_schema and document_text."""
    return _read(path or PROMPT_DIR / PROMPT_FILE, "prompt template")


def load_json_schema(path: Path | None = None) -> str:
    """Return the raw JSON schema the AI response must follow."""
    return _read(path or PROMPT_DIR / SCHEMA_FILE, "JSON schema")


def _read(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AiExtractionError(f"Failed to load {label} from {path}: {exc}") from exc
