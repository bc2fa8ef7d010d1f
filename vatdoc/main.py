import argparse
import json
import mimetypes
from pathlib import Path

from vatdoc.config.settings import Settings
from vatdoc.intake.models import RawDocument
from vatdoc.logging.logger import Log
from vatdoc.processor.coordinator import build_coordinator

mimetypes.add_type("text/csv", ".csv")
mimetypes.add_type("application/vnd.ms-excel", ".xls")
mimetypes.add_type(
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", ".xlsx"
)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vatdoc",
        description="Extract VAT figures from invoices, statements and spreadsheets.",
    )
    parser.add_argument(
        "--category",
        default="SALES",
        help="VAT category applied to every file: SALES or PURCHASES (default: SALES)",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Documents to process")
    return parser.parse_args(argv)


def load_document(path: Path, category: str) -> RawDocument:
    mime_type, _ = mimetypes.guess_type(path.name)
    return RawDocument(
        content=path.read_bytes(),
        file_name=path.name,
        declared_mime_type=mime_type or "application/octet-stream",
        category=category,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point: load settings -> read files -> run the batch -> print JSON."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    documents = [load_document(path, args.category) for path in args.files]
    coordinator = build_coordinator(settings)
    try:
        result = coordinator.run(documents)
    except KeyboardInterrupt:
        Log.info("Interrupted, no results written")
        raise SystemExit(130)
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
