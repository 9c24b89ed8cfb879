"""Reading and writing record files.

Uploaded and downloaded payloads are both a JSON array of flat objects.
Beyond that shape no schema is enforced.
"""

import json
from pathlib import Path

import structlog

from src.features.translation.errors import RecordParseError
from src.features.translation.models import Directive, Record


logger = structlog.get_logger()

SEED_SUFFIX = "_translated"


def parse_records(text: str) -> list[Record]:
    """Parse uploaded text into records.

    Args:
        text: JSON text.

    Returns:
        List of records in input order.

    Raises:
        RecordParseError: If the text is not a JSON array of objects.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"
        raise RecordParseError(msg) from exc

    if not isinstance(data, list):
        msg = f"Expected a JSON array of records, got {type(data).__name__}"
        raise RecordParseError(msg)

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            msg = f"Record {index} is {type(item).__name__}, expected an object"
            raise RecordParseError(msg)

    return data


def load_records(path: Path) -> list[Record]:
    """Read and parse a record file.

    Raises:
        RecordParseError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise RecordParseError(msg) from exc

    records = parse_records(text)
    logger.debug("records_loaded", path=str(path), count=len(records))
    return records


def dump_records(records: list[Record]) -> str:
    """Serialize records to pretty-printed JSON."""
    return json.dumps(records, indent=2, ensure_ascii=False) + "\n"


def write_records(path: Path, records: list[Record]) -> None:
    """Write records to a file.

    Writes to a temporary file first, then renames to the final path, so
    readers never see a partial file.

    Args:
        path: Target file path.
        records: Records to write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")
    temp_path.write_text(dump_records(records), encoding="utf-8")
    temp_path.replace(path)
    logger.debug("records_written", path=str(path), count=len(records))


def seed_directives(
    records: list[Record], target_lang: str = "en", suffix: str = SEED_SUFFIX
) -> list[Directive]:
    """Build default directives from the first record's keys.

    Each key is written to ``<key><suffix>``; an empty suffix translates
    fields in place.

    Args:
        records: Parsed records.
        target_lang: Target language for every directive.
        suffix: Appended to each key to form the target key.

    Returns:
        One directive per key of the first record; empty for no records.
    """
    if not records:
        return []
    return [
        Directive(source_key=key, target_key=key + suffix, target_lang=target_lang)
        for key in records[0]
        if key
    ]
