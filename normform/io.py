"""Reading assessment records from and writing results to JSONL files."""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def read_jsonl(
    path: Path | str,
    skipped: list[tuple[int, str]] | None = None,
) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield (line number, record) for each non-blank line.

    Args:
        path: Path to the JSONL file.
        skipped: When given, bad lines are appended here as
            (line number, reason) and skipped instead of raising.

    Raises:
        ValueError: On a line that is not a JSON object, unless `skipped`
            is given.
    """
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                reason = f"Invalid JSON on line {line_num}: {e}"
                if skipped is None:
                    raise ValueError(reason) from e
                skipped.append((line_num, reason))
                continue
            if not isinstance(record, dict):
                reason = f"Line {line_num} is not a JSON object"
                if skipped is None:
                    raise ValueError(reason)
                skipped.append((line_num, reason))
                continue
            yield line_num, record


def to_json_line(record: BaseModel | dict[str, Any]) -> str:
    """Serialize one record with sorted keys so output is byte-stable."""
    if isinstance(record, BaseModel):
        record = record.model_dump(mode="json")
    return json.dumps(record, ensure_ascii=False, sort_keys=True)


def write_jsonl(path: Path | str, records: Iterable[BaseModel | dict[str, Any]]) -> int:
    """Write records to a JSONL file.

    Returns:
        Number of records written.
    """
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(to_json_line(record) + "\n")
            count += 1
    return count
