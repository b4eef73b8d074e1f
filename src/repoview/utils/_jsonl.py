"""JSON Lines files used by the notification sinks."""

from pathlib import Path
from typing import Any

import orjson


def append_jsonl(path: Path, entry: dict[str, Any]) -> None:  # pyright: ignore[reportExplicitAny]
    """Append entry to path as one compact JSON line.

    The parent directory is created on first use. Each line goes out in a
    single write, so concurrent appenders do not interleave within a line.

    Raises:
        TypeError: If entry is not JSON serializable.
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    line = orjson.dumps(entry, option=orjson.OPT_APPEND_NEWLINE)
    with path.open("ab") as f:
        _ = f.write(line)


def read_jsonl(path: Path) -> list[dict[str, Any]]:  # pyright: ignore[reportExplicitAny]
    """Read every JSON object from a JSONL file, skipping blank lines.

    Returns an empty list when the file does not exist.
    """
    if not path.exists():
        return []
    return [orjson.loads(line) for line in path.read_bytes().splitlines() if line.strip()]
