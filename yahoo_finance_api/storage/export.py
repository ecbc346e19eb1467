"""JSONL export of result records."""

import logging
from collections.abc import Iterable
from pathlib import Path

import orjson
from pydantic import BaseModel


logger = logging.getLogger(__name__)


def dump_records(records: Iterable[BaseModel], *, indent: bool = False) -> bytes:
    """Serialize records to a JSON array."""
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps([record.model_dump(mode="json") for record in records], option=option)


def write_jsonl(records: Iterable[BaseModel], path: Path | str) -> int:
    """Write records to a JSONL file, one record per line.

    Returns:
        Number of records written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "wb") as f:
        for record in records:
            f.write(orjson.dumps(
                record.model_dump(mode="json", exclude_none=True),
                option=orjson.OPT_APPEND_NEWLINE,
            ))
            count += 1

    logger.info(f"Wrote {count} records to {path}")
    return count
