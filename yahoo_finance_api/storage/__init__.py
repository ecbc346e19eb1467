"""Export of result records to disk."""

from .export import dump_records, write_jsonl

__all__ = ["dump_records", "write_jsonl"]
