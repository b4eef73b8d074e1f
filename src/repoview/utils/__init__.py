"""Shared utilities: logging, JSON Lines, SQLite helpers and content sniffing."""

from repoview.utils._jsonl import append_jsonl, read_jsonl
from repoview.utils._logging import LogFormatType, create_logger, create_null_logger
from repoview.utils._sniff import SNIFF_LENGTH, is_image, sniff_image_type
from repoview.utils._templates import get_environment, render_template

__all__ = [
    "SNIFF_LENGTH",
    "LogFormatType",
    "append_jsonl",
    "create_logger",
    "create_null_logger",
    "get_environment",
    "is_image",
    "read_jsonl",
    "render_template",
    "sniff_image_type",
]
