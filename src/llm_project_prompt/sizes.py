from __future__ import annotations

import math
import re

from llm_project_prompt.exceptions import InvalidSizeFormatError

SIZE_UNITS: dict[str, int] = {
    "b": 1,
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
}

_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([kmg]?b)$")

CHARS_PER_TOKEN = 4


def parse_size(text: str) -> int:
    """Convert a human readable size such as "1mb" or "500kb" into bytes.

    Units are binary multiples (1kb == 1024 bytes) and matched case-insensitively.
    Fractional byte counts are truncated.

    Args:
        text (str): the size string to parse

    Raises:
        InvalidSizeFormatError: if `text` is not `<number><unit>` or the budget is not positive

    Returns:
        int: the size in bytes
    """
    match = _SIZE_RE.match(text.lower())
    if not match:
        raise InvalidSizeFormatError(value=text)
    number, unit = match.groups()
    size = int(float(number) * SIZE_UNITS.get(unit, 1))
    if size <= 0:
        raise InvalidSizeFormatError(value=text)
    return size


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token every four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def format_kilobytes(size: int) -> str:
    return f"{size / 1024:.2f}"
