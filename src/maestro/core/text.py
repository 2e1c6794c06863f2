"""Text helpers."""
from __future__ import annotations

import textwrap


def realign(text: str) -> str:
    """Realign a multi-line string written inline in configuration.

    The first line often starts right after the opening quote while the
    following lines carry the indentation of the surrounding file. The common
    indentation of the continuation lines is removed and surrounding blank
    lines are dropped.

    Example:
        >>> realign("First line\\n      second\\n        third")
        'First line\\nsecond\\n  third'
    """
    lines = text.splitlines()
    if not lines:
        return ""
    head, rest = lines[0].strip(), "\n".join(lines[1:])
    body = textwrap.dedent(rest)
    out = "\n".join([head, body]) if rest else head
    return out.strip("\n")


__all__ = ["realign"]
