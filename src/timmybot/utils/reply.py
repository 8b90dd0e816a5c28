"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache

from timmybot.domain.shared.constants import LimitConstants


def pluralize(count: int, suffix: str = "s") -> str:
    return "" if count == 1 else suffix


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def fit_message(lines: list[str], max_length: int = LimitConstants.MAX_MESSAGE_LENGTH) -> str:
    """Join lines with newlines, dropping trailing lines that would exceed Discord's limit."""
    out: list[str] = []
    used = 0
    for line in lines:
        extra = len(line) + (1 if out else 0)
        if used + extra > max_length:
            break
        out.append(line)
        used += extra
    return "\n".join(out)
