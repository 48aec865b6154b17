"""Focus cycling for multi-field screens."""
from __future__ import annotations


def _check(count: int) -> None:
    if count <= 0:
        raise ValueError(f"focus needs at least one field, got count={count}")


def advance(index: int, count: int) -> int:
    """Move focus to the next field, wrapping from the last to the first.

    Args:
        index: Currently focused field
        count: Number of fields on the screen

    Returns:
        Index of the newly focused field
    """
    _check(count)
    return (index + 1) % count


def retreat(index: int, count: int) -> int:
    """Move focus to the previous field, wrapping from the first to the last."""
    _check(count)
    return (index - 1 + count) % count
