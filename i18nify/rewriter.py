"""Position-accurate, back-to-front application of text edits."""

from __future__ import annotations

from typing import Iterable, TypeVar

from .models import Replacement

_Buffer = TypeVar("_Buffer", str, bytes)


def apply_replacements(buffer: _Buffer, replacements: Iterable[Replacement]) -> _Buffer:
    """Apply edits located against ``buffer`` and return the rewritten buffer.

    Edits are applied in descending start order so that every offset still
    refers to untouched text when its turn comes. Ranges must not overlap.
    ``bytes`` buffers receive UTF-8 encoded replacement text.
    """
    ordered = sorted(replacements, key=lambda item: (item.start, item.end), reverse=True)
    result = buffer
    for edit in ordered:
        text = edit.text.encode("utf-8") if isinstance(result, bytes) else edit.text
        result = result[: edit.start] + text + result[edit.end :]  # type: ignore[operator]
    return result


__all__ = ["apply_replacements"]
