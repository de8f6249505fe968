"""Deterministic translation key derivation."""

from __future__ import annotations

import hashlib
from pathlib import Path

DEFAULT_HASH_LENGTH = 6
_INDEX_STEM = "index"


def key_prefix(file_path: Path | str) -> str:
    """Return the key prefix for ``file_path``.

    ``views/user/index.vue`` resolves to ``user`` because ``index`` says
    nothing about the component; any other file uses its own stem.
    """
    path = Path(file_path)
    stem = path.stem
    if stem == _INDEX_STEM:
        return path.parent.name
    return stem


def generate_key(text: str, file_path: Path | str, length: int = DEFAULT_HASH_LENGTH) -> str:
    """Return ``<prefix>_<hash>`` for ``text`` found in ``file_path``."""
    digest = hashlib.md5(text.encode("utf-8")).hexdigest()[:length]
    return f"{key_prefix(file_path)}_{digest}"


__all__ = ["DEFAULT_HASH_LENGTH", "generate_key", "key_prefix"]
