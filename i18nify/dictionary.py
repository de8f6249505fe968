"""Persistent key -> text dictionary built up across a batch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Tuple

from .errors import DictionaryError
from .logging import get_logger

_LOGGER = get_logger("dictionary")


class TranslationDictionary:
    """Mapping from translation key to source text, first writer wins."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: Dict[str, str] = {}
        self._collisions: List[Tuple[str, str, str]] = []
        if entries:
            self.merge(entries)

    @classmethod
    def load(cls, path: Path) -> "TranslationDictionary":
        """Read a dictionary from ``path``; a missing file yields an empty one."""
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise DictionaryError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise DictionaryError(f"{path} must contain a JSON object at the root")
        invalid = [key for key, value in data.items() if not isinstance(value, str)]
        if invalid:
            raise DictionaryError(f"{path} has non-string values for keys: {', '.join(sorted(invalid))}")
        _LOGGER.debug("Loaded %d existing entries from %s", len(data), path)
        return cls(data)

    def merge(self, existing: Mapping[str, str]) -> None:
        for key, text in existing.items():
            self.insert(key, text)

    def absorb(self, staged: "TranslationDictionary") -> None:
        """Commit entries staged for one file, keeping the collisions it saw."""
        self._collisions.extend(staged.collisions)
        self.merge(staged.as_dict())

    def insert(self, key: str, text: str) -> bool:
        """Record ``text`` under ``key``.

        Returns True when the key is new. Re-inserting the same pair is a
        no-op; a different text under a taken key is dropped and remembered
        as a collision instead of overwriting the first value.
        """
        current = self._entries.get(key)
        if current is None:
            self._entries[key] = text
            return True
        if current != text:
            self._collisions.append((key, current, text))
            _LOGGER.warning(
                "Key %s already maps to %r; keeping it and dropping %r", key, current, text
            )
        return False

    def serialize(self) -> str:
        return json.dumps(self._entries, ensure_ascii=False, indent=2, sort_keys=True) + "\n"

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.serialize(), encoding="utf-8")

    @property
    def collisions(self) -> List[Tuple[str, str, str]]:
        return list(self._collisions)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


__all__ = ["TranslationDictionary"]
