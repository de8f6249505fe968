"""Extraction context and the contract for markup rewrite stages."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Pattern

from ..config import FunctionConfig, I18nifyConfig
from ..dictionary import TranslationDictionary
from ..keys import DEFAULT_HASH_LENGTH, generate_key
from ..logging import FileLogAdapter, get_file_logger
from ..models import ExtractedText, Replacement, SpanKind, TextSpan
from ..rewriter import apply_replacements
from .patterns import wrapped_call_pattern


@dataclass
class ExtractionContext:
    """Per-file state shared by every rule: key derivation and dictionary inserts."""

    path: Path
    dictionary: TranslationDictionary
    functions: FunctionConfig = field(default_factory=FunctionConfig)
    logging_calls: FrozenSet[str] = frozenset({"console.log"})
    hash_length: int = DEFAULT_HASH_LENGTH
    extracted: List[ExtractedText] = field(default_factory=list)
    log: FileLogAdapter = field(init=False, repr=False, compare=False)

    @classmethod
    def from_config(
        cls, path: Path, dictionary: TranslationDictionary, config: I18nifyConfig
    ) -> "ExtractionContext":
        return cls(
            path=path,
            dictionary=dictionary,
            functions=config.functions,
            logging_calls=frozenset(config.logging_calls),
            hash_length=config.hash_length,
        )

    def __post_init__(self) -> None:
        self._wrapped = wrapped_call_pattern((self.functions.template, self.functions.script))
        self.log = get_file_logger("matchers", self.path)

    def register(self, span: TextSpan) -> str:
        """Assign a key to ``span`` and record it in the dictionary."""
        key = generate_key(span.text, self.path, self.hash_length)
        self.dictionary.insert(key, span.text)
        self.extracted.append(ExtractedText(key=key, span=span))
        self.log.debug("%s %r -> %s", span.kind.value, span.text, key)
        return key

    def is_wrapped(self, buffer: str, position: int) -> bool:
        """Return True when the literal at ``position`` is already a translation call argument."""
        return self._wrapped.search(buffer, max(0, position - 64), position) is not None


class MarkupStage(ABC):
    """One pure string-to-string pass of the markup cascade.

    Each stage scans the output of the previous one, so offsets are always
    computed fresh against the buffer it receives.
    """

    name: str = "stage"
    kind: SpanKind = SpanKind.MARKUP_BODY
    pattern: Pattern[str] = re.compile(r"(?!)")

    def apply(self, buffer: str, context: ExtractionContext) -> str:
        replacements: List[Replacement] = []
        for match in self.pattern.finditer(buffer):
            rewritten = self.rewrite_match(match, context)
            if rewritten is not None and rewritten != match.group(0):
                replacements.append(Replacement(match.start(), match.end(), rewritten))
        if replacements:
            context.log.debug("%s rewrote %d spans", self.name, len(replacements))
        return apply_replacements(buffer, replacements)

    @abstractmethod
    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        """Return the replacement for ``match`` or None to leave it untouched."""


__all__ = ["ExtractionContext", "MarkupStage"]
