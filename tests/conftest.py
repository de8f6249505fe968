from __future__ import annotations

from pathlib import Path

import pytest

from i18nify.dictionary import TranslationDictionary
from i18nify.matchers import ExtractionContext
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def dictionary() -> TranslationDictionary:
    return TranslationDictionary()


@pytest.fixture
def make_context(dictionary: TranslationDictionary):
    """Build an extraction context for a file path sharing the test dictionary."""

    def _factory(path: str = "src/views/greeting.vue") -> ExtractionContext:
        return ExtractionContext(path=Path(path), dictionary=dictionary)

    return _factory
