from __future__ import annotations

import logging
from pathlib import Path

from i18nify.dictionary import TranslationDictionary
from i18nify.logging import configure_logging, display_path, get_file_logger
from i18nify.matchers import ExtractionContext
from i18nify.models import SpanKind, TextSpan


def test_file_logger_prefixes_messages(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("i18nify"), "propagate", True)
    caplog.set_level(logging.DEBUG, logger="i18nify")

    get_file_logger("pipeline", Path("src/views/user/index.vue")).info("extracted %d texts", 3)

    record = caplog.records[-1]
    assert record.name == "i18nify.pipeline"
    assert record.getMessage() == "src/views/user/index.vue: extracted 3 texts"


def test_extraction_context_logs_each_key(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("i18nify"), "propagate", True)
    caplog.set_level(logging.DEBUG, logger="i18nify")
    context = ExtractionContext(path=Path("src/greeting.vue"), dictionary=TranslationDictionary())

    key = context.register(TextSpan(0, 2, "你好", SpanKind.MARKUP_BODY))

    assert f"src/greeting.vue: markup-body '你好' -> {key}" in [
        record.getMessage() for record in caplog.records
    ]


def test_display_path_is_relative_to_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert display_path(Path.cwd() / "src" / "a.vue") == "src/a.vue"
    assert display_path("src/b.ts") == "src/b.ts"
    assert display_path(Path("/elsewhere/c.ts")) == str(Path("/elsewhere/c.ts"))


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "i18nify.log"

    configure_logging(verbose=False)
    logger = configure_logging(verbose=True, log_file=log_file)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
