"""Batch orchestration: expand sources, run the pipeline, persist the dictionary."""

from __future__ import annotations

import glob
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Sequence

from .config import I18nifyConfig, default_config
from .dictionary import TranslationDictionary
from .errors import SourceNotFoundError
from .logging import get_file_logger, get_logger
from .models import BatchReport, FileOutcome
from .pipeline import DocumentPipeline

_GLOB_CHARS = frozenset("*?[")


class Orchestrator:
    """Runs one extraction batch over every file matched by a source argument."""

    def __init__(
        self,
        config: I18nifyConfig | None = None,
        pipeline: DocumentPipeline | None = None,
    ) -> None:
        self.config = config or default_config()
        self.pipeline = pipeline or DocumentPipeline(self.config)
        self.logger = get_logger("orchestrator")

    def run(
        self,
        source: str,
        *,
        output: Path | None = None,
        dry_run: bool = False,
    ) -> BatchReport:
        """Process ``source`` (file, directory or glob) and return a report.

        Files are rewritten as soon as their own pipeline finishes, and their
        keys join the dictionary only after that write. The dictionary is
        written once at the end; if a file fails after the dictionary loaded,
        the keys of the files completed before it are still written before
        the error propagates. The failing file contributes none.
        """
        output_path = (output or self.config.output).expanduser().resolve()
        paths = expand_sources(source, self.config.exclude_paths)
        self.logger.info("Found %d candidate files for %s", len(paths), source)

        dictionary = TranslationDictionary.load(output_path)
        report = BatchReport(output=output_path, dry_run=dry_run)
        try:
            for path in paths:
                if not self.pipeline.supports(path):
                    report.skipped.append(path)
                    continue
                report.outcomes.append(self._process(path, dictionary, dry_run=dry_run))
        finally:
            report.dictionary_size = len(dictionary)
            report.collisions = dictionary.collisions
            if not dry_run:
                dictionary.save(output_path)
                self.logger.info("Saved %d keys to %s", len(dictionary), output_path)
        return report

    def _process(self, path: Path, dictionary: TranslationDictionary, *, dry_run: bool) -> FileOutcome:
        log = get_file_logger("orchestrator", path)
        # Bytes in and out so CRLF line endings survive the round trip.
        content = path.read_bytes().decode("utf-8")
        staged = TranslationDictionary()
        outcome = self.pipeline.process(path, content, staged)
        if not outcome.changed:
            log.debug("no translatable text")
        elif dry_run:
            log.info("would extract %d texts", len(outcome.extracted))
        else:
            path.write_bytes(outcome.content.encode("utf-8"))
            log.info("extracted %d texts", len(outcome.extracted))
        dictionary.absorb(staged)
        return outcome


def expand_sources(source: str, exclude_paths: Sequence[str] = ()) -> List[Path]:
    """Return the sorted files named by ``source``.

    ``source`` may be a glob pattern (``**`` recurses), a directory, which is
    walked recursively, or a single file. Excluded paths are dropped from
    pattern and directory expansions.
    """
    if any(char in source for char in _GLOB_CHARS):
        pattern = str(Path(source).expanduser().resolve())
        matches = sorted(Path(match) for match in glob.glob(pattern, recursive=True))
        files = [path for path in matches if path.is_file() and not _is_excluded(path, exclude_paths)]
        if not files:
            get_logger("orchestrator").warning("Pattern %s matched no files", source)
        return files

    path = Path(source).expanduser().resolve()
    if path.is_dir():
        return sorted(
            candidate
            for candidate in path.rglob("*")
            if candidate.is_file()
            and not _is_excluded(candidate.relative_to(path), exclude_paths)
        )
    if path.is_file():
        return [path]
    raise SourceNotFoundError(f"Source path does not exist: {source}")


def _is_excluded(path: Path, patterns: Sequence[str]) -> bool:
    parts = path.parts
    rel = path.as_posix()
    for pattern in patterns:
        if not pattern:
            continue
        if pattern.endswith("/"):
            if pattern.rstrip("/") in parts:
                return True
        elif fnmatchcase(rel, pattern) or fnmatchcase(path.name, pattern):
            return True
    return False


__all__ = ["Orchestrator", "expand_sources"]
