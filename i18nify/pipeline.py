"""Per-file extraction pipeline for components and plain scripts."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .config import I18nifyConfig, default_config
from .dictionary import TranslationDictionary
from .imports import inject_accessor_text
from .logging import FileLogAdapter, get_file_logger
from .matchers import ExtractionContext, MarkupMatcher, ScriptMatcher, contains_cjk
from .models import FileOutcome, Replacement, SourceDocument
from .parsing import (
    MARKUP_SUFFIXES,
    SCRIPT_SUFFIXES,
    is_html_template,
    parse_document,
    parse_script,
    script_language,
)
from .rewriter import apply_replacements


class DocumentPipeline:
    """Drives matchers, key generation and rewriting for one file at a time.

    A file moves through ``Loaded -> MarkupRewritten -> ScriptRewritten ->
    Committed``; components take every step, plain scripts skip the markup
    one. The returned outcome carries the final content, which equals the
    original when nothing qualified.
    """

    def __init__(
        self,
        config: I18nifyConfig | None = None,
        markup_matcher: MarkupMatcher | None = None,
        script_matcher: ScriptMatcher | None = None,
    ) -> None:
        self.config = config or default_config()
        self.markup_matcher = markup_matcher or MarkupMatcher()
        self.script_matcher = script_matcher or ScriptMatcher()

    @staticmethod
    def supports(path: Path) -> bool:
        suffix = path.suffix.lower()
        return suffix in MARKUP_SUFFIXES or suffix in SCRIPT_SUFFIXES

    def process(self, path: Path, content: str, dictionary: TranslationDictionary) -> FileOutcome:
        """Rewrite one file and add its keys to ``dictionary``.

        Keys are staged per file and only reach ``dictionary`` once every
        step succeeded, so a file that raises leaves it untouched.
        """
        staged = TranslationDictionary()
        context = ExtractionContext.from_config(path, staged, self.config)
        log = get_file_logger("pipeline", path)
        log.debug("loaded")
        if path.suffix.lower() in MARKUP_SUFFIXES:
            outcome = self._process_component(parse_document(path, content), context, log)
        else:
            outcome = self._process_script(path, content, context, log)
        outcome.extracted = list(context.extracted)
        dictionary.absorb(staged)
        if outcome.changed:
            log.debug("committed %d extracted texts", len(outcome.extracted))
        return outcome

    def _process_component(
        self, document: SourceDocument, context: ExtractionContext, log: FileLogAdapter
    ) -> FileOutcome:
        outcome = FileOutcome(path=document.path, original=document.content, content=document.content)
        region_edits: List[Replacement] = []

        template = document.template
        if template is not None and not is_html_template(template):
            log.info("skipping <template lang=%s>", template.lang)
        elif template is not None:
            rewritten = self.markup_matcher.rewrite(template.content, context)
            if rewritten != template.content:
                region_edits.append(Replacement(template.start, template.end, rewritten))
            log.debug("markup rewritten")

        script = document.script
        if script is not None:
            for skipped in document.skipped_scripts:
                if contains_cjk(skipped.content):
                    log.info(
                        "%s has CJK text but is left untouched; rewrites go to %s",
                        skipped.label,
                        script.label,
                    )
            language = script_language(script.lang)
            source = parse_script(script.content, language, document.path)
            replacements = self.script_matcher.find(source, context)
            if replacements:
                rewritten = apply_replacements(source.data, replacements).decode("utf-8")
                injected = inject_accessor_text(
                    rewritten, language, self.config.imports, self.config.functions
                )
                if injected is not None:
                    rewritten = injected
                    outcome.import_injected = True
                region_edits.append(Replacement(script.start, script.end, rewritten))
            log.debug("%s rewritten (%d edits)", script.label, len(replacements))

        outcome.content = apply_replacements(document.content, region_edits)
        return outcome

    def _process_script(
        self, path: Path, content: str, context: ExtractionContext, log: FileLogAdapter
    ) -> FileOutcome:
        source = parse_script(content, script_language(path.suffix), path)
        rewritten = self.script_matcher.rewrite(source, context)
        log.debug("script rewritten")
        return FileOutcome(path=path, original=content, content=rewritten)


def process_text(
    path: Path | str,
    content: str,
    dictionary: TranslationDictionary | None = None,
    config: I18nifyConfig | None = None,
) -> FileOutcome:
    """Run the pipeline over in-memory ``content`` as if it lived at ``path``."""
    if dictionary is None:
        dictionary = TranslationDictionary()
    return DocumentPipeline(config).process(Path(path), content, dictionary)


__all__ = ["DocumentPipeline", "process_text"]
