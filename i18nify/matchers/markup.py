"""Regex cascade that rewrites CJK text in component templates.

Stages run in a fixed order, each over the string produced by the one
before it:

1. plain attributes            ``title="标题"``
2. bound template attributes   ``:title="`共${n}条`"``
3. binding / event literals    ``@click="notify('保存成功')"``
4. interpolation literals      ``{{ ok ? '是' : '否' }}``
5. mixed text                  ``共 {{ total }} 条``
6. plain text                  ``<div>你好</div>``

HTML comments are masked for the whole cascade and restored afterwards.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..models import Replacement, SpanKind, TextSpan
from ..rewriter import apply_replacements
from .base import ExtractionContext, MarkupStage
from .patterns import CJK_CHAR, contains_cjk, unescape_js

_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_COMMENT_TOKEN = re.compile(r"<!--@(\d+)-->")
_INTERPOLATION = re.compile(r"\{\{([\s\S]*?)\}\}")
_TEMPLATE_EXPRESSION = re.compile(r"\$\{([\s\S]*?)\}")

_SINGLE_QUOTED = r"'(?:[^'\\]|\\.)*'"
_DOUBLE_QUOTED = r'"(?:[^"\\]|\\.)*"'
_BACKTICK_QUOTED = r"`(?:[^`\\]|\\.)*`"
# Literals that may appear inside an attribute delimited by the given quote.
_LITERALS_INSIDE = {
    '"': re.compile(f"{_SINGLE_QUOTED}|{_BACKTICK_QUOTED}"),
    "'": re.compile(f"{_DOUBLE_QUOTED}|{_BACKTICK_QUOTED}"),
}
_INTERPOLATION_LITERALS = re.compile(f"{_SINGLE_QUOTED}|{_DOUBLE_QUOTED}")


def _inner_quote(outer: str) -> str:
    return "'" if outer == '"' else '"'


def _call(function: str, key: str, quote: str, arguments: Sequence[str] = ()) -> str:
    if not arguments:
        return f"{function}({quote}{key}{quote})"
    named = ", ".join(f"arg{index}: {expression}" for index, expression in enumerate(arguments))
    return f"{function}({quote}{key}{quote}, {{ {named} }})"


def _split_whitespace(body: str) -> Tuple[str, str, str]:
    stripped = body.strip()
    if not stripped:
        return body, "", ""
    start = body.index(stripped)
    return body[:start], stripped, body[start + len(stripped) :]


def _attribute_value(match: re.Match[str]) -> Tuple[str, str]:
    if match.group("dq") is not None:
        return '"', match.group("dq")
    return "'", match.group("sq")


def _in_open_tag(buffer: str, position: int) -> bool:
    """True when ``position`` sits inside a start tag and outside any attribute value."""
    start = buffer.rfind("<", 0, position)
    if start == -1:
        return False
    quote = None
    for char in buffer[start + 1 : position]:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return False
    return quote is None


class PlainAttributeStage(MarkupStage):
    """``title="标题"`` becomes ``:title="$t('key')"``."""

    name = "plain-attribute"
    kind = SpanKind.MARKUP_ATTRIBUTE
    pattern = re.compile(
        r"(?P<lead>\s)(?P<name>(?!v-)[A-Za-z_][\w.-]*)\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')"
    )

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        _, value = _attribute_value(match)
        text = value.strip()
        if not contains_cjk(text) or not _in_open_tag(match.string, match.start()):
            return None
        key = context.register(TextSpan(match.start("name"), match.end(), text, self.kind))
        call = _call(context.functions.template, key, "'")
        return f'{match.group("lead")}:{match.group("name")}="{call}"'


class TemplateAttributeStage(MarkupStage):
    """A bound attribute whose whole value is a template literal with CJK text."""

    name = "template-attribute"
    kind = SpanKind.MARKUP_ATTRIBUTE
    pattern = re.compile(
        r"(?P<lead>\s)(?P<name>(?::|v-bind:)[^\s=/>]+)\s*=\s*"
        r"(?P<quote>[\"'])\s*`(?P<body>[^`]*)`\s*(?P=quote)"
    )

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        body = match.group("body")
        statics = _TEMPLATE_EXPRESSION.split(body)[::2]
        if not contains_cjk("".join(statics)) or not _in_open_tag(match.string, match.start()):
            return None
        expressions: List[str] = []

        def _placeholder(found: re.Match[str]) -> str:
            expressions.append(found.group(1).strip())
            return f"{{arg{len(expressions) - 1}}}"

        text = unescape_js(_TEMPLATE_EXPRESSION.sub(_placeholder, body)).strip()
        key = context.register(TextSpan(match.start("body"), match.end("body"), text, self.kind))
        quote = match.group("quote")
        call = _call(context.functions.template, key, _inner_quote(quote), expressions)
        return f"{match.group('lead')}{match.group('name')}={quote}{call}{quote}"


class DirectiveLiteralStage(MarkupStage):
    """Quoted CJK literals inside ``:prop``/``v-bind`` and ``@event``/``v-on`` values."""

    name = "directive-literal"
    kind = SpanKind.MARKUP_ATTRIBUTE
    pattern = re.compile(
        r"(?P<lead>\s)(?P<name>(?::|@|v-bind:|v-on:)[^\s=/>]+)\s*=\s*"
        r"(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')"
    )

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        quote, value = _attribute_value(match)
        if not contains_cjk(value) or not _in_open_tag(match.string, match.start()):
            return None
        offset = match.start("dq") if quote == '"' else match.start("sq")
        replacements: List[Replacement] = []
        for literal in _LITERALS_INSIDE[quote].finditer(value):
            raw = literal.group(0)[1:-1]
            # Object and template fragments are left for a human.
            if "{" in raw or "}" in raw or not contains_cjk(raw):
                continue
            if context.is_wrapped(value, literal.start()):
                continue
            span = TextSpan(
                offset + literal.start(), offset + literal.end(), unescape_js(raw), self.kind
            )
            key = context.register(span)
            call = _call(context.functions.template, key, _inner_quote(quote))
            replacements.append(Replacement(literal.start(), literal.end(), call))
        if not replacements:
            return None
        rewritten = apply_replacements(value, replacements)
        return f"{match.group('lead')}{match.group('name')}={quote}{rewritten}{quote}"


class InterpolationLiteralStage(MarkupStage):
    """Quoted CJK literals inside ``{{ }}`` blocks, rewritten in place."""

    name = "interpolation-literal"
    kind = SpanKind.MARKUP_INTERPOLATION
    pattern = _INTERPOLATION

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        expression = match.group(1)
        if not contains_cjk(expression):
            return None
        offset = match.start(1)
        replacements: List[Replacement] = []
        for literal in _INTERPOLATION_LITERALS.finditer(expression):
            raw = literal.group(0)[1:-1]
            if not contains_cjk(raw) or context.is_wrapped(expression, literal.start()):
                continue
            span = TextSpan(
                offset + literal.start(), offset + literal.end(), unescape_js(raw), self.kind
            )
            key = context.register(span)
            quote = literal.group(0)[0]
            replacements.append(
                Replacement(literal.start(), literal.end(), _call(context.functions.template, key, quote))
            )
        if not replacements:
            return None
        return "{{" + apply_replacements(expression, replacements) + "}}"


class MixedContentStage(MarkupStage):
    """Text interleaved with interpolations collapses into one parameterised call."""

    name = "mixed-content"
    kind = SpanKind.MARKUP_BODY
    pattern = re.compile(r"(?:(?<=>)|^)(?P<body>[^<>]*\{\{[^<>]*)(?=<|$)")

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        lead, body, trail = _split_whitespace(match.group("body"))
        parts = _INTERPOLATION.split(body)
        statics, expressions = parts[::2], [part.strip() for part in parts[1::2]]
        if not expressions or not contains_cjk("".join(statics)):
            return None
        if "}}" in "".join(statics) or "{{" in "".join(statics):
            return None
        text = "".join(
            static + (f"{{arg{index}}}" if index < len(expressions) else "")
            for index, static in enumerate(statics)
        ).strip()
        key = context.register(TextSpan(match.start("body"), match.end("body"), text, self.kind))
        call = _call(context.functions.template, key, '"', expressions)
        return f"{lead}{{{{ {call} }}}}{trail}"


class TextStage(MarkupStage):
    """Whatever CJK text is still sitting between two tags becomes ``{{ $t("key") }}``."""

    name = "text"
    kind = SpanKind.MARKUP_BODY
    pattern = re.compile(rf"(?:(?<=>)|^)(?P<body>[^<>]*{CJK_CHAR}[^<>]*)(?=<|$)")

    def rewrite_match(self, match: re.Match[str], context: ExtractionContext) -> Optional[str]:
        body = match.group("body")
        if "{{" in body or "}}" in body or f"{context.functions.template}(" in body:
            return None
        lead, text, trail = _split_whitespace(body)
        key = context.register(TextSpan(match.start("body"), match.end("body"), text, self.kind))
        call = _call(context.functions.template, key, '"')
        return f"{lead}{{{{ {call} }}}}{trail}"


DEFAULT_STAGES: Tuple[MarkupStage, ...] = (
    PlainAttributeStage(),
    TemplateAttributeStage(),
    DirectiveLiteralStage(),
    InterpolationLiteralStage(),
    MixedContentStage(),
    TextStage(),
)


class MarkupMatcher:
    """Runs the stage cascade over a template with comments masked out."""

    def __init__(self, stages: Sequence[MarkupStage] | None = None) -> None:
        self.stages = tuple(stages) if stages is not None else DEFAULT_STAGES

    def rewrite(self, template: str, context: ExtractionContext) -> str:
        comments: List[str] = []

        def _mask(match: re.Match[str]) -> str:
            comments.append(match.group(0))
            return f"<!--@{len(comments) - 1}-->"

        buffer = _COMMENT.sub(_mask, template)
        for stage in self.stages:
            buffer = stage.apply(buffer, context)
        return _COMMENT_TOKEN.sub(lambda match: comments[int(match.group(1))], buffer)


__all__ = [
    "DEFAULT_STAGES",
    "DirectiveLiteralStage",
    "InterpolationLiteralStage",
    "MarkupMatcher",
    "MixedContentStage",
    "PlainAttributeStage",
    "TemplateAttributeStage",
    "TextStage",
]
