"""Shared patterns and guards for translatable-text detection."""

from __future__ import annotations

import re
from typing import Iterable, Pattern

CJK_CHAR = "[\u4e00-\u9fff]"
CJK_PATTERN = re.compile(CJK_CHAR)

_JS_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}


def contains_cjk(text: str) -> bool:
    """Return True when ``text`` holds at least one CJK unified ideograph."""
    return CJK_PATTERN.search(text) is not None


def unescape_js(raw: str) -> str:
    """Return the cooked value of a JS string body (quotes already stripped)."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token.startswith("u{"):
            return chr(int(token[2:-1], 16))
        if token[0] in "ux" and len(token) > 1:
            return chr(int(token[1:], 16))
        return _SIMPLE_ESCAPES.get(token, token)

    return _JS_ESCAPE.sub(_replace, raw)


def wrapped_call_pattern(function_names: Iterable[str]) -> Pattern[str]:
    """Match a translation call opened right before the current position.

    Applied to the text preceding a literal: ``$t(`` or ``i18n.t(`` at the
    end means the literal is already the key argument of a call.
    """
    names = sorted({name for name in function_names if name}, key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in names)
    return re.compile(rf"(?<![\w$])(?:{alternatives})\s*\(\s*$")


__all__ = [
    "CJK_CHAR",
    "CJK_PATTERN",
    "contains_cjk",
    "unescape_js",
    "wrapped_call_pattern",
]
