"""Tree-sitter adapters producing source documents and script trees."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from .errors import ParseError
from .logging import get_file_logger
from .models import Region, SourceDocument

MARKUP_SUFFIXES = frozenset({".vue"})
SCRIPT_SUFFIXES = frozenset({".ts", ".js"})

_SCRIPT_LANGUAGES = {
    ".ts": "typescript",
    ".js": "javascript",
    "ts": "typescript",
    "js": "javascript",
}
_HTML_TEMPLATE_LANGS = {None, "", "html"}

_PARSERS: Dict[str, Parser] = {}


@dataclass
class ScriptSource:
    """Script text together with its parsed tree; offsets are UTF-8 byte offsets."""

    text: str
    data: bytes
    tree: Tree
    language: str

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8")


def _get_parser(language_key: str) -> Parser:
    parser = _PARSERS.get(language_key)
    if parser is None:
        parser = get_parser(language_key)
        _PARSERS[language_key] = parser
    return parser


def script_language(suffix_or_lang: Optional[str]) -> str:
    """Map a file suffix or ``<script lang>`` value to a grammar name."""
    if not suffix_or_lang:
        return "javascript"
    return _SCRIPT_LANGUAGES.get(suffix_or_lang.lower(), "javascript")


def parse_script(text: str, language: str, path: Path | str = "<script>") -> ScriptSource:
    """Parse ``text`` with the given grammar, raising :class:`ParseError` on syntax errors."""
    data = text.encode("utf-8")
    tree = _get_parser(language).parse(data)
    if tree.root_node.has_error:
        raise ParseError(path, f"invalid {language} syntax {_describe_error(tree.root_node)}")
    return ScriptSource(text=text, data=data, tree=tree, language=language)


def parse_document(path: Path, content: str) -> SourceDocument:
    """Split a Vue single-file component into its template and script regions."""
    data = content.encode("utf-8")
    tree = _get_parser("vue").parse(data)
    root = tree.root_node
    if root.has_error:
        # Block boundaries usually survive grammar errors inside a template.
        get_file_logger("parsing", path).warning(
            "component markup has syntax errors %s", _describe_error(root)
        )

    document = SourceDocument(path=path, content=content)
    scripts = []
    for child in root.children:
        if child.type == "template_element" and document.template is None:
            document.template = _region(child, data)
        elif child.type == "script_element":
            scripts.append(_region(child, data))

    # <script setup> is where the injected accessor can run, so it wins.
    setup = [region for region in scripts if region.setup]
    if setup:
        document.script = setup[0]
    elif scripts:
        document.script = scripts[0]
    document.skipped_scripts = [region for region in scripts if region is not document.script]
    return document


def is_html_template(region: Region) -> bool:
    return region.lang in _HTML_TEMPLATE_LANGS


def _region(element: Node, data: bytes) -> Region:
    start_tag = None
    end_tag = None
    for child in element.children:
        if child.type == "start_tag" and start_tag is None:
            start_tag = child
        elif child.type == "end_tag":
            end_tag = child
    start_byte = start_tag.end_byte if start_tag is not None else element.start_byte
    end_byte = end_tag.start_byte if end_tag is not None else element.end_byte
    start = _char_offset(data, start_byte)
    end = _char_offset(data, end_byte)
    return Region(
        content=data[start_byte:end_byte].decode("utf-8"),
        start=start,
        end=end,
        attributes=_attributes(start_tag, data) if start_tag is not None else {},
    )


def _attributes(start_tag: Node, data: bytes) -> Dict[str, Optional[str]]:
    attributes: Dict[str, Optional[str]] = {}
    for child in start_tag.children:
        if child.type != "attribute":
            continue
        name: Optional[str] = None
        value: Optional[str] = None
        for part in child.children:
            if part.type == "attribute_name":
                name = data[part.start_byte : part.end_byte].decode("utf-8")
            elif part.type == "attribute_value":
                value = data[part.start_byte : part.end_byte].decode("utf-8")
            elif part.type == "quoted_attribute_value":
                inner = [sub for sub in part.children if sub.type == "attribute_value"]
                value = (
                    data[inner[0].start_byte : inner[0].end_byte].decode("utf-8") if inner else ""
                )
        if name:
            attributes[name.lower()] = value
    return attributes


def _char_offset(data: bytes, byte_offset: int) -> int:
    return len(data[:byte_offset].decode("utf-8"))


def _describe_error(node: Node) -> str:
    error = _first_error(node)
    if error is None:
        return ""
    row, column = error.start_point
    return f"near line {row + 1}, column {column + 1}"


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


__all__ = [
    "MARKUP_SUFFIXES",
    "SCRIPT_SUFFIXES",
    "ScriptSource",
    "is_html_template",
    "parse_document",
    "parse_script",
    "script_language",
]
