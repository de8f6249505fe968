"""Tree-sitter visitor that rewrites CJK string and template literals in scripts."""

from __future__ import annotations

from typing import Iterable, List, Optional

from tree_sitter import Node

from ..models import Replacement, SpanKind, TextSpan
from ..parsing import ScriptSource
from ..rewriter import apply_replacements
from .base import ExtractionContext
from .patterns import contains_cjk, unescape_js

# Parents whose string children are syntax, not user-facing text.
_STRUCTURAL_PARENTS = frozenset(
    {
        "import_statement",
        "import_require_clause",
        "literal_type",
        "jsx_attribute",
    }
)
_MEMBER_SEGMENTS = frozenset({"identifier", "this", "property_identifier"})


def _same_node(left: Optional[Node], right: Node) -> bool:
    return (
        left is not None
        and left.start_byte == right.start_byte
        and left.end_byte == right.end_byte
        and left.type == right.type
    )


class ScriptMatcher:
    """Collects replacements for one script buffer and applies them."""

    def find(self, source: ScriptSource, context: ExtractionContext) -> List[Replacement]:
        replacements: List[Replacement] = []
        for node in self._candidates(source.root, source):
            replacement = self._replacement(node, source, context)
            if replacement is not None:
                replacements.append(replacement)
        return replacements

    def rewrite(self, source: ScriptSource, context: ExtractionContext) -> str:
        replacements = self.find(source, context)
        if not replacements:
            return source.text
        return apply_replacements(source.data, replacements).decode("utf-8")

    def _candidates(self, node: Node, source: ScriptSource) -> Iterable[Node]:
        for child in node.children:
            if child.type == "comment":
                continue
            if child.type in {"string", "template_string"}:
                yield child
                if child.type == "string" or contains_cjk(self._static_text(child, source)):
                    # A rewritten template owns its substitutions.
                    continue
            yield from self._candidates(child, source)

    @staticmethod
    def _static_text(node: Node, source: ScriptSource) -> str:
        pieces: List[str] = []
        position = node.start_byte + 1
        for child in node.children:
            if child.type == "template_substitution":
                pieces.append(source.slice(position, child.start_byte))
                position = child.end_byte
        pieces.append(source.slice(position, node.end_byte - 1))
        return "".join(pieces)

    def _replacement(
        self, node: Node, source: ScriptSource, context: ExtractionContext
    ) -> Optional[Replacement]:
        if self._is_excluded(node, source, context):
            return None
        if node.type == "string":
            return self._string_replacement(node, source, context)
        return self._template_replacement(node, source, context)

    def _string_replacement(
        self, node: Node, source: ScriptSource, context: ExtractionContext
    ) -> Optional[Replacement]:
        value = unescape_js(source.slice(node.start_byte + 1, node.end_byte - 1))
        if not contains_cjk(value):
            return None
        key = context.register(
            TextSpan(node.start_byte, node.end_byte, value, SpanKind.SCRIPT_LITERAL)
        )
        return Replacement(node.start_byte, node.end_byte, f'{context.functions.script}("{key}")')

    def _template_replacement(
        self, node: Node, source: ScriptSource, context: ExtractionContext
    ) -> Optional[Replacement]:
        pieces: List[str] = []
        arguments: List[str] = []
        position = node.start_byte + 1
        for child in node.children:
            if child.type != "template_substitution":
                continue
            pieces.append(unescape_js(source.slice(position, child.start_byte)))
            expression = child.named_children[0] if child.named_children else None
            arguments.append(self._argument_source(expression, source) if expression else "undefined")
            pieces.append(f"{{arg{len(arguments) - 1}}}")
            position = child.end_byte
        pieces.append(unescape_js(source.slice(position, node.end_byte - 1)))
        static = [piece for index, piece in enumerate(pieces) if index % 2 == 0]
        if not contains_cjk("".join(static)):
            return None
        text = "".join(pieces)
        key = context.register(
            TextSpan(node.start_byte, node.end_byte, text, SpanKind.SCRIPT_TEMPLATE)
        )
        function = context.functions.script
        if not arguments:
            return Replacement(node.start_byte, node.end_byte, f'{function}("{key}")')
        named = ", ".join(f"arg{index}: {argument}" for index, argument in enumerate(arguments))
        return Replacement(node.start_byte, node.end_byte, f'{function}("{key}", {{ {named} }})')

    def _argument_source(self, node: Node, source: ScriptSource) -> str:
        if node.type == "identifier":
            return source.node_text(node)
        if node.type == "member_expression":
            path = self._member_path(node, source)
            if path is not None:
                return path
        # Calls, optional chains and anything else are re-sliced verbatim.
        return source.node_text(node)

    def _member_path(self, node: Node, source: ScriptSource) -> Optional[str]:
        if node.type in _MEMBER_SEGMENTS:
            return source.node_text(node)
        if node.type != "member_expression":
            return None
        if any(child.type == "optional_chain" for child in node.children):
            return None
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            return None
        head = self._member_path(obj, source)
        tail = self._member_path(prop, source)
        if head is None or tail is None:
            return None
        return f"{head}.{tail}"

    # ------------------------------------------------------------------
    # Exclusions

    def _is_excluded(self, node: Node, source: ScriptSource, context: ExtractionContext) -> bool:
        parent = node.parent
        if parent is None:
            return False
        if parent.type in _STRUCTURAL_PARENTS:
            return True
        if parent.type == "export_statement":
            # `export ... from "x"` sources only; exported values are text.
            return _same_node(parent.child_by_field_name("source"), node)
        if parent.type == "pair" and _same_node(parent.child_by_field_name("key"), node):
            return True
        if parent.type == "call_expression":
            # Tagged template: gql`...`, css`...`.
            return True
        if parent.type == "arguments":
            call = parent.parent
            if call is not None and call.type == "call_expression":
                callee = call.child_by_field_name("function")
                if callee is not None and self._is_logging_call(callee, source, context):
                    return True
                if callee is not None and self._is_translation_call(callee, source, context):
                    return _same_node(parent.named_children[0], node)
        return False

    @staticmethod
    def _is_logging_call(callee: Node, source: ScriptSource, context: ExtractionContext) -> bool:
        if callee.type != "member_expression":
            return False
        obj = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("property")
        if obj is None or prop is None or obj.type != "identifier":
            return False
        return f"{source.node_text(obj)}.{source.node_text(prop)}" in context.logging_calls

    @staticmethod
    def _is_translation_call(callee: Node, source: ScriptSource, context: ExtractionContext) -> bool:
        names = {context.functions.script, context.functions.template}
        if callee.type == "identifier":
            return source.node_text(callee) in names
        if callee.type == "member_expression":
            prop = callee.child_by_field_name("property")
            return prop is not None and source.node_text(prop) in names
        return False


__all__ = ["ScriptMatcher"]
