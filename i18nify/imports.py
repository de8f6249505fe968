"""Inject the translation accessor into component scripts that started using it."""

from __future__ import annotations

from typing import List, Optional, Tuple

from tree_sitter import Node

from .config import FunctionConfig, ImportConfig
from .parsing import ScriptSource, parse_script


def accessor_lines(imports: ImportConfig, functions: FunctionConfig) -> Tuple[str, str]:
    """Return the import line and the declaration line for the accessor."""
    return (
        f'import {{ {imports.accessor} }} from "{imports.source}";',
        f"const {{ {functions.script} }} = {imports.accessor}();",
    )


def missing_accessor_lines(
    script: str, imports: ImportConfig, functions: FunctionConfig
) -> List[str]:
    """Lines of the accessor snippet that ``script`` does not already contain.

    Detection is by literal substring only: aliased imports such as
    ``import { useI18n as use }`` or a multi-line ``import {\\n useI18n }``
    are not recognised and get a second import.
    """
    import_line, declaration_line = accessor_lines(imports, functions)
    missing: List[str] = []
    import_forms = (
        f"import {{ {imports.accessor} }}",
        f"import {{{imports.accessor}}}",
    )
    if not any(form in script for form in import_forms):
        missing.append(import_line)
    declaration_forms = (
        f"const {{ {functions.script} }} = {imports.accessor}()",
        f"const {{{functions.script}}} = {imports.accessor}()",
    )
    if not any(form in script for form in declaration_forms):
        missing.append(declaration_line)
    return missing


def inject_accessor(
    source: ScriptSource, imports: ImportConfig, functions: FunctionConfig
) -> Optional[str]:
    """Return ``source`` with the accessor inserted, or None when nothing is missing.

    The snippet goes right after the last top-level import statement, or at
    the top of the script (after any leading blank lines) when there is none.
    """
    missing = missing_accessor_lines(source.text, imports, functions)
    if not missing:
        return None
    snippet = "\n".join(missing)
    last_import = _last_import(source.root)
    if last_import is not None:
        position = last_import.end_byte
        data = source.data[:position] + ("\n" + snippet).encode("utf-8") + source.data[position:]
        return data.decode("utf-8")
    text = source.text
    stripped = text.lstrip("\r\n")
    leading = text[: len(text) - len(stripped)]
    return f"{leading}{snippet}\n{stripped}"


def inject_accessor_text(
    script: str, language: str, imports: ImportConfig, functions: FunctionConfig
) -> Optional[str]:
    """Parse ``script`` and inject the accessor; see :func:`inject_accessor`."""
    return inject_accessor(parse_script(script, language), imports, functions)


def _last_import(root: Node) -> Optional[Node]:
    last: Optional[Node] = None
    for child in root.children:
        if child.type == "import_statement":
            last = child
    return last


__all__ = [
    "accessor_lines",
    "inject_accessor",
    "inject_accessor_text",
    "missing_accessor_lines",
]
