"""Tests for the script literal visitor."""

from __future__ import annotations

import textwrap

from i18nify.keys import generate_key
from i18nify.matchers import ScriptMatcher
from i18nify.parsing import parse_script

PATH = "src/utils/file.ts"


def _rewrite(code: str, context, language: str = "typescript") -> str:
    source = parse_script(textwrap.dedent(code).lstrip("\n"), language)
    return ScriptMatcher().rewrite(source, context)


def _key(text: str) -> str:
    return generate_key(text, PATH)


def test_string_literal_becomes_translation_call(make_context, dictionary) -> None:
    result = _rewrite('const msg = "你好世界";\n', make_context(PATH))

    assert result == f'const msg = t("{_key("你好世界")}");\n'
    assert dictionary.as_dict() == {_key("你好世界"): "你好世界"}


def test_logging_call_is_left_untouched(make_context, dictionary) -> None:
    code = 'console.log("日志信息");\nconsole.log(`日志${count}`);\n'

    assert _rewrite(code, make_context(PATH)) == code
    assert len(dictionary) == 0


def test_literal_just_outside_logging_call_is_rewritten(make_context, dictionary) -> None:
    code = 'console.log(format("你好"));\nconsole.error("出错了");\n'

    result = _rewrite(code, make_context(PATH))

    assert result == (
        f'console.log(format(t("{_key("你好")}")));\n'
        f'console.error(t("{_key("出错了")}"));\n'
    )


def test_comments_are_never_extracted(make_context, dictionary) -> None:
    code = '// 这是注释\n/* 块注释 "引号" */\nconst a = 1;\n'

    assert _rewrite(code, make_context(PATH)) == code
    assert len(dictionary) == 0


def test_already_translated_literals_are_skipped(make_context, dictionary) -> None:
    code = 'const a = t("已翻译");\nconst b = i18n.global.t("也翻译了");\n'

    assert _rewrite(code, make_context(PATH)) == code
    assert len(dictionary) == 0


def test_property_keys_and_type_literals_are_skipped(make_context) -> None:
    code = """
    type Status = "启用" | "停用";
    const labels = { "名称": "标签" };
    """

    result = _rewrite(code, make_context(PATH))

    assert 'type Status = "启用" | "停用";' in result
    assert f'const labels = {{ "名称": t("{_key("标签")}") }};' in result


def test_exported_values_are_rewritten_but_module_sources_are_not(make_context, dictionary) -> None:
    code = """
    import Panel from "./面板.vue";
    export * from "./工具";
    export { helper } from "./助手";
    export default "默认";
    """

    result = _rewrite(code, make_context(PATH))

    assert result == (
        'import Panel from "./面板.vue";\n'
        'export * from "./工具";\n'
        'export { helper } from "./助手";\n'
        f'export default t("{_key("默认")}");\n'
    )
    assert dictionary.as_dict() == {_key("默认"): "默认"}


def test_template_literal_uses_named_arguments(make_context, dictionary) -> None:
    code = "const tip = `共${list.length}条，欢迎${user.name}，${format(date)}`;\n"

    result = _rewrite(code, make_context(PATH))

    text = "共{arg0}条，欢迎{arg1}，{arg2}"
    assert result == (
        f'const tip = t("{_key(text)}", {{ arg0: list.length, arg1: user.name, arg2: format(date) }});\n'
    )
    assert dictionary.get(_key(text)) == text


def test_template_literal_without_substitutions(make_context) -> None:
    result = _rewrite("const a = `你好`;\n", make_context(PATH), language="javascript")

    assert result == f'const a = t("{_key("你好")}");\n'


def test_template_without_static_cjk_still_visits_substitutions(make_context) -> None:
    result = _rewrite('const a = `${"你好"}!`;\n', make_context(PATH), language="javascript")

    assert result == f'const a = `${{t("{_key("你好")}")}}!`;\n'


def test_tagged_templates_are_skipped(make_context, dictionary) -> None:
    code = "const q = gql`查询`;\n"

    assert _rewrite(code, make_context(PATH), language="javascript") == code
    assert len(dictionary) == 0


def test_escape_sequences_are_cooked_for_keys(make_context, dictionary) -> None:
    _rewrite('const a = "第一行\\n第二行";\n', make_context(PATH))

    assert dictionary.get(_key("第一行\n第二行")) == "第一行\n第二行"


def test_script_rewrite_is_idempotent(make_context, dictionary) -> None:
    path = "src/utils/用户.ts"
    code = 'const a = "你好";\nconst b = `共${n}条`;\n'

    once = _rewrite(code, make_context(path))
    twice = _rewrite(once, make_context(path))

    assert once != code
    assert twice == once
