"""Tests for batch orchestration and dictionary persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from i18nify.config import default_config
from i18nify.errors import ParseError, SourceNotFoundError
from i18nify.keys import generate_key
from i18nify.orchestrator import Orchestrator, expand_sources


def _orchestrator(root: Path) -> Orchestrator:
    return Orchestrator(default_config(root))


def _output(builder) -> Path:
    return builder.path().parent / "translations.json"


def test_run_rewrites_sources_and_saves_dictionary(project_builder) -> None:
    project_builder.write(
        {
            "src/greeting.vue": "<template>\n  <div>你好</div>\n</template>\n",
            "src/utils/format.ts": 'export const unit = "元";\n',
        }
    )
    output = _output(project_builder)

    report = _orchestrator(project_builder.path()).run(str(project_builder.path()), output=output)

    greeting_key = generate_key("你好", "greeting.vue")
    unit_key = generate_key("元", "format.ts")
    assert f'$t("{greeting_key}")' in project_builder.read("src/greeting.vue")
    assert project_builder.read("src/utils/format.ts") == f'export const unit = t("{unit_key}");\n'
    assert json.loads(output.read_text(encoding="utf-8")) == {greeting_key: "你好", unit_key: "元"}
    assert report.dictionary_size == 2
    assert len(report.changed_files) == 2


def test_unsupported_and_untouched_files(project_builder, monkeypatch) -> None:
    project_builder.write(
        {
            "src/style.css": ".title::after { content: '标题'; }\n",
            "src/plain.ts": "export const answer = 42;\n",
        }
    )
    written = []
    original_write_bytes = Path.write_bytes

    def _record(self: Path, data: bytes) -> int:
        written.append(self.name)
        return original_write_bytes(self, data)

    monkeypatch.setattr(Path, "write_bytes", _record)

    report = _orchestrator(project_builder.path()).run(
        str(project_builder.path()), output=_output(project_builder)
    )

    assert [path.name for path in report.skipped] == ["style.css"]
    assert written == []
    assert report.changed_files == []


def test_existing_dictionary_is_merged(project_builder) -> None:
    project_builder.write({"src/greeting.vue": "<template><div>你好</div></template>\n"})
    output = _output(project_builder)
    key = generate_key("你好", "greeting.vue")
    output.write_text(json.dumps({key: "你好", "legacy_000000": "旧"}), encoding="utf-8")

    report = _orchestrator(project_builder.path()).run(str(project_builder.path()), output=output)

    assert json.loads(output.read_text(encoding="utf-8")) == {key: "你好", "legacy_000000": "旧"}
    assert report.collisions == []


def test_collision_keeps_existing_text(project_builder) -> None:
    project_builder.write({"src/greeting.vue": "<template><div>你好</div></template>\n"})
    output = _output(project_builder)
    key = generate_key("你好", "greeting.vue")
    output.write_text(json.dumps({key: "您好"}, ensure_ascii=False), encoding="utf-8")

    report = _orchestrator(project_builder.path()).run(str(project_builder.path()), output=output)

    assert json.loads(output.read_text(encoding="utf-8")) == {key: "您好"}
    assert report.collisions == [(key, "您好", "你好")]
    assert f'$t("{key}")' in project_builder.read("src/greeting.vue")


def test_parse_failure_aborts_but_keeps_earlier_work(project_builder) -> None:
    project_builder.write(
        {
            "src/a_good.ts": 'const a = "好";\n',
            "src/b_bad.ts": 'const = "坏";\n',
        }
    )
    output = _output(project_builder)

    with pytest.raises(ParseError):
        _orchestrator(project_builder.path()).run(str(project_builder.path()), output=output)

    good_key = generate_key("好", "a_good.ts")
    assert project_builder.read("src/a_good.ts") == f'const a = t("{good_key}");\n'
    assert project_builder.read("src/b_bad.ts") == 'const = "坏";\n'
    assert json.loads(output.read_text(encoding="utf-8")) == {good_key: "好"}


def test_dry_run_writes_nothing(project_builder) -> None:
    project_builder.write({"src/greeting.vue": "<template><div>你好</div></template>\n"})
    output = _output(project_builder)

    report = _orchestrator(project_builder.path()).run(
        str(project_builder.path()), output=output, dry_run=True
    )

    assert project_builder.read("src/greeting.vue") == "<template><div>你好</div></template>\n"
    assert not output.exists()
    assert report.dry_run is True
    assert report.dictionary_size == 1
    assert len(report.changed_files) == 1


def test_crlf_line_endings_survive(project_builder) -> None:
    path = project_builder.path("src/crlf.ts")
    path.parent.mkdir(parents=True)
    path.write_bytes('const a = "你好";\r\nconst b = 1;\r\n'.encode("utf-8"))

    _orchestrator(project_builder.path()).run(str(path), output=_output(project_builder))

    key = generate_key("你好", "crlf.ts")
    assert path.read_bytes() == f'const a = t("{key}");\r\nconst b = 1;\r\n'.encode("utf-8")


def test_missing_source_raises(project_builder) -> None:
    with pytest.raises(SourceNotFoundError):
        _orchestrator(project_builder.path()).run(
            str(project_builder.path("nope")), output=_output(project_builder)
        )


def test_expand_sources_honours_excludes_and_globs(project_builder) -> None:
    project_builder.write(
        {
            "src/a.vue": "<template><p>甲</p></template>\n",
            "src/nested/b.ts": "export {};\n",
            "node_modules/lib/c.js": "module.exports = '丙';\n",
            "src/d.spec.ts": "export {};\n",
        }
    )
    root = project_builder.path()

    walked = expand_sources(str(root), ["node_modules/", "*.spec.ts"])
    globbed = expand_sources(str(root / "src" / "**" / "*.vue"), ["node_modules/"])

    assert [path.relative_to(root.resolve()).as_posix() for path in walked] == [
        "src/a.vue",
        "src/nested/b.ts",
    ]
    assert [path.name for path in globbed] == ["a.vue"]


def test_component_failing_in_script_leaves_no_template_keys(project_builder) -> None:
    component = "<template><p>模板</p></template>\n<script setup>\nconst = '坏';\n</script>\n"
    project_builder.write(
        {
            "src/a_good.ts": 'const a = "好";\n',
            "src/b_bad.vue": component,
        }
    )
    output = _output(project_builder)

    with pytest.raises(ParseError):
        _orchestrator(project_builder.path()).run(str(project_builder.path()), output=output)

    good_key = generate_key("好", "a_good.ts")
    assert project_builder.read("src/b_bad.vue") == component
    assert json.loads(output.read_text(encoding="utf-8")) == {good_key: "好"}
