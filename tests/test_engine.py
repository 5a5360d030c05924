import io

from srclint.engine import Linter, SourceUnit, parse_source, split_lines, split_locator
from srclint.registry import RuleRegistry, build_registry, filter_registry
from srclint.result import DiagnosticSink
from srclint.rules.style import TabsRule, TrailingWhitespaceRule
from srclint.tier import Tier


class RecordingRule:
    """Stateful rule that records every call it receives."""

    def __init__(self):
        self.calls = []
        self._count = 0

    def reset(self):
        self.calls.append("reset")
        self._count = 0

    def lint(self, line, index):
        self.calls.append(("lint", index))
        self._count += 1
        return "", False

    def done(self):
        self.calls.append("done")
        return f"file has {self._count} lines", True


def _lint(registry, content, name="sample.py"):
    sink = DiagnosticSink()
    Linter(registry, sink).lint_source(SourceUnit(name=name, content=content))
    return sink.report.diagnostics


def test_split_lines_keeps_carriage_returns():
    assert split_lines("") == []
    assert split_lines("a\r\nb") == ["a\r", "b"]
    assert split_lines("a\n") == ["a", ""]


def test_tab_and_trailing_whitespace_on_one_line():
    registry = RuleRegistry()
    registry.register(Tier.STATELESS, "style:trailingwhitespace", TrailingWhitespaceRule())
    registry.register(Tier.STATELESS, "style:tabs", TabsRule())
    registry.apply()

    diagnostics = _lint(registry, "a\tb   \n")
    line_diagnostics = [d for d in diagnostics if d.tier.is_line_scoped]

    assert sorted(d.rule for d in line_diagnostics) == ["style:tabs", "style:trailingwhitespace"]
    assert all(d.line == 1 for d in line_diagnostics)


def test_stateful_rule_sees_every_line_in_order():
    rule = RecordingRule()
    registry = RuleRegistry()
    registry.register(Tier.STATEFUL, "test:recording", rule)
    registry.apply()

    diagnostics = _lint(registry, "x = 1\ny = 2\n")

    assert rule.calls == ["reset", ("lint", 0), ("lint", 1), ("lint", 2), "done"]
    assert diagnostics[-1].render() == "sample.py|test:recording: file has 3 lines"


class RepeatedLineRule:
    """Stateful rule that flags a line identical to the one before it."""

    def reset(self):
        self._previous = None

    def lint(self, line, index):
        repeated = bool(line) and line == self._previous
        self._previous = line
        if repeated:
            return f"line repeats line {index}", True
        return "", False

    def done(self):
        return "", False


def test_stateful_line_finding_carries_line_number():
    registry = RuleRegistry()
    registry.register(Tier.STATEFUL, "test:repeated", RepeatedLineRule())
    registry.apply()

    diagnostics = _lint(registry, "x = 1\nx = 1\ny = 2\n")

    assert len(diagnostics) == 1
    assert diagnostics[0].tier is Tier.STATEFUL
    assert diagnostics[0].line == 2
    assert diagnostics[0].render() == "sample.py:2|test:repeated: line repeats line 1"


def test_empty_input_still_resets_and_finishes():
    rule = RecordingRule()
    registry = RuleRegistry()
    registry.register(Tier.STATEFUL, "test:recording", rule)
    registry.apply()

    diagnostics = _lint(registry, "")

    assert rule.calls == ["reset", "done"]
    assert [d.render() for d in diagnostics] == ["sample.py|test:recording: file has 0 lines"]


def test_stateful_state_does_not_leak_between_files():
    rule = RecordingRule()
    registry = RuleRegistry()
    registry.register(Tier.STATEFUL, "test:recording", rule)
    registry.apply()
    linter = Linter(registry)

    linter.lint_source(SourceUnit("a.py", "a\nb\nc"))
    linter.lint_source(SourceUnit("b.py", "a"))

    messages = [d.message for d in linter.report.diagnostics]
    assert messages == ["file has 3 lines", "file has 1 lines"]
    assert rule.calls.count("reset") == 2


def test_parse_failure_keeps_line_tiers_and_skips_parsing_rules():
    registry = filter_registry(build_registry())

    diagnostics = _lint(registry, "import os, sys\nx = (\t\n")

    by_tier = {}
    for diagnostic in diagnostics:
        by_tier.setdefault(diagnostic.tier, []).append(diagnostic)
    assert sorted((d.line, d.rule) for d in by_tier[Tier.STATELESS]) == [
        (2, "style:tabs"),
        (2, "style:trailingwhitespace"),
    ]
    assert len(by_tier[Tier.PARSER]) == 1
    assert by_tier[Tier.PARSER][0].render().endswith("(in parser)")
    assert by_tier[Tier.PARSER][0].render().startswith("sample.py:")
    assert Tier.PARSING not in by_tier


def test_parsing_diagnostics_follow_line_diagnostics():
    registry = filter_registry(build_registry())

    rendered = [d.render() for d in _lint(registry, "import os, sys \n")]

    assert rendered == [
        "sample.py:1|style:trailingwhitespace: trailing whitespace",
        "sample.py:1:1 style:uncleanimports: multiple modules imported in one statement (os, sys)",
    ]


def test_plain_parsing_message_has_no_locator():
    class PlainRule:
        def init(self, tree):
            self.tree = tree

        def findings(self):
            yield "module has no docstring"

    registry = RuleRegistry()
    registry.register(Tier.PARSING, "docs:module", PlainRule())
    registry.apply()

    assert [d.render() for d in _lint(registry, "x = 1\n")] == ["sample.py|docs:module: module has no docstring"]


def test_stateless_count_is_independent_of_rule_order():
    content = "a\t \nb\n\t\nc  \n"
    forward = RuleRegistry()
    forward.register(Tier.STATELESS, "style:tabs", TabsRule())
    forward.register(Tier.STATELESS, "style:trailingwhitespace", TrailingWhitespaceRule())
    backward = RuleRegistry()
    backward.register(Tier.STATELESS, "style:trailingwhitespace", TrailingWhitespaceRule())
    backward.register(Tier.STATELESS, "style:tabs", TabsRule())

    first = [d.render() for d in _lint(forward, content) if d.tier is Tier.STATELESS]
    second = [d.render() for d in _lint(backward, content) if d.tier is Tier.STATELESS]

    assert len(first) == 5
    assert first == second


def test_repeated_runs_render_identically():
    content = "import os, sys\nimport imp\nx = 1;  # TODO\n\ty = 2"

    first = [d.render() for d in _lint(filter_registry(build_registry()), content)]
    second = [d.render() for d in _lint(filter_registry(build_registry()), content)]

    assert first
    assert first == second


def test_unreadable_file_does_not_stop_the_run(tmp_path):
    good = tmp_path / "good.py"
    good.write_text("x = 1;\n", encoding="utf-8")
    missing = tmp_path / "missing.py"
    linter = Linter(filter_registry(build_registry()))

    report = linter.run([str(missing), str(good)])

    assert report.failed == [str(missing)]
    assert report.summary.files_linted == 1
    assert [d.render() for d in report.diagnostics] == [f"{good}:1|style:semicolon: statement ends with a semicolon"]
    assert report.exit_code() == 1


def test_invalid_utf8_is_a_read_failure(tmp_path):
    binary = tmp_path / "blob.py"
    binary.write_bytes(b"\xff\xfe\x00")
    linter = Linter(filter_registry(build_registry()))

    assert linter.lint_file(binary) is False
    assert linter.report.failed == [str(binary)]


def test_directories_expand_to_sorted_source_files(tmp_path):
    (tmp_path / "b.py").write_text("x = 1;\n", encoding="utf-8")
    (tmp_path / "a.py").write_text("y = 2;\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("z;\n", encoding="utf-8")

    report = Linter(filter_registry(build_registry())).run([str(tmp_path)])

    assert [d.source for d in report.diagnostics] == [str(tmp_path / "a.py"), str(tmp_path / "b.py")]


def test_no_paths_reads_stdin():
    report = Linter(filter_registry(build_registry())).run([], stdin=io.StringIO("x = 1;\n"))

    assert [d.render() for d in report.diagnostics] == ["stdin:1|style:semicolon: statement ends with a semicolon"]


def test_unreadable_stdin_is_reported():
    class BrokenStream:
        def read(self):
            raise OSError("stream closed")

    report = Linter(filter_registry(build_registry())).run([], stdin=BrokenStream())

    assert report.failed == ["stdin"]
    assert report.exit_code() == 1


def test_parse_source_result_holds_exactly_one_outcome():
    good = parse_source(SourceUnit("ok.py", "x = 1\n"))
    bad = parse_source(SourceUnit("bad.py", "def (\n"))

    assert good.ok and good.tree is not None and good.error is None
    assert not bad.ok and bad.tree is None
    assert bad.error.description.startswith("bad.py:1:")


def test_split_locator():
    assert split_locator("3:7: unused import") == (3, 7, "unused import")
    assert split_locator(":3:7: unused import") == (3, 7, "unused import")
    assert split_locator("module has no docstring") == (None, None, "module has no docstring")


def test_deeply_nested_file_does_not_stop_the_run(tmp_path):
    deep = tmp_path / "deep.py"
    deep.write_text("x = " + "1+" * 200000 + "1\n", encoding="utf-8")
    good = tmp_path / "good.py"
    good.write_text("x = 1;\n", encoding="utf-8")

    report = Linter(filter_registry(build_registry())).run([str(deep), str(good)])

    assert report.summary.files_linted == 2
    assert report.failed == []
    assert [d.render() for d in report.diagnostics if d.source == str(good)] == [
        f"{good}:1|style:semicolon: statement ends with a semicolon"
    ]


def test_parser_recursion_becomes_parse_error(monkeypatch):
    def exhausted(*args, **kwargs):
        raise RecursionError("maximum recursion depth exceeded during ast construction")

    monkeypatch.setattr("srclint.engine.ast.parse", exhausted)

    result = parse_source(SourceUnit("deep.py", "x = 1\n"))

    assert result.tree is None
    assert result.error.description == "deep.py: too deeply nested to parse"
