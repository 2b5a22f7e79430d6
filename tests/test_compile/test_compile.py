"""End to end tests for the compile facade and configuration."""

import pytest

from flatcss import compile_file, compile_string
from flatcss.config import CompileOptions
from flatcss.errors import CompileError, ErrorKind, EvaluationError, ParseError, line_column
from flatcss.style import OutputStyle


SOURCE = """\
// palette
$primary: #336699;
$pad: 4px;

@mixin box($p: $pad) {
  padding: $p;
  margin: $p * 2;
}

.card {
  color: $primary;
  @include box;

  .title { font: 12px/1.5 sans-serif; }
  &:hover { color: red; }
}
"""

EXPANDED = """\
.card {
  color: #336699;
  padding: 4px;
  margin: 8px;
}

.card .title {
  font: 12px/1.5 sans-serif;
}

.card:hover {
  color: red;
}
"""


class TestCompileString:
    def test_expanded(self):
        assert compile_string(SOURCE, "expanded") == EXPANDED

    def test_default_style_is_nested(self):
        assert compile_string("a { b { x: 1; } y: 2; }") == "a {\n  y: 2; }\n  a b {\n    x: 1; }\n"

    def test_style_enum(self):
        assert compile_string("a { x: 1; }", OutputStyle.Compressed) == "a{x:1}\n"

    def test_nested_flattening(self):
        css = compile_string("div { span { img { strong { font-weight: bold } color: blue } } }", "compact")
        assert css == "div span img { color: blue; }\ndiv span img strong { font-weight: bold; }\n"

    def test_first_error_aborts(self):
        with pytest.raises(EvaluationError) as exc:
            compile_string("a { x: 1; } b { y: 2px * 3px; }")
        assert exc.value.kind is ErrorKind.InvalidSquareUnits

    def test_parse_error_offset(self):
        source = "a {\n  color red;\n}"
        with pytest.raises(ParseError) as exc:
            compile_string(source)
        assert line_column(source, exc.value.offset) == (2, 9)

    def test_unknown_style(self):
        with pytest.raises(CompileError) as exc:
            compile_string("a { x: 1; }", "fancy")
        assert exc.value.kind is ErrorKind.InvalidOutputStyle

    def test_precision_reaches_glued_numbers(self):
        assert compile_string("a { x: 1 + (1/3 2); }", "compact", precision=2) == "a { x: 10.33 2; }\n"

    def test_precision_reaches_function_arguments(self):
        css = compile_string("$w: 10px; a { t: translate($w / 3, 0); }", "compact", precision=1)
        assert css == "a { t: translate(3.3px, 0); }\n"


class TestCompileFile:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "style.scss"
        path.write_text(SOURCE, encoding="utf-8")
        assert compile_file(str(path), "expanded") == EXPANDED

    def test_missing_file(self, tmp_path):
        with pytest.raises(CompileError) as exc:
            compile_file(str(tmp_path / "missing.scss"))
        assert exc.value.kind is ErrorKind.IoError


class TestLineColumn:
    def test_first_character(self):
        assert line_column("abc", 0) == (1, 1)

    def test_after_newline(self):
        assert line_column("ab\ncd", 4) == (2, 2)

    def test_end_of_input(self):
        assert line_column("a { b", 5) == (1, 6)


class TestCompileOptions:
    def test_defaults(self):
        assert CompileOptions.from_env({}) == CompileOptions(OutputStyle.Nested, 5)

    def test_environment(self):
        options = CompileOptions.from_env({"FLATCSS_STYLE": "compact", "FLATCSS_PRECISION": "2"})
        assert options == CompileOptions(OutputStyle.Compact, 2)

    def test_bad_precision(self):
        with pytest.raises(CompileError) as exc:
            CompileOptions.from_env({"FLATCSS_PRECISION": "many"})
        assert exc.value.kind is ErrorKind.InvalidPrecision

    def test_frozen(self):
        with pytest.raises(AttributeError):
            CompileOptions().precision = 3
