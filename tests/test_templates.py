"""Tests for file, template and parameter guard emission."""

import pytest

from phpgen import Compiler, CompilerConfig
from phpgen.compiler.statements.templates import DelegateRegistration, param_alias, type_guard
from phpgen.exceptions import UnsupportedParamTypeError
from phpgen.nodes import (
    ContentKind,
    Data,
    DelegateInfo,
    Name,
    Output,
    PrimitiveType,
    SanitizedType,
    Template,
    TemplateFile,
    TemplateParam,
    UnionType,
)

from .conftest import lines

HEADER = (
    "<?php",
    "/**",
    " * This file was automatically generated from foo.soy.",
    " * Please don't edit this file by hand.",
    " * ",
    " * Templates in namespace boo.foo.",
    " */",
    "",
    "namespace boo;",
    "",
    "use Goog\\Soy\\Bidi;",
    "use Goog\\Soy\\Directives;",
    "use Goog\\Soy\\Sanitize;",
    "use Goog\\Soy\\Runtime;",
    "",
)

DOCBLOCK = (
    "  /**",
    "   * @param array|null $opt_data",
    "   * @param array|null $opt_ijData",
    "   * @return \\Goog\\Soy\\SanitizedContent",
    "   */",
)


def _compile(*templates, namespace="boo.foo", config=None):
    file = TemplateFile(namespace, "foo.soy", list(templates))
    return Compiler(config or CompilerConfig()).compile_file(file)


def _method_body(code: str) -> list[str]:
    """Lines between the method signature and the closing brace."""
    rows = code.splitlines()
    start = next(i for i, row in enumerate(rows) if " static function " in row)
    end = rows.index("  }", start)
    return rows[start + 1 : end]


class TestFileOutput:
    """Whole-file layout."""

    def test_blank_template(self):
        compiled = _compile(Template("boo.foo.helloWorld", []))
        assert compiled.code == lines(
            *HEADER,
            "class foo {",
            "  ",
            "  ",
            *DOCBLOCK,
            "  public static function helloWorld($opt_data = null, $opt_ijData = null) {",
            "    $output = '';",
            "    return new \\Goog\\Soy\\SanitizedHtml($output);",
            "  }",
            "",
            "}",
            "",
        )

    def test_hello_world(self):
        compiled = _compile(Template("boo.foo.helloWorld", [Data("Hello World!")]))
        assert _method_body(compiled.code) == [
            "    $output = 'Hello World!';",
            "    return new \\Goog\\Soy\\SanitizedHtml($output);",
        ]

    def test_translation_class_import(self):
        config = CompilerConfig(translation_class="Goog\\Soy\\SimpleTranslator")
        code = _compile(Template("boo.foo.x", []), config=config).code
        assert "use Goog\\Soy\\Runtime;\nuse Goog\\Soy\\SimpleTranslator as Translator;\n\n" in code

    def test_bidi_function_import(self):
        config = CompilerConfig(
            bidi_is_rtl_fn="MyApp\\Locale\\isRtl",
            translation_class="Goog\\Soy\\SimpleTranslator",
        )
        code = _compile(Template("boo.foo.x", []), config=config).code
        assert (
            "use Goog\\Soy\\Runtime;\n"
            "use function MyApp\\Locale\\isRtl as bidiIsRtl;\n"
            "use Goog\\Soy\\SimpleTranslator as Translator;\n\n"
        ) in code

    def test_no_bidi_import_by_default(self):
        code = _compile(Template("boo.foo.x", [])).code
        assert "use function" not in code

    def test_single_segment_namespace_has_no_namespace_line(self):
        code = _compile(Template("foo.x", []), namespace="foo").code
        assert "namespace " not in code
        assert "\nclass foo {\n" in code

    def test_deep_namespace(self):
        code = _compile(Template("a.b.c.x", []), namespace="a.b.c").code
        assert "\nnamespace a\\b;\n" in code
        assert "\nclass c {\n" in code

    def test_templates_share_the_class(self):
        code = _compile(Template("boo.foo.a", []), Template("boo.foo.b", [])).code
        assert code.count("class foo {") == 1
        assert "function a(" in code
        assert "function b(" in code

    def test_compiled_file_metadata(self):
        compiled = _compile(Template("boo.foo.a", []))
        assert compiled.file_name == "foo.soy"
        assert compiled.namespace == "boo.foo"
        assert compiled.errors == ()


class TestTemplateMethods:
    """Signature and return of one template."""

    def test_private_visibility(self):
        code = _compile(Template("boo.foo.x", [], visibility="private")).code
        assert "  private static function x($opt_data = null, $opt_ijData = null) {" in code

    def test_reserved_method_name(self):
        code = _compile(Template("boo.foo.list", [])).code
        assert "public static function list_(" in code

    def test_content_kind_selects_return_class(self):
        code = _compile(Template("boo.foo.x", [], content_kind=ContentKind.TEXT)).code
        assert "return new \\Goog\\Soy\\UnsanitizedText($output);" in code

    def test_ensure_data_defined(self):
        code = _compile(Template("boo.foo.x", [], ensure_data_defined=True)).code
        assert _method_body(code)[0] == (
            "    $opt_data = is_array($opt_data) ? $opt_data : [];"
        )

    def test_scope_is_fresh_per_template(self):
        first = Template("boo.foo.a", [], params=[TemplateParam("n", PrimitiveType("int"))])
        second = Template("boo.foo.b", [Output(Name("n"))])
        code = _compile(first, second).code
        assert "    $output = isset($opt_data['n']) ? $opt_data['n'] : null;" in code


class TestParamChecks:
    """Runtime guards for declared params."""

    def test_required_param(self):
        template = Template(
            "boo.foo.x",
            [Output(Name("n"))],
            params=[TemplateParam("n", PrimitiveType("int"))],
        )
        assert _method_body(_compile(template).code)[:3] == [
            "    if (!(is_int($opt_data['n']))) { throw new \\Goog\\Soy\\Exception("
            "'Invalid type \"'.gettype($opt_data['n']).'\" for parameter \"n\"'); }",
            "    $n = $opt_data['n'];",
            "    $output = $n;",
        ]

    def test_optional_param(self):
        template = Template(
            "boo.foo.x", [], params=[TemplateParam("n", PrimitiveType("int"), required=False)]
        )
        body = _method_body(_compile(template).code)
        assert body[0].startswith("    if (isset($opt_data['n']) && !(is_int($opt_data['n']))) {")
        assert body[1] == "    $n = isset($opt_data['n']) ? $opt_data['n'] : 0;"

    def test_optional_nullable_single_member_union_defaults_to_null(self):
        nullable_int = UnionType([PrimitiveType("int"), PrimitiveType("null")])
        template = Template(
            "boo.foo.x", [], params=[TemplateParam("n", nullable_int, required=False)]
        )
        body = _method_body(_compile(template).code)
        assert body[1] == "    $n = isset($opt_data['n']) ? $opt_data['n'] : null;"

    def test_bool_param_is_coerced(self):
        template = Template("boo.foo.x", [], params=[TemplateParam("flag", PrimitiveType("bool"))])
        assert "    $flag = !!$opt_data['flag'];" in _method_body(_compile(template).code)

    def test_injected_param(self):
        template = Template(
            "boo.foo.x", [], params=[TemplateParam("loc", PrimitiveType("string"), injected=True)]
        )
        assert "    $loc = $opt_ijData['loc'];" in _method_body(_compile(template).code)

    def test_unchecked_param_reads_data(self):
        template = Template(
            "boo.foo.x", [Output(Name("p"))], params=[TemplateParam("p", PrimitiveType("any"))]
        )
        assert _method_body(_compile(template).code)[0] == (
            "    $output = isset($opt_data['p']) ? $opt_data['p'] : null;"
        )

    def test_unsupported_type_has_location(self):
        param = TemplateParam("p", PrimitiveType("null"), lineno=3)
        with pytest.raises(UnsupportedParamTypeError) as exc_info:
            _compile(Template("boo.foo.x", [], params=[param]))
        assert exc_info.value.param_name == "p"
        assert exc_info.value.location.lineno == 3


class TestTypeGuard:
    """Predicates and defaults per declared type."""

    @pytest.mark.parametrize(
        ("param_type", "expected"),
        [
            (PrimitiveType("bool"), ("is_bool({0}) || {0} === 1 || {0} === 0", "false")),
            (
                PrimitiveType("string"),
                ("is_string({0}) || ({0} instanceof \\Goog\\Soy\\SanitizedContent)", "''"),
            ),
            (PrimitiveType("int"), ("is_int({0})", "0")),
            (PrimitiveType("float"), ("is_float({0})", "0.0")),
            (PrimitiveType("list"), ("is_array({0})", "[]")),
            (PrimitiveType("object"), ("is_object({0})", "null")),
            (
                SanitizedType(ContentKind.HTML),
                (
                    "({0} instanceof \\Goog\\Soy\\SanitizedHtml) || "
                    "({0} instanceof \\Goog\\Soy\\UnsanitizedText) || is_string({0})",
                    "''",
                ),
            ),
            (UnionType([PrimitiveType("int"), PrimitiveType("null")]), ("!isset({0}) || is_int({0})", "null")),
            (UnionType([PrimitiveType("int")]), ("is_int({0})", "0")),
            (
                UnionType([PrimitiveType("int"), PrimitiveType("string")]),
                (
                    "({0} instanceof \\Goog\\Soy\\SanitizedContent) || is_int({0}) || is_string({0})",
                    "null",
                ),
            ),
        ],
    )
    def test_guard(self, param_type, expected):
        assert type_guard(param_type) == expected

    @pytest.mark.parametrize("kind", ["any", "unknown"])
    def test_unchecked(self, kind):
        assert type_guard(PrimitiveType(kind)) is None

    def test_unsupported(self):
        with pytest.raises(UnsupportedParamTypeError):
            type_guard(PrimitiveType("null"), "p")
        with pytest.raises(UnsupportedParamTypeError):
            type_guard("string", "p")

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("n", "$n"),
            ("this", "$this_"),
            ("output", "$output_"),
            ("opt_data", "$opt_data_"),
            ("opt_ijData", "$opt_ijData_"),
            ("outputs", "$outputs"),
        ],
    )
    def test_param_alias(self, name, expected):
        assert param_alias(name) == expected

    def test_param_named_output_keeps_output_variable(self):
        template = Template(
            "boo.foo.x",
            [Data("a"), Output(Name("output"))],
            params=[TemplateParam("output", PrimitiveType("string"))],
        )
        body = _method_body(_compile(template).code)
        assert "    $output_ = $opt_data['output'];" in body
        assert "    $output = 'a'.$output_;" in body


class TestDelegates:
    """Deltemplate registration."""

    def test_registration_follows_class(self):
        template = Template("boo.foo.moo", [], delegate=DelegateInfo("my.delegate", "alt", 1))
        compiled = _compile(template)
        assert compiled.delegates == (
            DelegateRegistration("my.delegate", "alt", 1, "boo\\foo::moo"),
        )
        assert compiled.code.endswith(
            "}\n\nRuntime::registerDelegateFn('my.delegate', 'alt', 1, 'boo\\\\foo::moo');\n"
        )

    def test_registration_uses_escaped_method_name(self):
        template = Template("boo.foo.list", [], delegate=DelegateInfo("d"))
        [registration] = _compile(template).delegates
        assert registration.function == "boo\\foo::list_"
        assert registration.to_php() == "Runtime::registerDelegateFn('d', '', 0, 'boo\\\\foo::list_');"
