"""Tests for template and delegate call expressions."""

import pytest

from phpgen.compiler.calls import param_var_name, php_class_path
from phpgen.nodes import (
    CallBasic,
    CallDelegate,
    CallParamContent,
    CallParamValue,
    Const,
    ContentKind,
    Data,
    DataMode,
    ForRange,
    Name,
    Output,
)

BAR = "isset($opt_data['bar']) ? $opt_data['bar'] : null"
MOO = "isset($opt_data['moo']) ? $opt_data['moo'] : null"


class TestBasicCalls:
    """Calls to templates in the same and other namespaces."""

    def test_same_namespace_passes_all_data(self, generator):
        node = CallBasic("boo.foo.goo", DataMode.all())
        assert generator.generate(node).text == "self::goo($opt_data, $opt_ijData)"

    def test_partial_name(self, generator):
        assert generator.generate(CallBasic(".goo")).text == "self::goo(null, $opt_ijData)"

    def test_data_expression(self, generator):
        node = CallBasic("boo.foo.goo", DataMode.of(Name("bar")))
        assert generator.generate(node).text == f"self::goo({BAR}, $opt_ijData)"

    def test_other_namespace(self, generator):
        node = CallBasic("external.library.boo", DataMode.all())
        assert generator.generate(node).text == (
            "\\external\\library::boo($opt_data, $opt_ijData)"
        )

    def test_reserved_method_name_in_same_namespace(self, generator):
        assert generator.generate(CallBasic("boo.foo.list")).text == "self::list_(null, $opt_ijData)"

    @pytest.mark.parametrize(("name", "escaped"), [("list", "list_"), ("Print", "Print_"), ("echo", "echo_")])
    def test_reserved_method_name_in_other_namespace(self, generator, name, escaped):
        assert generator.generate(CallBasic(f"external.library.{name}")).text == (
            f"\\external\\library::{escaped}(null, $opt_ijData)"
        )


class TestParams:
    """Param records and their merge with passed data."""

    def test_value_param(self, generator):
        node = CallBasic("boo.foo.goo", params=[CallParamValue("goo", Name("moo"))])
        assert generator.generate(node).text == f"self::goo(['goo' => {MOO}], $opt_ijData)"

    def test_text_content_param(self, generator):
        param = CallParamContent("goo", [Data("Hello")], node_id=1, content_kind=ContentKind.TEXT)
        node = CallBasic("boo.foo.goo", params=[param])
        assert generator.generate(node).text == (
            "self::goo(['goo' => new \\Goog\\Soy\\UnsanitizedText('Hello')], $opt_ijData)"
        )

    def test_content_param_without_kind_is_plain_string(self, generator):
        param = CallParamContent("goo", [Data("a"), Output(Name("moo"))], node_id=1)
        node = CallBasic("boo.foo.goo", params=[param])
        assert generator.generate(node).text == f"self::goo(['goo' => 'a'.({MOO})], $opt_ijData)"

    def test_precomputed_content_param(self, generator):
        loop = ForRange("i", Const(3), [Data("x")], node_id=2)
        param = CallParamContent("moo", [loop], node_id=7, content_kind=ContentKind.TEXT)
        node = CallBasic("boo.foo.goo", params=[param])
        assert generator.calls.build_call(node).text == (
            "self::goo(['moo' => new \\Goog\\Soy\\UnsanitizedText($param7)], $opt_ijData)"
        )

    def test_params_merge_over_passed_data(self, generator):
        node = CallBasic(
            "boo.foo.goo",
            DataMode.of(Name("bar")),
            params=[CallParamValue("goo", Name("moo"))],
        )
        assert generator.generate(node).text == (
            f"self::goo(array_replace({BAR}, ['goo' => {MOO}]), $opt_ijData)"
        )

    def test_params_merge_over_all_data(self, generator):
        node = CallBasic("boo.foo.goo", DataMode.all(), params=[CallParamValue("a", Const(1))])
        assert generator.generate(node).text == (
            "self::goo(array_replace($opt_data, ['a' => 1]), $opt_ijData)"
        )

    def test_param_order_is_kept(self, generator):
        node = CallBasic(
            ".goo",
            params=[CallParamValue("z", Const(1)), CallParamValue("a", Const(2))],
        )
        assert generator.calls.build_argument(node) == "['z' => 1, 'a' => 2]"


class TestDelegateCalls:
    """Delegate calls through the runtime registry."""

    def test_default_variant(self, generator):
        node = CallDelegate("moo.goo", DataMode.of(Name("bar")))
        assert generator.generate(node).text == (
            f"call_user_func(Runtime::getDelegateFn('moo.goo', '', true), {BAR}, $opt_ijData)"
        )

    def test_variant_and_no_empty_default(self, generator):
        node = CallDelegate(
            "moo.goo",
            DataMode.of(Name("bar")),
            variant=Const("beta"),
            allow_empty_default=False,
        )
        assert generator.generate(node).text == (
            f"call_user_func(Runtime::getDelegateFn('moo.goo', 'beta', false), {BAR}, $opt_ijData)"
        )

    def test_escaping_directives(self, generator):
        node = CallDelegate("moo.goo", escaping_directives=["|escapeHtml"])
        assert generator.generate(node).text == (
            "Sanitize::escapeHtml(call_user_func("
            "Runtime::getDelegateFn('moo.goo', '', true), null, $opt_ijData))"
        )


class TestHelpers:
    def test_param_var_name(self):
        assert param_var_name(CallParamContent("a", [], node_id=12)) == "$param12"

    def test_php_class_path(self):
        assert php_class_path("external.library") == "\\external\\library"
