"""Tests for expression generation of expression-capable nodes."""

import pytest

from phpgen.compiler.exprs import MAX_PRECEDENCE, PhpStringExpr
from phpgen.compiler.gen_exprs import is_computable
from phpgen.compiler.translate import POISON
from phpgen.exceptions import ErrorCode, InternalCompilerError
from phpgen.nodes import (
    CallBasic,
    CallParamContent,
    Const,
    Css,
    Data,
    Directive,
    Foreach,
    ForRange,
    If,
    LetValue,
    Msg,
    MsgFallbackGroup,
    MsgHtmlTag,
    MsgPlaceholder,
    MsgSelect,
    MsgSelectCase,
    MsgText,
    Name,
    Output,
    Switch,
    Template,
    UnaryOp,
)

BOO = "isset($opt_data['boo']) ? $opt_data['boo'] : null"


def _foreach():
    return Foreach("x", Name("xs"), [Data("a")], node_id=1)


def _looping_call():
    return CallBasic(".goo", params=[CallParamContent("p", [_foreach()], node_id=2)])


class TestIsComputable:
    """Expression capability of node kinds."""

    @pytest.mark.parametrize(
        "node",
        [
            Data("a"),
            Output(Name("a")),
            Css("primary"),
            If(Name("a"), [Data("b")], else_=[Output(Name("c"))]),
            CallBasic(".goo"),
            CallParamContent("p", [Data("a")], node_id=1),
            MsgFallbackGroup(Msg([MsgText("a"), MsgPlaceholder(CallBasic(".goo"))])),
        ],
    )
    def test_computable(self, node):
        assert is_computable(node)

    @pytest.mark.parametrize(
        "node",
        [
            _foreach(),
            ForRange("i", Const(3), [Data("a")], node_id=1),
            Switch(Name("a"), []),
            LetValue("a", Const(1), "a__soy1"),
            If(Name("a"), [_foreach()]),
            If(Name("a"), [Data("a")], elif_=[(Name("b"), [_foreach()])]),
            If(Name("a"), [Data("a")], else_=[_foreach()]),
            _looping_call(),
            MsgFallbackGroup(Msg([MsgPlaceholder(_looping_call())])),
            MsgFallbackGroup(Msg([MsgPlaceholder(MsgHtmlTag("a", body=[_looping_call()]))])),
            MsgFallbackGroup(
                Msg([MsgText("a")]),
                fallback=Msg([
                    MsgSelect(Name("g"), [MsgSelectCase("f", [MsgPlaceholder(_looping_call())])], []),
                ]),
            ),
        ],
    )
    def test_not_computable(self, node):
        assert not is_computable(node)

    def test_unknown_kind(self):
        with pytest.raises(InternalCompilerError, match="Unknown node kind Template"):
            is_computable(Template("boo.foo.x", []))


class TestSimpleNodes:
    """Raw text, css and prints."""

    def test_raw_text(self, generator):
        result = generator.generate(Data("I'm feeling lucky!"))
        assert result.text == "'I\\'m feeling lucky!'"
        assert result.precedence == MAX_PRECEDENCE

    def test_css(self, generator):
        assert generator.generate(Css("primary")).text == "Runtime::getCssName('primary')"

    def test_css_with_component(self, generator):
        result = generator.generate(Css("bar", component=Name("foo")))
        assert result.text == (
            "Runtime::getCssName(isset($opt_data['foo']) ? $opt_data['foo'] : null, 'bar')"
        )

    def test_print(self, generator):
        assert generator.generate(Output(Name("boo"))).text == BOO

    def test_print_with_escaping_directive(self, generator):
        node = Output(Name("boo"), [Directive("|escapeHtml")])
        result = generator.generate(node)
        assert result.text == f"Sanitize::escapeHtml({BOO})"
        assert isinstance(result, PhpStringExpr)

    def test_directives_apply_in_order(self, generator):
        node = Output(Name("boo"), [Directive("|truncate", [Const(5)]), Directive("|escapeHtml")])
        assert generator.generate(node).text == (
            f"Sanitize::escapeHtml(Directives::truncate({BOO}, 5, true))"
        )

    def test_identity_directive(self, generator):
        assert generator.generate(Output(Name("boo"), [Directive("|id")])).text == BOO

    def test_unknown_directive_is_reported(self, generator, context):
        result = generator.generate(Output(Name("boo"), [Directive("|bogus")]))
        assert result == POISON
        [error] = context.reporter.errors
        assert error.code is ErrorCode.UNKNOWN_PRINT_DIRECTIVE

    def test_directive_arity_is_reported(self, generator, context):
        result = generator.generate(Output(Name("boo"), [Directive("|truncate")]))
        assert result == POISON
        [error] = context.reporter.errors
        assert error.code is ErrorCode.DIRECTIVE_ARG_COUNT
        assert "expected 1, 2" in error.message

    def test_statement_node_is_rejected(self, generator):
        with pytest.raises(InternalCompilerError, match="cannot be rendered"):
            generator.generate(_foreach())


class TestIfExpression:
    """If chains rendered as nested ternaries."""

    def test_if_elseif_else(self, generator):
        node = If(
            Name("boo"),
            [Data("Blah")],
            elif_=[(UnaryOp("not", Name("goo")), [Data("Bleh")])],
            else_=[Data("Bluh")],
        )
        assert generator.generate(node).text == (
            "((isset($opt_data['boo']) ? $opt_data['boo'] : null) ? 'Blah' : "
            "(! (isset($opt_data['goo']) ? $opt_data['goo'] : null) ? 'Bleh' : 'Bluh'))"
        )

    def test_nested_if_without_else(self, generator):
        inner = If(Name("goo"), [Data("Blah")])
        node = If(Name("boo"), [inner], else_=[Data("Bleh")])
        assert generator.generate(node).text == (
            "((isset($opt_data['boo']) ? $opt_data['boo'] : null) ? "
            "(((isset($opt_data['goo']) ? $opt_data['goo'] : null) ? 'Blah' : '')) : 'Bleh')"
        )

    def test_branch_bodies_are_concatenated(self, generator):
        node = If(Name("boo"), [Data("a"), Output(Name("boo"))])
        assert generator.generate(node).text == f"(({BOO}) ? 'a'.({BOO}) : '')"


class TestCallEscaping:
    def test_escaping_directives_wrap_call(self, generator):
        node = CallBasic("boo.foo.goo", escaping_directives=["|escapeHtml"])
        assert generator.generate(node).text == "Sanitize::escapeHtml(self::goo(null, $opt_ijData))"
