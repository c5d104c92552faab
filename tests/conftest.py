"""Pytest configuration and fixtures for phpgen tests."""

import re

import pytest

from phpgen.compiler.context import CompileContext
from phpgen.compiler.core import Compiler, EmitState
from phpgen.compiler.gen_exprs import ExprsGenerator
from phpgen.compiler.scope import LocalScope
from phpgen.compiler.translate import ExprTranslator
from phpgen.config import CompilerConfig, SimpleFunction
from phpgen.exceptions import ErrorReporter

_MSG_ID = re.compile(r"(prepare\w*\(|isMsgAvailable\()\d+")


@pytest.fixture
def config():
    """Configuration with the plugins the expression tests rely on."""
    return CompilerConfig(
        functions={"length": SimpleFunction("count")},
        globals={"STR": "Hello World", "NUM": 55, "BOOL": True},
    )


@pytest.fixture
def context(config):
    """Compile context for a file in namespace ``boo.foo``."""
    return CompileContext(
        config=config,
        reporter=ErrorReporter("test.soy"),
        namespace="boo.foo",
        file_name="test.soy",
    )


@pytest.fixture
def scope():
    """Scope with one open frame, as inside a template body."""
    return LocalScope().push_frame()


@pytest.fixture
def translator(context, scope):
    return ExprTranslator(context, scope)


@pytest.fixture
def generator(context, scope):
    return ExprsGenerator(context, scope)


@pytest.fixture
def compiler(config):
    return Compiler(config)


@pytest.fixture
def emit(compiler, context):
    """Emit a template body into an already initialized ``$output``.

    Returns the generated statements. ``bindings`` pre-populates local
    names, as loop variables or params would.
    """

    def _emit(body, *, bindings=None, initialized=True):
        state = EmitState(context)
        state.scope.push_frame()
        for name, expr in (bindings or {}).items():
            state.scope.add(name, expr)
        state.code.push_output_var("$output")
        if initialized:
            state.code.set_output_var_inited()
        compiler.visit_children(body, state)
        return state.code.get_code()

    return _emit


def mask_ids(text: str) -> str:
    """Replace message IDs with ``###`` so expected text stays readable."""
    return _MSG_ID.sub(r"\1###", text)


def lines(*rows: str) -> str:
    """Join expected output rows into generated-code text."""
    return "".join(f"{row}\n" for row in rows)
