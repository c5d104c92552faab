"""Template structure emission for the phpgen compiler.

Provides mixin for emitting the file-level PHP class, one static method
per template, the runtime type guards for declared parameters and the
delegate registrations that follow the class.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from phpgen.compiler.exprs import (
    PhpExpr,
    escape_method_name,
    quote_string,
    sanitized_class,
    wrap_as_sanitized,
)
from phpgen.compiler.translate import DATA_VAR, param_access
from phpgen.exceptions import UnsupportedParamTypeError
from phpgen.nodes import PrimitiveType, SanitizedType, UnionType

if TYPE_CHECKING:
    from phpgen.compiler.core import EmitState
    from phpgen.exceptions import SourceLocation
    from phpgen.nodes import (
        AnyType,
        DelegateInfo,
        Node,
        Template,
        TemplateFile,
        TemplateParam,
    )

logger = logging.getLogger(__name__)

RUNTIME_IMPORTS = ("Bidi", "Directives", "Sanitize", "Runtime")

# Local name for the configured global-direction function.
BIDI_IS_RTL_ALIAS = "bidiIsRtl"

OUTPUT_VAR = "$output"

_SANITIZED_CONTENT = "\\Goog\\Soy\\SanitizedContent"
_UNSANITIZED_TEXT = "\\Goog\\Soy\\UnsanitizedText"

# Primitive kind -> (type tests, default value). ``{0}`` is the param access.
_PRIMITIVE_CHECKS: dict[str, tuple[tuple[str, ...], str]] = {
    "bool": (("is_bool({0}) || {0} === 1 || {0} === 0",), "false"),
    "string": (("is_string({0})", f"({{0}} instanceof {_SANITIZED_CONTENT})"), "''"),
    "int": (("is_int({0})",), "0"),
    "enum": (("is_int({0})",), "0"),
    "float": (("is_float({0})",), "0.0"),
    "list": (("is_array({0})",), "[]"),
    "record": (("is_array({0})",), "[]"),
    "map": (("is_array({0})",), "[]"),
    "object": (("is_object({0})",), "null"),
}

_UNCHECKED_KINDS = frozenset({"any", "unknown"})


@dataclass(frozen=True, slots=True)
class DelegateRegistration:
    """A deltemplate to register with the runtime when its file loads."""

    delegate_name: str
    variant: str
    priority: int
    function: str

    def to_php(self) -> str:
        return (
            f"Runtime::registerDelegateFn({quote_string(self.delegate_name)}, "
            f"{quote_string(self.variant)}, {self.priority}, {quote_string(self.function)});"
        )


def _sanitized_checks(member: SanitizedType) -> tuple[tuple[str, ...], str]:
    cls = sanitized_class(member.content_kind)
    return (
        (f"({{0}} instanceof {cls})", f"({{0}} instanceof {_UNSANITIZED_TEXT})", "is_string({0})"),
        "''",
    )


# Param names whose plain alias would clobber ``$this`` or a method local.
_RESERVED_ALIASES = frozenset({"this", "output", "opt_data", "opt_ijData"})


def param_alias(name: str) -> str:
    """Local PHP variable holding a checked param: ``$name``, or ``$name_`` if reserved."""
    return f"${name}_" if name in _RESERVED_ALIASES else f"${name}"


def type_guard(
    param_type: AnyType, param_name: str = "", *, location: SourceLocation | None = None
) -> tuple[str, str] | None:
    """Predicate template and default value for a declared parameter type.

    Returns None for types that are not checked at run time (``any``,
    ``unknown``). The predicate uses ``{0}`` for the parameter access.

    Raises:
        UnsupportedParamTypeError: no runtime check exists for the type
    """
    if isinstance(param_type, PrimitiveType):
        if param_type.kind in _UNCHECKED_KINDS:
            return None
        checks = _PRIMITIVE_CHECKS.get(param_type.kind)
        if checks is None:
            raise UnsupportedParamTypeError(param_name, param_type, location=location)
        tests, default = checks
        return " || ".join(tests), default

    if isinstance(param_type, SanitizedType):
        tests, default = _sanitized_checks(param_type)
        return " || ".join(tests), default

    if isinstance(param_type, UnionType):
        return _union_guard(param_type, param_name, location)

    raise UnsupportedParamTypeError(param_name, param_type, location=location)


def _union_guard(
    param_type: UnionType, param_name: str, location: SourceLocation | None
) -> tuple[str, str]:
    tests: set[str] = set()
    default = "null"
    for member in param_type.members:
        if isinstance(member, SanitizedType):
            member_tests, default = _sanitized_checks(member)
        elif member.kind == "null":
            continue
        elif member.kind in _UNCHECKED_KINDS:
            member_tests, default = ("{0} !== null",), "null"
        elif member.kind in _PRIMITIVE_CHECKS:
            member_tests, default = _PRIMITIVE_CHECKS[member.kind]
        else:
            raise UnsupportedParamTypeError(param_name, param_type, location=location)
        tests.update(member_tests)

    predicate = " || ".join(sorted(tests))
    if param_type.is_nullable:
        predicate = "!isset({0}) || " + predicate
        default = "null"
    elif len(tests) > 1:
        default = "null"
    return predicate, default


class TemplateStructureMixin:
    """Mixin for emitting the file class and template functions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        # From Compiler core
        def visit_children(self, body: Sequence[Node], state: EmitState) -> None: ...

    # ─────────────────────────────────────────────────────────────────────────
    # File
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_file(self, file: TemplateFile, state: EmitState) -> None:
        """Emit the PHP file for one template file.

        All templates of a file share a class named after the last segment
        of the namespace; the leading segments become the PHP namespace.
        """
        code = state.code
        php_namespace, _, class_name = file.namespace.rpartition(".")

        code.append_line("<?php")
        code.append_line("/**")
        code.append_line(f" * This file was automatically generated from {file.file_name}.")
        code.append_line(" * Please don't edit this file by hand.")
        code.append_line(" * ")
        code.append_line(f" * Templates in namespace {file.namespace}.")
        code.append_line(" */")
        code.append_line()
        if php_namespace:
            code.append_line("namespace ", php_namespace.replace(".", "\\"), ";")
            code.append_line()
        for name in RUNTIME_IMPORTS:
            code.append_line(f"use Goog\\Soy\\{name};")
        config = state.context.config
        if config.bidi_is_rtl_fn:
            code.append_line(f"use function {config.bidi_is_rtl_fn} as {BIDI_IS_RTL_ALIAS};")
        if config.translation_class:
            code.append_line(f"use {config.translation_class} as Translator;")
        code.append_line()

        code.append_line("class ", class_name, " {")
        with code.indent():
            for template in file.templates:
                code.append_line()
                code.append_line()
                self._compile_template(template, state.for_template())
        code.append_line()
        code.append_line("}")
        code.append_line()

        for registration in state.delegates:
            code.append_line(registration.to_php())

    # ─────────────────────────────────────────────────────────────────────────
    # Templates
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_template(self, template: Template, state: EmitState) -> None:
        """Emit one template as a static method.

        Generates:
            /**
             * @param array|null $opt_data
             * @param array|null $opt_ijData
             * @return \\Goog\\Soy\\SanitizedContent
             */
            public static function foo($opt_data = null, $opt_ijData = null) {
              ...
              return new \\Goog\\Soy\\SanitizedHtml($output);
            }
        """
        logger.debug("Compiling template %s", template.name)
        code = state.code
        method = escape_method_name(template.partial_name)

        code.append_line("/**")
        code.append_line(" * @param array|null $opt_data")
        code.append_line(" * @param array|null $opt_ijData")
        code.append_line(f" * @return {_SANITIZED_CONTENT}")
        code.append_line(" */")
        code.append_line(
            template.visibility, " static function ", method,
            "($opt_data = null, $opt_ijData = null) {",
        )
        with code.indent(), state.scope.frame():
            if template.ensure_data_defined:
                code.append_line(f"{DATA_VAR} = is_array({DATA_VAR}) ? {DATA_VAR} : [];")
            for param in template.params:
                self._compile_param_check(param, state)

            code.push_output_var(OUTPUT_VAR)
            self.visit_children(template.body, state)
            output = code.get_output_as_string()
            code.pop_output_var()
            code.append_line("return ", wrap_as_sanitized(template.content_kind, output).text, ";")
        code.append_line("}")

        if template.delegate is not None:
            self._register_delegate(template.delegate, method, state)

    def _register_delegate(self, delegate: DelegateInfo, method: str, state: EmitState) -> None:
        class_path = state.context.namespace.replace(".", "\\")
        registration = DelegateRegistration(
            delegate_name=delegate.name,
            variant=delegate.variant,
            priority=delegate.priority,
            function=f"{class_path}::{method}",
        )
        logger.debug(
            "Registering %s as delegate %s (variant %r, priority %d)",
            registration.function, delegate.name, delegate.variant, delegate.priority,
        )
        state.delegates.append(registration)

    # ─────────────────────────────────────────────────────────────────────────
    # Parameter guards
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_param_check(self, param: TemplateParam, state: EmitState) -> None:
        """Emit the runtime type guard and local alias for one declared param.

        Generates (required):
            if (!(is_int($opt_data['n']))) { throw new \\Goog\\Soy\\Exception(...); }
            $n = $opt_data['n'];

        Optional params are only checked when present:
            if (isset($opt_data['n']) && !(is_int($opt_data['n']))) { ... }
            $n = isset($opt_data['n']) ? $opt_data['n'] : 0;
        """
        guard = type_guard(param.type, param.name, location=state.context.location(param))
        if guard is None:
            return

        predicate, default = guard
        access = param_access(param.name, param.injected)
        test = predicate.replace("{0}", access)
        value = f"!!{access}" if _is_bool(param.type) else access
        alias = param_alias(param.name)

        condition = f"!({test})" if param.required else f"isset({access}) && !({test})"
        state.code.append_line(
            f"if ({condition}) {{ throw new \\Goog\\Soy\\Exception("
            f"'Invalid type \"'.gettype({access}).'\" for parameter \"{param.name}\"'); }}"
        )
        if param.required:
            state.code.append_line(f"{alias} = {value};")
        else:
            state.code.append_line(f"{alias} = isset({access}) ? {value} : {default};")
        state.scope.add(param.name, PhpExpr(alias))


def _is_bool(param_type: AnyType) -> bool:
    return isinstance(param_type, PrimitiveType) and param_type.kind == "bool"
