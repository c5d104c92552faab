"""phpgen: compile closure-style template trees to PHP source.

phpgen is the PHP backend of a template compiler. It takes an already
parsed and type-checked template tree and emits one PHP class per source
file, one static method per template, ready to run against the
``Goog\\Soy`` PHP runtime.

Quickstart:
    >>> from phpgen import CompilerConfig, compile_file
    >>> from phpgen.nodes import Data, Output, Name, Template, TemplateFile
    >>> file = TemplateFile("boo.foo", "foo.soy", [
    ...     Template("boo.foo.hello", [Data("Hello "), Output(Name("name"))]),
    ... ])
    >>> print(compile_file(file).code)
    <?php
    ...

Pipeline:
Template tree → Compiler (statements) → ExprsGenerator (batched output)
→ ExprTranslator (expressions) → CodeBuilder → PHP source

Errors:
- Contract violations in the input tree raise immediately
  (``MissingContentKindError``, ``UnsupportedParamTypeError``, ...)
- Unknown plugin functions or directives are reported, compilation
  continues, and ``compile_files`` raises ``CompilationFailedError``
  listing all of them at the end

"""

from phpgen.compiler.core import CompiledFile, Compiler
from phpgen.config import (
    CompilerConfig,
    PhpFunction,
    PhpPrintDirective,
    SimpleDirective,
    SimpleFunction,
)
from phpgen.driver import CompilationResult, compile_file, compile_files, output_path_for
from phpgen.exceptions import (
    CompilationFailedError,
    CompilerError,
    ErrorCode,
    InternalCompilerError,
    MissingContentKindError,
    UnsupportedLiteralElementError,
    UnsupportedParamTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "CompilationFailedError",
    "CompilationResult",
    "CompiledFile",
    "Compiler",
    "CompilerConfig",
    "CompilerError",
    "ErrorCode",
    "InternalCompilerError",
    "MissingContentKindError",
    "PhpFunction",
    "PhpPrintDirective",
    "SimpleDirective",
    "SimpleFunction",
    "UnsupportedLiteralElementError",
    "UnsupportedParamTypeError",
    "__version__",
    "compile_file",
    "compile_files",
    "output_path_for",
]
