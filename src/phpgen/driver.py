"""Compile many template files in one run.

Every file is compiled with its own emission state; only the read-only
configuration is shared. Delegate registrations of all files are merged
into one registry in file order, and errors reported by any file fail the
run as a whole so the caller sees every problem at once.

Example:
    >>> result = compile_files([file_a, file_b], CompilerConfig())
    >>> result.outputs["boo/foo.php"]
    '<?php\\n...'

"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from phpgen.compiler.core import CompiledFile, Compiler
from phpgen.compiler.statements.templates import DelegateRegistration
from phpgen.config import CompilerConfig
from phpgen.exceptions import CompilationFailedError, ReportedError
from phpgen.nodes import TemplateFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Generated sources keyed by output path, plus the merged delegate registry."""

    outputs: dict[str, str] = field(default_factory=dict)
    delegates: tuple[DelegateRegistration, ...] = ()
    errors: tuple[ReportedError, ...] = ()
    files: tuple[CompiledFile, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def output_path_for(file: TemplateFile) -> str:
    """Relative output path: the namespace with dots as directories, plus ``.php``.

    Files without a namespace fall back to their source file name.
    """
    if file.namespace:
        return file.namespace.replace(".", "/") + ".php"
    stem = file.file_name.rsplit("/", 1)[-1].rsplit(".", 1)[0]
    return stem + ".php"


def compile_file(file: TemplateFile, config: CompilerConfig | None = None) -> CompiledFile:
    """Compile a single template file."""
    return Compiler(config).compile_file(file)


def compile_files(
    files: Iterable[TemplateFile], config: CompilerConfig | None = None
) -> CompilationResult:
    """Compile ``files`` and merge their outputs and delegate registrations.

    Raises:
        CompilationFailedError: any file reported errors and
            ``config.fail_on_errors`` is set
    """
    config = config or CompilerConfig()
    compiler = Compiler(config)

    outputs: dict[str, str] = {}
    delegates: list[DelegateRegistration] = []
    errors: list[ReportedError] = []
    compiled: list[CompiledFile] = []
    for file in files:
        result = compiler.compile_file(file)
        path = output_path_for(file)
        if path in outputs:
            logger.warning("%s overwrites output %s of an earlier file", file.file_name, path)
        outputs[path] = result.code
        delegates.extend(result.delegates)
        errors.extend(result.errors)
        compiled.append(result)

    logger.debug(
        "Compiled %d files, %d delegates, %d errors", len(compiled), len(delegates), len(errors)
    )
    if errors:
        logger.warning("Compilation reported %d errors", len(errors))
        if config.fail_on_errors:
            raise CompilationFailedError(errors)

    return CompilationResult(
        outputs=outputs,
        delegates=tuple(delegates),
        errors=tuple(errors),
        files=tuple(compiled),
    )
