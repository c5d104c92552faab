"""PHP code generation for the phpgen compiler.

Modules:
- exprs: PHP expression values, precedence and literal helpers
- scope: local variable scope stack
- code_builder: indented line buffer and output accumulator
- translate: template expressions -> PHP expressions
- gen_exprs: expression-capable nodes -> PHP expressions
- calls: template and delegate call expressions
- messages, msg_id: translatable messages
- core, statements: the statement emission visitor

Import ``Compiler`` from ``phpgen.compiler.core``; this package keeps no
eager imports so leaf modules can be imported on their own.
"""
