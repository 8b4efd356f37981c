from __future__ import annotations

from stackscript.api import compile_source, run_file, run_source, tokenize_source
from stackscript.engine import ExecutionResult, HaltReason, Interpreter, execute
from stackscript.errors import (
    CodegenError,
    DivisionByZero,
    ScriptError,
    ScriptSyntaxError,
    StackUnderflow,
    TypeMismatch,
    VMError,
)
from stackscript.lexer import strip_comments, tokenize, tokenize_executable
from stackscript.tokens import Token, TokenKind
from stackscript.values import Integer, Text, Value

__all__ = [
    "__version__",
    # API
    "compile_source",
    "run_file",
    "run_source",
    "tokenize_source",
    # Tokenizer
    "Token",
    "TokenKind",
    "tokenize",
    "tokenize_executable",
    "strip_comments",
    # Engine
    "Interpreter",
    "ExecutionResult",
    "HaltReason",
    "execute",
    # Values
    "Integer",
    "Text",
    "Value",
    # Errors
    "ScriptError",
    "ScriptSyntaxError",
    "VMError",
    "StackUnderflow",
    "TypeMismatch",
    "DivisionByZero",
    "CodegenError",
]

__version__ = "0.1.0"
