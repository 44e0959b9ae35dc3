# Watson: a lexer and stack VM for the Watson bytecode language.
#
# Layout:
# - watson.types:   Value model (Kind, Value, constructors) and dataclass marshaling
# - watson.reader:  byte stream -> Op lexer
# - watson.vm:      Op enum, byte table, VM, assembler / disassembler
# - watson.interpreter: lexer + VM wiring with positional diagnostics

__version__ = "0.1.0"

from watson.errors import (
    WatsonError,
    WatsonStackEmpty,
    WatsonTypeMismatch,
    WatsonEndOfStream,
    WatsonMarshalError,
    WatsonSyntaxError,
)
from watson.types import Kind, Value, Nil, to_value, from_value, watson_field
from watson.vm import Op, VM
from watson.reader import Lexer, lex
from watson.interpreter import Interpreter

__all__ = [
    "__version__",
    "WatsonError",
    "WatsonStackEmpty",
    "WatsonTypeMismatch",
    "WatsonEndOfStream",
    "WatsonMarshalError",
    "WatsonSyntaxError",
    "Kind",
    "Value",
    "Nil",
    "to_value",
    "from_value",
    "watson_field",
    "Op",
    "VM",
    "Lexer",
    "lex",
    "Interpreter",
]
