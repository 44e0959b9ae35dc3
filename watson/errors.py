from __future__ import annotations

from typing import Any


class WatsonError(Exception):
    """ Base class for all Watson errors"""

    def __init__(self, message: str = "", *, op: Any = None, offset: int | None = None):
        super().__init__(message)
        self.op = op
        self.offset = offset

    def at(self, op: Any, offset: int | None) -> WatsonError:
        """Attach the failing op and its byte offset, keeping any already set."""
        if self.op is None:
            self.op = op
        if self.offset is None:
            self.offset = offset
        return self


class WatsonStackEmpty(WatsonError):
    """ Raised when an op needs more operands than the stack holds"""


class WatsonTypeMismatch(WatsonError):
    """ Raised when an operand has the wrong kind"""

    def __init__(self, message: str = "", *, position: int = 0, expected: Any = None,
                 actual: Any = None, op: Any = None, offset: int | None = None):
        super().__init__(message, op=op, offset=offset)
        self.position = position
        self.expected = expected
        self.actual = actual


class WatsonSyntaxError(WatsonError):
    """ Raised when assembler source names an unknown op"""


class WatsonEndOfStream(WatsonError, EOFError):
    """ Raised by the lexer when the byte stream has no more ops"""


class WatsonMarshalError(WatsonError, TypeError):
    """ Raised when a Python object cannot be converted to or from a Value"""
