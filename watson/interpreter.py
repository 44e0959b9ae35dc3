from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO

from watson.errors import WatsonError
from watson.reader.lexer import Lexer
from watson.types.value import Value
from watson.vm.vm import VM

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Reads Watson programs and runs them on a VM.
    The VM (and so its stack) persists across calls, so programs can be fed in pieces.
    """

    def __init__(self, vm: VM | None = None, *, trace: bool | None = None):
        self.vm: VM = vm if vm is not None else VM(trace=trace)

    def run(self, stream: BinaryIO) -> Value:
        lexer = Lexer(stream)
        count = 0
        for op in lexer:
            try:
                self.vm.feed(op)
            except WatsonError as err:
                err.at(op, lexer.offset)
                logger.debug("failed at byte %d (%s): %s", lexer.offset, op.name, err)
                raise
            count += 1
        logger.debug("ran %d op(s), sp=%d", count, self.vm.sp)
        return self.vm.top()

    def run_bytes(self, data: bytes | bytearray) -> Value:
        return self.run(io.BytesIO(bytes(data)))

    def run_file(self, path: str | os.PathLike) -> Value:
        with open(path, 'rb') as f:
            return self.run(f)
