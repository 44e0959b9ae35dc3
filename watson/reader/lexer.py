"""
  Watson Lexer

- Streaming, lazy: one op per call, read one byte at a time
- Any object with read(n) -> bytes will do (BytesIO, binary files, stdin.buffer)
- Bytes outside OP_TABLE are skipped
- End of stream raises WatsonEndOfStream from next_op() and StopIteration
  from the iterator protocol; errors raised by the stream pass through untouched
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterator

from watson.errors import WatsonEndOfStream
from watson.vm.opcodes import Op, OP_TABLE

logger = logging.getLogger(__name__)


class Lexer:
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        # offset of the next unread byte, and of the byte behind the last op
        self.pos = 0
        self.offset = -1

    def next_op(self) -> Op:
        read = self.stream.read
        while True:
            b = read(1)
            if not b:
                raise WatsonEndOfStream(f"end of stream at byte {self.pos}", offset=self.pos)
            pos = self.pos
            self.pos += 1
            op = OP_TABLE.get(b[0])
            if op is None:
                logger.debug("skipping byte %r at %d", b, pos)
                continue
            self.offset = pos
            return op

    def __iter__(self) -> Iterator[Op]:
        return self

    def __next__(self) -> Op:
        try:
            return self.next_op()
        except WatsonEndOfStream:
            raise StopIteration from None


def lex(data: bytes | bytearray) -> Iterator[Op]:
    """Op generator over an in-memory program."""
    yield from Lexer(io.BytesIO(bytes(data)))
