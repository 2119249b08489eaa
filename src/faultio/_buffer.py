# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""In-memory byte buffers.

Provides the FIFO ByteBuffer shared by the buffer-backed streams, and
BufferCloser, a buffer that also satisfies a closeable-stream contract.
"""

from __future__ import annotations

from collections.abc import Buffer, Iterable
from dataclasses import dataclass, field
from typing import Self

from .errors import EndOfStreamError
from .logging import get_logger

__all__ = [
    "BufferCloser",
    "ByteBuffer",
]

logger = get_logger(__name__)


@dataclass(slots=True)
class ByteBuffer:
    """Growable FIFO byte buffer.

    Writes append to the back and reads drain from the front. Once every
    byte has been read the storage is released. Consumed bytes are also
    dropped once they make up half of the storage, so interleaved reads and
    writes never retain more than twice the unread size.
    """

    _data: bytearray = field(default_factory=bytearray)
    _offset: int = 0

    def __len__(self) -> int:
        return len(self._data) - self._offset

    def write(self, data: Buffer) -> int:
        chunk = memoryview(data).cast("B")
        self._data += chunk
        return len(chunk)

    def readinto(self, buffer: Buffer) -> int:
        target = memoryview(buffer).cast("B")
        if not self:
            self.reset()
            if len(target) == 0:
                return 0
            raise EndOfStreamError
        count = min(len(target), len(self))
        target[:count] = self._data[self._offset : self._offset + count]
        self._advance(count)
        return count

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        if not self:
            self.reset()
            raise EndOfStreamError
        count = len(self) if size < 0 else min(size, len(self))
        data = bytes(self._data[self._offset : self._offset + count])
        self._advance(count)
        return data

    def _advance(self, count: int) -> None:
        self._offset += count
        if self._offset == len(self._data):
            self.reset()
        elif self._offset * 2 >= len(self._data):
            # Consumed prefix dominates; slide unread bytes to the front.
            del self._data[: self._offset]
            self._offset = 0

    def getvalue(self) -> bytes:
        return bytes(self._data[self._offset :])

    def reset(self) -> None:
        self._data.clear()
        self._offset = 0


@dataclass(slots=True)
class BufferCloser:
    """Byte buffer wrapped with a no-op ``close`` method.

    Use it wherever code under test demands a closeable stream but the test
    only needs an in-memory buffer. Closing does not release anything, so the
    contents stay inspectable after the code under test closes the stream.

    Example::

        buf = BufferCloser.from_string("hello")
        assert buf.contents() == b"hello"

        with BufferCloser() as out:
            export(out)
        assert out.contents().startswith(b"HEADER")
    """

    _buffer: ByteBuffer = field(default_factory=ByteBuffer, init=False)

    @classmethod
    def from_bytes(cls, data: Buffer) -> BufferCloser:
        """Create a buffer holding a copy of ``data``.

        Intended for preparing a stream that code under test reads from.
        Pass ``b""`` for an empty buffer to write into.
        """
        buf = cls()
        _ = buf.write(data)
        return buf

    @classmethod
    def from_string(cls, text: str, encoding: str = "utf-8") -> BufferCloser:
        """Create a buffer holding ``text`` encoded with ``encoding``."""
        return cls.from_bytes(text.encode(encoding))

    def __len__(self) -> int:
        return len(self._buffer)

    def write(self, data: Buffer) -> int:
        """Append ``data``. Never fails."""
        return self._buffer.write(data)

    def write_all(self, chunks: Iterable[Buffer]) -> int:
        """Append every chunk in order and return the total byte count."""
        return sum(self._buffer.write(chunk) for chunk in chunks)

    def readinto(self, buffer: Buffer) -> int:
        """Drain buffered bytes into ``buffer``.

        Raises:
            EndOfStreamError: If the buffer is empty and ``buffer`` is not.
        """
        return self._buffer.readinto(buffer)

    def read(self, size: int = -1) -> bytes:
        """Drain up to ``size`` bytes (all of them when negative).

        Raises:
            EndOfStreamError: If the buffer is empty and ``size`` is not 0.
        """
        return self._buffer.read(size)

    def contents(self) -> bytes:
        """Return a copy of the unread bytes without consuming them."""
        return self._buffer.getvalue()

    def reset(self) -> None:
        """Discard all buffered bytes."""
        logger.debug(
            "Buffer reset.",
            event="buffer_closer.reset",
            context={"discarded": len(self._buffer)},
        )
        self._buffer.reset()

    def close(self) -> None:
        """Do nothing; present so the buffer satisfies closeable contracts."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()
