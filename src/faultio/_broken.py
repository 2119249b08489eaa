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

"""Streams that fail after a configurable number of bytes.

BrokenWriter simulates a destination that breaks during a write, such as a
dropped network connection or a filesystem that fills up. BrokenReadWriter
adds a read path backed by an in-memory buffer so the bytes that did land
can be inspected.
"""

from __future__ import annotations

from collections.abc import Buffer, Iterable
from dataclasses import dataclass, field

from ._buffer import ByteBuffer
from ._protocols import ByteWriter
from .dbc import ContractResult, ensure, invariant, require
from .errors import WriteFailedError
from .logging import get_logger

__all__ = [
    "BrokenReadWriter",
    "BrokenWriter",
]

logger = get_logger(__name__)


def _wrote_everything(
    _self: object,
    data: Buffer,
    *,
    result: int | None = None,
    exception: BaseException | None = None,
) -> ContractResult:
    if exception is not None:
        return True
    expected = memoryview(data).nbytes
    return result == expected, f"returned {result} for {expected} bytes"


def _non_negative_extension(_self: object, n: int) -> ContractResult:
    return n >= 0, f"extend() requires n >= 0, got {n}"


def _write_all(stream: ByteWriter, chunks: Iterable[Buffer]) -> int:
    total = 0
    for chunk in chunks:
        try:
            total += stream.write(chunk)
        except WriteFailedError as exc:
            raise WriteFailedError(total + exc.written) from exc
    return total


@invariant(
    lambda self: 0 <= self.current <= self.limit,
)
@dataclass(slots=True)
class BrokenWriter:
    """Write-only stream that fails once ``limit`` bytes have been accepted.

    No data is stored; only the running byte count is tracked. A write that
    crosses the limit is cut short: the bytes that fit are counted, ``current``
    saturates at ``limit``, and :class:`WriteFailedError` reports how many
    bytes landed.

    Example::

        writer = BrokenWriter(limit=10)
        writer.write(b"1234567")  # 7
        writer.write(b"89abc")  # raises WriteFailedError(written=3)
        writer.extend(10)
        writer.write(b"defgh")  # 5
    """

    limit: int
    current: int = field(default=0, init=False)

    @property
    def bytes_written(self) -> int:
        """Total bytes accepted so far."""
        return self.current

    @ensure(_wrote_everything)
    def write(self, data: Buffer) -> int:
        """Accept ``data`` if it fits under the limit.

        Returns:
            Number of bytes written, always ``len(data)``.

        Raises:
            WriteFailedError: If the write crosses the limit. ``written``
                holds the bytes that fit before the failure.
        """
        size = memoryview(data).nbytes
        if self.current + size <= self.limit:
            self.current += size
            return size

        spill = self.current + size - self.limit
        self.current = self.limit
        logger.debug(
            "Injected write failure.",
            event="broken_writer.write.failed",
            context={"requested": size, "written": size - spill, "limit": self.limit},
        )
        raise WriteFailedError(size - spill)

    def write_all(self, chunks: Iterable[Buffer]) -> int:
        """Write every chunk in order and return the total byte count.

        Raises:
            WriteFailedError: On the first failing chunk, with ``written``
                set to the total accepted across all chunks.
        """
        return _write_all(self, chunks)

    @require(_non_negative_extension)
    def extend(self, n: int) -> None:
        """Raise the limit by ``n`` bytes so more data can be written."""
        self.limit += n
        logger.debug(
            "Limit extended.",
            event="broken_writer.extend",
            context={"by": n, "limit": self.limit},
        )

    def reset(self) -> None:
        """Zero both the limit and the byte count.

        Nothing can be written afterwards until :meth:`extend` is called.
        """
        self.limit = 0
        self.current = 0
        logger.debug("Writer reset.", event="broken_writer.reset")


@invariant(
    lambda self: len(self._buffer) <= self.limit,
)
@dataclass(slots=True)
class BrokenReadWriter:
    """Readable and writable stream backed by a buffer capped at ``limit``.

    Writes are gated by the number of unread bytes: a write that would push
    the buffer past ``limit`` stores only the bytes that fit and raises
    :class:`WriteFailedError`. Reading drains the buffer and frees room for
    further writes.

    ``current`` is decremented by every read but never consulted by writes.
    It is kept for callers that inspect it and carries no limit of its own.
    """

    limit: int
    current: int = field(default=0, init=False)
    _buffer: ByteBuffer = field(default_factory=ByteBuffer, init=False, repr=False)

    def __len__(self) -> int:
        return len(self._buffer)

    @ensure(_wrote_everything)
    def write(self, data: Buffer) -> int:
        """Append ``data`` to the buffer if it fits under the limit.

        Raises:
            WriteFailedError: If the buffer would exceed the limit. The
                prefix that fits is stored and its length is ``written``.
        """
        view = memoryview(data).cast("B")
        buffered = len(self._buffer)
        if buffered + len(view) <= self.limit:
            return self._buffer.write(view)

        remain = max(self.limit - buffered, 0)
        if remain:
            _ = self._buffer.write(view[:remain])
        logger.debug(
            "Injected write failure.",
            event="broken_read_writer.write.failed",
            context={"requested": len(view), "written": remain, "limit": self.limit},
        )
        raise WriteFailedError(remain)

    def write_all(self, chunks: Iterable[Buffer]) -> int:
        """Write every chunk in order and return the total byte count.

        Raises:
            WriteFailedError: On the first failing chunk, with ``written``
                set to the total accepted across all chunks.
        """
        return _write_all(self, chunks)

    def readinto(self, buffer: Buffer) -> int:
        """Drain buffered bytes into ``buffer``.

        Raises:
            EndOfStreamError: If nothing is buffered and ``buffer`` is not
                empty.
        """
        count = self._buffer.readinto(buffer)
        self.current -= count
        return count

    def read(self, size: int = -1) -> bytes:
        """Drain up to ``size`` bytes (all of them when negative).

        Raises:
            EndOfStreamError: If nothing is buffered and ``size`` is not 0.
        """
        data = self._buffer.read(size)
        self.current -= len(data)
        return data

    @require(_non_negative_extension)
    def extend(self, n: int) -> None:
        """Raise the limit by ``n`` bytes."""
        self.limit += n
        logger.debug(
            "Limit extended.",
            event="broken_read_writer.extend",
            context={"by": n, "limit": self.limit},
        )

    def reset(self) -> None:
        """Discard buffered bytes. ``limit`` and ``current`` are kept."""
        logger.debug(
            "Buffer reset.",
            event="broken_read_writer.reset",
            context={"discarded": len(self._buffer)},
        )
        self._buffer.reset()
