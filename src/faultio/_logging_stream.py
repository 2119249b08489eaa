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

"""Read/write decorator that traces every transfer as hex."""

from __future__ import annotations

import sys
from collections.abc import Buffer
from typing import Self

from ._protocols import ByteReadWriter, LogSink
from .logging import get_logger

__all__ = ["LoggingStream"]

logger = get_logger(__name__)


class LoggingStream:
    """Wrap a :class:`ByteReadWriter` and trace its traffic to a sink.

    Each write emits ``[WRITE] <hex>`` before the data is handed to the
    delegate; each successful read emits ``[READ] <hex>`` afterwards. When a
    name is set every line is prefixed with ``[<name>] ``. Failed reads,
    including end of stream, are not traced. Errors from the delegate are
    never caught.

    The read trace covers the caller's whole destination buffer, not just the
    bytes filled by this read, so a reused buffer shows its stale tail.

    Example::

        sink = io.StringIO()
        stream = LoggingStream(BufferCloser(), sink=sink, name="x")
        stream.write(b"\\xab\\xcd")
        assert sink.getvalue() == "[x] [WRITE] abcd\\n"
    """

    __slots__ = ("_delegate", "_name", "_sink")

    def __init__(
        self,
        delegate: ByteReadWriter,
        *,
        sink: LogSink | None = None,
        name: str = "",
    ) -> None:
        self._delegate = delegate
        self._sink: LogSink = sys.stderr if sink is None else sink
        self._name = name

    @property
    def delegate(self) -> ByteReadWriter:
        """Stream that performs the actual transfers."""
        return self._delegate

    @property
    def sink(self) -> LogSink:
        """Destination for trace lines."""
        return self._sink

    @property
    def name(self) -> str:
        """Tag prefixed to trace lines; empty when unset."""
        return self._name

    def set_log_sink(self, sink: LogSink) -> None:
        """Send subsequent trace lines to ``sink``.

        The sink is borrowed: it is never flushed or closed by this stream.
        """
        logger.bind(name=self._name).debug(
            "Trace sink replaced.",
            event="logging_stream.sink.replaced",
            context={"sink": repr(sink)},
        )
        self._sink = sink

    def set_name(self, name: str) -> None:
        """Tag subsequent trace lines with ``name``."""
        self._name = name

    def write(self, data: Buffer) -> int:
        """Trace ``data`` then write it to the delegate."""
        self._trace("WRITE", data)
        return self._delegate.write(data)

    def readinto(self, buffer: Buffer) -> int:
        """Read from the delegate into ``buffer`` and trace the buffer."""
        count = self._delegate.readinto(buffer)
        self._trace("READ", buffer)
        return count

    def close(self) -> None:
        """Close the delegate if it supports closing."""
        close = getattr(self._delegate, "close", None)
        if callable(close):
            _ = close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def _trace(self, direction: str, data: Buffer) -> None:
        if self._name:
            _ = self._sink.write(f"[{self._name}] ")
        _ = self._sink.write(f"[{direction}] {memoryview(data).cast('B').hex()}\n")
