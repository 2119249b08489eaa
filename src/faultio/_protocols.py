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

"""Stream protocol definitions.

Defines the ByteWriter, ByteReadWriter, and LogSink protocols. The streams in
this package satisfy them, and so do standard objects such as
:class:`io.BytesIO` and :data:`sys.stderr`.
"""

from __future__ import annotations

from collections.abc import Buffer
from typing import Protocol, runtime_checkable

__all__ = [
    "ByteReadWriter",
    "ByteWriter",
    "LogSink",
]


@runtime_checkable
class ByteWriter(Protocol):
    """Write-only byte stream.

    Example::

        def save(writer: ByteWriter, payload: bytes) -> None:
            written = writer.write(payload)
            assert written == len(payload)
    """

    def write(self, data: Buffer, /) -> int:
        """Write bytes to the stream.

        Args:
            data: Bytes to write.

        Returns:
            Number of bytes written.

        Raises:
            WriteFailedError: If a simulated fault stops the write partway.
        """
        ...


@runtime_checkable
class ByteReadWriter(ByteWriter, Protocol):
    """Byte stream supporting both reads and writes.

    Anything with ``write`` and ``readinto`` conforms, which makes this the
    delegate type accepted by :class:`~faultio.LoggingStream`.
    """

    def readinto(self, buffer: Buffer, /) -> int:
        """Read bytes into a caller-supplied writable buffer.

        Args:
            buffer: Destination (``bytearray`` or writable ``memoryview``).

        Returns:
            Number of bytes copied into ``buffer``.

        Raises:
            EndOfStreamError: If no data is available and ``buffer`` is
                non-empty.
        """
        ...


@runtime_checkable
class LogSink(Protocol):
    """Write-only text destination for trace lines."""

    def write(self, text: str, /) -> object:
        """Write ``text`` to the sink."""
        ...
