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

"""Instrumented byte streams for exercising I/O error paths in tests.

Streams:
    BrokenWriter: Write-only stream that fails after a byte limit.
    BrokenReadWriter: Buffer-backed stream whose writes fail past a limit.
    BufferCloser: In-memory buffer with a no-op ``close``.
    LoggingStream: Decorator tracing every read and write as hex.

Protocols:
    ByteWriter: Anything with ``write(data) -> int``.
    ByteReadWriter: ByteWriter plus ``readinto(buffer) -> int``.
    LogSink: Text destination for trace lines.
"""

from __future__ import annotations

from ._broken import BrokenReadWriter, BrokenWriter
from ._buffer import BufferCloser
from ._logging_stream import LoggingStream
from ._protocols import ByteReadWriter, ByteWriter, LogSink
from .errors import EndOfStreamError, FaultioError, WriteFailedError

__all__ = [
    "BrokenReadWriter",
    "BrokenWriter",
    "BufferCloser",
    "ByteReadWriter",
    "ByteWriter",
    "EndOfStreamError",
    "FaultioError",
    "LogSink",
    "LoggingStream",
    "WriteFailedError",
]
