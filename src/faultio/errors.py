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

"""Base exception hierarchy for :mod:`faultio`."""

from __future__ import annotations

__all__ = [
    "EndOfStreamError",
    "FaultioError",
    "WriteFailedError",
]


class FaultioError(Exception):
    """Base class for all faultio exceptions.

    Callers under test can catch every failure injected by this package with
    a single handler while standard Python exceptions propagate normally.

    Example:
        Asserting that code under test surfaces an injected failure::

            writer = BrokenWriter(limit=4)
            with pytest.raises(FaultioError):
                save_report(writer)

    Note:
        Subclasses also inherit from the matching built-in exception
        (``OSError``, ``EOFError``) so handlers written against the standard
        library keep working.
    """


class WriteFailedError(FaultioError, OSError):
    """Raised when a write would exceed a broken stream's byte limit.

    The failure models a short write: ``written`` holds the number of bytes
    that landed before the simulated fault, the same way
    :class:`BlockingIOError` reports ``characters_written``.

    Example:
        Verifying short-write handling::

            writer = BrokenWriter(limit=10)
            writer.write(b"x" * 7)
            try:
                writer.write(b"y" * 5)
            except WriteFailedError as exc:
                assert exc.written == 3

    Attributes:
        written: Bytes accepted before the failure.
    """

    def __init__(self, written: int, message: str = "write failed") -> None:
        super().__init__(message)
        self.written = written

    def __reduce__(self) -> tuple[type[WriteFailedError], tuple[int, str]]:
        return type(self), (self.written, str(self))


class EndOfStreamError(FaultioError, EOFError):
    """Raised when reading from a drained in-memory buffer.

    Reads into a zero-length destination never raise; only a read that
    wanted data and found none does.
    """

    def __init__(self, message: str = "end of stream") -> None:
        super().__init__(message)
