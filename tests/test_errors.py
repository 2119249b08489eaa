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

from __future__ import annotations

import pickle

from faultio import EndOfStreamError, FaultioError, WriteFailedError


def test_write_failed_error_carries_partial_count() -> None:
    error = WriteFailedError(3)

    assert error.written == 3
    assert str(error) == "write failed"
    assert isinstance(error, FaultioError)
    assert isinstance(error, OSError)


def test_write_failed_error_survives_pickling() -> None:
    restored = pickle.loads(pickle.dumps(WriteFailedError(7, "disk full")))

    assert isinstance(restored, WriteFailedError)
    assert restored.written == 7
    assert str(restored) == "disk full"


def test_end_of_stream_error_is_eof() -> None:
    error = EndOfStreamError()

    assert isinstance(error, EOFError)
    assert isinstance(error, FaultioError)
    assert str(error) == "end of stream"
