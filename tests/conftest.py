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

from collections.abc import Iterator
from io import StringIO

import pytest

import faultio.dbc as dbc_module


@pytest.fixture
def sink() -> StringIO:
    """Return an in-memory text sink for trace lines."""

    return StringIO()


@pytest.fixture
def dbc_on(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Force contract checks on for the duration of a test."""

    monkeypatch.delenv("FAULTIO_DBC", raising=False)
    dbc_module.enable_dbc()
    yield
    dbc_module._forced_state = None
