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

"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

import pytest

from faultio.logging import (
    StructuredLogger,
    _coerce_level,
    configure_logging,
    get_logger,
)


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def _capture(logger: logging.Logger) -> Iterator[list[logging.LogRecord]]:
    handler = _CaptureHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_structured_logger_emits_event_and_context() -> None:
    logger = get_logger("tests.logging").bind(stream="writer")
    logger.logger.setLevel(logging.DEBUG)

    with _capture(logger.logger) as records:
        logger.debug("failed", event="tests.event", context={"written": 3})

    assert len(records) == 1
    record = records[0]
    assert record.event == "tests.event"
    assert record.context == {"stream": "writer", "written": 3}
    assert record.getMessage() == "failed"


def test_extra_keys_fold_into_context() -> None:
    logger = get_logger("tests.logging.extra")
    logger.logger.setLevel(logging.INFO)

    with _capture(logger.logger) as records:
        logger.info("none-extra", event="tests.none", extra=None)
        logger.info("with-extra", extra={"event": "tests.extra", "count": 2})

    assert [record.event for record in records] == ["tests.none", "tests.extra"]
    assert records[0].context == {}
    assert records[1].context == {"count": 2}


def test_missing_event_is_rejected() -> None:
    logger = get_logger("tests.missing")
    logger.logger.setLevel(logging.INFO)

    with pytest.raises(TypeError, match="event"):
        logger.info("missing-event", extra={"detail": True})


def test_non_mapping_context_is_rejected() -> None:
    logger = get_logger("tests.bad-context")
    logger.logger.setLevel(logging.INFO)

    with pytest.raises(TypeError, match="context"):
        logger.info("bad", event="tests.bad", context=["not", "a", "mapping"])


def test_get_logger_sets_baseline_context() -> None:
    logger = get_logger("tests.logging.baseline", context={"stream": "buffer"})

    assert logger.logger is logging.getLogger("tests.logging.baseline")
    assert logger.extra == {"stream": "buffer"}


def test_bind_merges_without_mutating_parent() -> None:
    parent = get_logger("tests.logging.bind", context={"stream": "buffer"})

    child = parent.bind(name="peer")

    assert isinstance(child, StructuredLogger)
    assert child.extra == {"stream": "buffer", "name": "peer"}
    assert parent.extra == {"stream": "buffer"}


def test_configure_logging_respects_existing_handlers() -> None:
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.handlers = [handler]

    configure_logging(level="DEBUG", json_mode=True)

    assert root.handlers == [handler]
    assert root.level == logging.DEBUG


def test_configure_logging_honors_env() -> None:
    configure_logging(
        force=True,
        env={"FAULTIO_LOG_FORMAT": "json", "FAULTIO_LOG_LEVEL": "warning"},
    )

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter.__class__.__name__ == "_JsonFormatter"
    assert root.level == logging.WARNING


def test_configure_logging_defaults_to_text() -> None:
    configure_logging(force=True, env={})

    root = logging.getLogger()
    assert root.handlers[0].formatter.__class__.__name__ != "_JsonFormatter"
    assert root.level == logging.INFO


def test_json_mode_emits_structured_output(monkeypatch: pytest.MonkeyPatch) -> None:
    stream = StringIO()
    monkeypatch.setattr(sys, "stderr", stream)
    configure_logging(json_mode=True, force=True)

    logger = get_logger("tests.logging.json").bind(stream="reader")
    logger.logger.setLevel(logging.INFO)
    logger.info("payload", event="tests.json", context={"key": "value"})
    logging.getLogger().handlers[0].flush()

    payload = json.loads(stream.getvalue().strip())
    assert payload["event"] == "tests.json"
    assert payload["context"] == {"stream": "reader", "key": "value"}
    assert payload["message"] == "payload"
    assert payload["logger"] == "tests.logging.json"


def test_coerce_level() -> None:
    assert _coerce_level(logging.ERROR) == logging.ERROR
    assert _coerce_level("debug") == logging.DEBUG
    with pytest.raises(TypeError, match="Unknown log level"):
        _coerce_level("loud")
