"""Unit tests for logging configuration and the dispatch context filter."""

import json
import logging
import sys

import pytest

from dsspatial.common import log_utils
from dsspatial.common.log_utils import ExtraFieldsFilter, JsonFormatter, configure_logging
from dsspatial.common.tracing import connection_context, ctx_operation, operation_context


def _record():
    return logging.LogRecord("dsspatial.test", logging.INFO, __file__, 1, "message", None, None)


def test_filter_outside_dispatch():
    record = _record()

    assert ExtraFieldsFilter().filter(record) is True
    assert record.ds_operation == "-"
    assert record.ds_connection == "-"
    assert not hasattr(record, "ds")


def test_filter_inside_dispatch():
    record = _record()

    with operation_context("coordinates"), connection_context("study1"):
        ExtraFieldsFilter().filter(record)

    assert record.ds_operation == "coordinates"
    assert record.ds_connection == "study1"
    assert record.ds == {"operation": "coordinates", "connection": "study1"}


def test_context_reset_on_exit():
    with operation_context("over"):
        pass

    assert ctx_operation.get() == ""


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize("structured", [True, False])
def test_configure_logging_loads_config_file(structured, restore_logging):
    configure_logging(structured)

    handlers = logging.getLogger().handlers
    assert any(
        isinstance(f, ExtraFieldsFilter) for handler in handlers for f in handler.filters
    )


def test_configure_logging_falls_back_without_config(monkeypatch, tmp_path, restore_logging):
    monkeypatch.setattr(log_utils, "_PROJECT_ROOT", tmp_path)
    basic_config = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: basic_config.append(kwargs))

    configure_logging(False)

    assert basic_config[0]["level"] == logging.INFO


def test_json_formatter_escapes_quotes_and_newlines():
    message = 'Error in overDS: could not find function "length"\nin call'
    record = logging.LogRecord(
        "dsspatial.dispatch", logging.ERROR, __file__, 1, message, None, None
    )
    with operation_context("over"), connection_context("study1"):
        ExtraFieldsFilter().filter(record)

    line = JsonFormatter().format(record)

    assert "\n" not in line
    entry = json.loads(line)
    assert entry["message"] == message
    assert entry["level"] == "ERROR"
    assert entry["ds.operation"] == "over"
    assert entry["ds.connection"] == "study1"


def test_json_formatter_includes_stack_trace():
    try:
        raise ValueError('bad "value"')
    except ValueError:
        record = logging.LogRecord(
            "dsspatial", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    entry = json.loads(JsonFormatter().format(record))

    assert entry["ds.operation"] == "-"
    assert 'ValueError: bad "value"' in entry["error.stack_trace"]


def test_structured_logging_writes_json_lines(restore_logging, capsys):
    configure_logging(True)

    logging.getLogger("dsspatial.test").error('could not find function "length"')

    line = capsys.readouterr().err.strip().splitlines()[-1]
    assert json.loads(line)["message"] == 'could not find function "length"'
