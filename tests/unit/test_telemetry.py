"""Unit tests for snap_state/telemetry.py"""

import importlib
import logging

import pytest

from snap_state import telemetry


@pytest.fixture
def bare_root(monkeypatch):
    """Root logger with no handlers, restored after the test."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    level = root.level
    root.setLevel(logging.WARNING)
    yield root
    root.setLevel(level)


def test_import_leaves_root_logger_alone(bare_root):
    importlib.reload(telemetry)

    assert bare_root.handlers == []
    assert bare_root.level == logging.WARNING


def test_configure_logging_sets_handler_and_level(bare_root):
    telemetry.configure_logging("debug")

    assert len(bare_root.handlers) == 1
    assert bare_root.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(bare_root):
    telemetry.configure_logging("chatty")

    assert bare_root.level == logging.INFO


def test_logger_emits_json_through_stdlib(caplog):
    caplog.set_level(logging.INFO)

    telemetry.get_logger("snap_state.test").info("state_loaded", namespace="ns-a")

    messages = [record.getMessage() for record in caplog.records]
    assert any('"event": "state_loaded"' in m and '"namespace": "ns-a"' in m for m in messages)
