"""Tests for BusSettings and its environment loading."""

from __future__ import annotations

import logging

import pytest

from listenerbus.config import BusSettings
from listenerbus.domain.bus import EventManager


def test_defaults():
    settings = BusSettings.from_env({})
    assert settings.failure_log_level == logging.ERROR
    assert settings.thread_safe is True


def test_log_level_by_name_or_number():
    """Level names are case-insensitive; numeric strings are accepted too."""
    assert (
        BusSettings.from_env({"LISTENERBUS_FAILURE_LOG_LEVEL": "warning"}).failure_log_level
        == logging.WARNING
    )
    assert BusSettings.from_env({"LISTENERBUS_FAILURE_LOG_LEVEL": "15"}).failure_log_level == 15


def test_unknown_log_level_rejected():
    with pytest.raises(ValueError):
        BusSettings.from_env({"LISTENERBUS_FAILURE_LOG_LEVEL": "LOUD"})


@pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("Yes", True)])
def test_thread_safe_flag(raw, expected):
    assert BusSettings.from_env({"LISTENERBUS_THREAD_SAFE": raw}).thread_safe is expected


def test_thread_safe_flag_must_be_boolean():
    with pytest.raises(ValueError):
        BusSettings.from_env({"LISTENERBUS_THREAD_SAFE": "sometimes"})


def test_manager_reads_environment(monkeypatch):
    """Without explicit settings the manager loads them from the environment."""
    monkeypatch.setenv("LISTENERBUS_FAILURE_LOG_LEVEL", "CRITICAL")
    monkeypatch.setenv("LISTENERBUS_THREAD_SAFE", "off")

    manager = EventManager()

    assert manager.settings.failure_log_level == logging.CRITICAL
    assert manager.settings.thread_safe is False
