"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import pytest

from tastrails import config


def test_env_float_parses_and_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASTRAILS_TEST_FLOAT", "0.0002")
    assert config._env_float("TASTRAILS_TEST_FLOAT", 1.0) == 0.0002

    monkeypatch.setenv("TASTRAILS_TEST_FLOAT", "fifteen metres")
    assert config._env_float("TASTRAILS_TEST_FLOAT", 1.0) == 1.0


def test_env_int_falls_back_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TASTRAILS_TEST_INT", raising=False)
    assert config._env_int("TASTRAILS_TEST_INT", 7) == 7


@pytest.mark.parametrize(
    "raw, expected",
    [("yes", True), ("ON", True), ("0", False), ("off", False), ("maybe", True)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("TASTRAILS_TEST_BOOL", raw)
    assert config._env_bool("TASTRAILS_TEST_BOOL", True) is expected


def test_default_simplify_tolerance_is_about_fifteen_metres() -> None:
    # 0.00015 degrees of latitude is ~16.7 m.
    assert config.SIMPLIFY_TOLERANCE_DEG == pytest.approx(0.00015)
