from __future__ import annotations

import pytest

import glbridge.log as glbridge_log


def test_level_defaults_to_info(capsys: pytest.CaptureFixture[str]) -> None:
    glbridge_log.debug("hidden")
    glbridge_log.info("shown")

    captured = capsys.readouterr()
    assert "hidden" not in captured.out
    assert "shown" in captured.out


def test_level_reads_environment(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("GLBRIDGE_LOG_LEVEL", "debug")

    glbridge_log.debug("visible")

    assert "visible" in capsys.readouterr().out


def test_set_level_overrides_environment(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("GLBRIDGE_LOG_LEVEL", "trace")
    glbridge_log.set_level("error")

    glbridge_log.warning("quiet")
    glbridge_log.error("loud")

    captured = capsys.readouterr()
    assert "quiet" not in captured.err
    assert "loud" in captured.err


def test_unknown_level_falls_back_to_info() -> None:
    glbridge_log.set_level("verbose")

    assert glbridge_log.configured_level() is glbridge_log.LogLevel.INFO


def test_no_color_sources(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("GLBRIDGE_NO_COLOR", raising=False)
    assert glbridge_log._no_color() is False

    monkeypatch.setenv("GLBRIDGE_NO_COLOR", "1")
    assert glbridge_log._no_color() is True

    monkeypatch.delenv("GLBRIDGE_NO_COLOR")
    glbridge_log.set_no_color(True)
    assert glbridge_log._no_color() is True


def test_parse_level_accepts_every_name_and_warn_alias() -> None:
    for name in glbridge_log.LOG_LEVEL_NAMES:
        assert glbridge_log.parse_level(f" {name.upper()} ").name.lower() == name
    assert glbridge_log.parse_level("warn") is glbridge_log.LogLevel.WARNING
    assert glbridge_log.parse_level(None) is glbridge_log.LogLevel.INFO
