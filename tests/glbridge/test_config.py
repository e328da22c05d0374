from __future__ import annotations

import json
from pathlib import Path

import pytest

import glbridge.config as config
from glbridge.services import InvalidConfigurationShapeError, IoFailedError

VALID = {"target": "gitlab", "projectId": "42", "baseUrl": "https://gitlab.example.com"}


def test_validate_configuration_accepts_complete_mapping() -> None:
    config.validate_configuration(VALID)


@pytest.mark.parametrize("missing", ["target", "projectId", "baseUrl"])
def test_validate_configuration_requires_every_key(missing: str) -> None:
    conf = {key: value for key, value in VALID.items() if key != missing}

    with pytest.raises(InvalidConfigurationShapeError, match=f"missing {missing} key"):
        config.validate_configuration(conf)


@pytest.mark.parametrize(
    "overrides",
    [
        {"target": "github"},
        {"projectId": "abc"},
        {"projectId": "-1"},
        {"baseUrl": "  "},
    ],
)
def test_validate_configuration_rejects_bad_values(overrides: dict[str, str]) -> None:
    with pytest.raises(InvalidConfigurationShapeError) as excinfo:
        config.validate_configuration({**VALID, **overrides})

    assert excinfo.value.code == "invalid_configuration_shape"


def test_bridge_config_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "bridges" / "default.json"

    config.write_bridge_config(path, VALID)
    loaded = config.load_bridge_config(path)

    assert json.loads(path.read_text(encoding="utf-8")) == VALID
    assert loaded is not None
    assert loaded.project_id == 42
    assert loaded.as_mapping() == VALID


def test_load_bridge_config_returns_none_when_missing(tmp_path: Path) -> None:
    assert config.load_bridge_config(tmp_path / "absent.json") is None


def test_load_bridge_config_rejects_corrupt_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")

    with pytest.raises(IoFailedError):
        config.load_bridge_config(path)


def test_load_bridge_config_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(InvalidConfigurationShapeError):
        config.load_bridge_config(path)


def test_write_bridge_config_refuses_invalid_mapping(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"

    with pytest.raises(InvalidConfigurationShapeError):
        config.write_bridge_config(path, {"target": "gitlab"})

    assert not path.exists()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("", 10.0), ("3", 3.0), ("0", 10.0), ("-2", 10.0), ("later", 10.0)],
)
def test_resolve_http_timeout(raw: str, expected: float) -> None:
    assert config.resolve_http_timeout({config.HTTP_TIMEOUT_ENV: raw}) == expected


def test_resolve_http_timeout_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GLBRIDGE_HTTP_TIMEOUT", "7.5")

    assert config.resolve_http_timeout() == 7.5
