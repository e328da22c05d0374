from __future__ import annotations

import builtins
import json
import re
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

import glbridge.cli as cli
from glbridge.auth import JsonCredentialStore
from glbridge.models import LoginPasswordCredential, TokenCredential
from tests.glbridge.helpers import (
    VALID_TOKEN,
    FakeGitlabClient,
    StaticIdentityProvider,
    StaticRemotes,
)

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def _strip_ansi(output: str) -> str:
    return ANSI_ESCAPE_RE.sub("", output)


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    target = tmp_path / "data"
    monkeypatch.setenv("GLBRIDGE_DATA_DIR", str(target))
    return target


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    monkeypatch.setattr("glbridge.git.git_repo_root", lambda start, **_: root)
    monkeypatch.setattr(
        "glbridge.commands.configure.GitIdentityProvider",
        lambda repo_dir: StaticIdentityProvider("u"),
    )
    return root


def _fake_gitlab(projects: dict[str, dict]) -> object:
    return lambda base_url, token, **_: FakeGitlabClient(projects=projects)


def test_global_log_level_flag_sets_runtime_level() -> None:
    runner = CliRunner()
    with (
        patch("glbridge.cli.auth_list_cmd", lambda _args: None),
        patch("glbridge.cli.glbridge_log.set_level") as mock_set_level,
    ):
        result = runner.invoke(cli.app, ["--log-level", "debug", "auth", "list"])

    assert result.exit_code == 0
    mock_set_level.assert_called_once_with("debug")


def test_global_log_level_rejects_unknown_values() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--log-level", "loud", "auth", "list"], color=False)

    assert result.exit_code != 0
    assert "--log-level" in _strip_ansi(result.output)


def test_no_color_flag_disables_colorized_output() -> None:
    runner = CliRunner()
    with (
        patch("glbridge.cli.auth_list_cmd", lambda _args: None),
        patch("glbridge.cli.glbridge_log.set_no_color") as mock_set_no_color,
    ):
        result = runner.invoke(cli.app, ["--no-color", "auth", "list"])

    assert result.exit_code == 0
    mock_set_no_color.assert_called_once_with(True)


def test_version_flag_prints_version() -> None:
    result = CliRunner().invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == cli.__version__


def test_configure_passes_options_to_command() -> None:
    captured: list[SimpleNamespace] = []
    runner = CliRunner()
    with patch("glbridge.cli.configure_cmd", captured.append):
        result = runner.invoke(
            cli.app,
            [
                "configure",
                "--name",
                "work",
                "--url",
                "https://gitlab.com/a/b",
                "--token",
                VALID_TOKEN,
                "--non-interactive",
            ],
        )

    assert result.exit_code == 0
    args = captured[0]
    assert args.name == "work"
    assert args.url == "https://gitlab.com/a/b"
    assert args.token == VALID_TOKEN
    assert args.credential is None
    assert args.non_interactive is True


def test_configure_writes_bridge_config_and_stores_token(
    data_dir: Path, repo: Path
) -> None:
    runner = CliRunner()
    with patch(
        "glbridge.services.bridge.validate_project.GitlabClient",
        _fake_gitlab({"group/project": {"id": 42}}),
    ):
        result = runner.invoke(
            cli.app,
            [
                "configure",
                "--url",
                "git@gitlab.example.com:group/project.git",
                "--base-url",
                "https://gitlab.example.com",
                "--token",
                VALID_TOKEN,
            ],
        )

    assert result.exit_code == 0, result.output
    saved = json.loads((data_dir / "bridges" / "default.json").read_text(encoding="utf-8"))
    assert saved == {
        "target": "gitlab",
        "projectId": "42",
        "baseUrl": "https://gitlab.example.com",
    }
    assert "Project: group/project (id 42)" in result.output
    assert "projectId: 42" in result.output
    stored = JsonCredentialStore(data_dir / "credentials.json").list()
    assert [credential.kind for credential in stored] == ["token"]


def test_configure_reports_missing_url_as_error(data_dir: Path, repo: Path) -> None:
    result = CliRunner().invoke(cli.app, ["configure", "--token", VALID_TOKEN])

    assert result.exit_code == 1
    assert "you must provide a project URL" in result.output
    assert not (data_dir / "bridges" / "default.json").exists()
    assert not (data_dir / "credentials.json").exists()


def test_configure_reports_remote_lookup_failure(data_dir: Path, repo: Path) -> None:
    with patch("glbridge.services.bridge.validate_project.GitlabClient", _fake_gitlab({})):
        result = CliRunner().invoke(
            cli.app,
            ["configure", "--url", "https://gitlab.com/group/missing", "--token", VALID_TOKEN],
        )

    assert result.exit_code == 1
    assert "project validation: group/missing" in result.output
    assert not (data_dir / "credentials.json").exists()


def test_configure_rejects_invalid_bridge_name(data_dir: Path, repo: Path) -> None:
    result = CliRunner().invoke(cli.app, ["configure", "--name", "../escape"])

    assert result.exit_code == 1
    assert "invalid bridge name" in result.output


def test_auth_list_reports_empty_store(data_dir: Path) -> None:
    result = CliRunner().invoke(cli.app, ["auth", "list"])

    assert result.exit_code == 0
    assert "No stored credentials." in result.output


def test_auth_list_and_show(data_dir: Path) -> None:
    store = JsonCredentialStore(data_dir / "credentials.json")
    token = TokenCredential(user_id="u", target="gitlab", value=VALID_TOKEN, meta={"note": "ci"})
    login = LoginPasswordCredential(user_id="u", target="jira", login="me", password="pw")
    store.insert(token)
    store.insert(login)
    runner = CliRunner()

    listed = runner.invoke(cli.app, ["auth", "list", "--target", "gitlab"])
    shown = runner.invoke(cli.app, ["auth", "show", token.id[:10]])

    assert listed.exit_code == 0
    assert f"{token.human_id()} token gitlab" in listed.output
    assert login.human_id() not in listed.output
    assert shown.exit_code == 0
    assert f"Id: {token.id}" in shown.output
    assert "Value: abcdefghi…" in shown.output
    assert VALID_TOKEN not in shown.output
    assert "Meta note: ci" in shown.output


def test_auth_show_unknown_prefix_fails(data_dir: Path) -> None:
    result = CliRunner().invoke(cli.app, ["auth", "show", "ffffffff"])

    assert result.exit_code == 1
    assert "no credential found with prefix ffffffff" in result.output


def _stdin_input(prompt: str = "") -> str:
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line.rstrip("\n")


def test_configure_reads_piped_answers(
    data_dir: Path, repo: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(builtins, "input", _stdin_input)
    monkeypatch.setattr(
        "glbridge.git.GitRemotesProvider",
        lambda repo_dir: StaticRemotes({"origin": "git@gitlab.com:group/project.git"}),
    )
    store = JsonCredentialStore(data_dir / "credentials.json")
    token = TokenCredential(user_id="u", target="gitlab", value=VALID_TOKEN)
    store.insert(token)

    with patch(
        "glbridge.services.bridge.validate_project.GitlabClient",
        _fake_gitlab({"group/project": {"id": 42}}),
    ):
        result = CliRunner().invoke(cli.app, ["configure"], input="1\n2\n")

    assert result.exit_code == 0, result.output
    assert "Detected projects:" in result.output
    assert f"Using stored token {token.human_id()}" in result.output
    saved = json.loads((data_dir / "bridges" / "default.json").read_text(encoding="utf-8"))
    assert saved["projectId"] == "42"


def test_configure_fails_when_piped_input_runs_out(
    data_dir: Path, repo: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(builtins, "input", _stdin_input)
    monkeypatch.setattr("glbridge.git.GitRemotesProvider", lambda repo_dir: StaticRemotes())

    result = CliRunner().invoke(cli.app, ["configure"], input="")

    assert result.exit_code == 1
    assert "input closed" in result.output
    assert not (data_dir / "bridges" / "default.json").exists()


def test_configure_keeps_existing_bridge_when_confirmation_is_declined(
    data_dir: Path, repo: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(builtins, "input", _stdin_input)
    config_path = data_dir / "bridges" / "default.json"
    config_path.parent.mkdir(parents=True)
    existing = {"target": "gitlab", "projectId": "7", "baseUrl": "https://gitlab.com"}
    config_path.write_text(json.dumps(existing), encoding="utf-8")

    result = CliRunner().invoke(cli.app, ["configure"], input="n\n")

    assert result.exit_code == 0
    assert "Aborted." in result.output
    assert json.loads(config_path.read_text(encoding="utf-8")) == existing
