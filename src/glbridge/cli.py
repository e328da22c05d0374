"""Typer entrypoint for the glbridge CLI."""

from __future__ import annotations

from enum import Enum
from types import SimpleNamespace
from typing import Annotated

import typer

from . import __version__
from . import log as glbridge_log
from .commands import configure_bridge as configure_cmd
from .commands import list_credentials as auth_list_cmd
from .commands import show_credential as auth_show_cmd

app = typer.Typer(
    name="glbridge",
    help="Bind a git repository to a GitLab project.",
    no_args_is_help=True,
    add_completion=False,
)
auth_app = typer.Typer(help="Inspect stored bridge credentials.", no_args_is_help=True)
app.add_typer(auth_app, name="auth")

LogLevelName = Enum(  # type: ignore[misc]
    "LogLevelName", {name.upper(): name for name in glbridge_log.LOG_LEVEL_NAMES}, type=str
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    log_level: Annotated[
        LogLevelName | None,
        typer.Option("--log-level", help="Log level for terminal output.", case_sensitive=False),
    ] = None,
    no_color: Annotated[
        bool, typer.Option("--no-color", help="Disable colorized output.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show the version."
        ),
    ] = False,
) -> None:
    if log_level is not None:
        glbridge_log.set_level(log_level.value)
    if no_color:
        glbridge_log.set_no_color(True)


@app.command("configure")
def configure(
    name: Annotated[str, typer.Option("--name", "-n", help="Bridge name.")] = "default",
    url: Annotated[str | None, typer.Option("--url", "-u", help="GitLab project URL.")] = None,
    base_url: Annotated[
        str | None, typer.Option("--base-url", "-b", help="GitLab instance base URL.")
    ] = None,
    token: Annotated[
        str | None, typer.Option("--token", "-t", help="Raw personal access token.")
    ] = None,
    credential: Annotated[
        str | None,
        typer.Option("--credential", "-c", help="Id prefix of a stored credential."),
    ] = None,
    project: Annotated[
        str | None, typer.Option("--project", help="Ignored for GitLab bridges.")
    ] = None,
    owner: Annotated[
        str | None, typer.Option("--owner", help="Ignored for GitLab bridges.")
    ] = None,
    non_interactive: Annotated[
        bool,
        typer.Option(
            "--non-interactive", help="Never prompt; fail when --url or a token is missing."
        ),
    ] = False,
) -> None:
    """Configure a GitLab bridge for the current repository."""
    configure_cmd(
        SimpleNamespace(
            name=name,
            url=url,
            base_url=base_url,
            token=token,
            credential=credential,
            project=project,
            owner=owner,
            non_interactive=non_interactive,
        )
    )


@auth_app.command("list")
def auth_list(
    target: Annotated[
        str | None, typer.Option("--target", help="Only show credentials for this target.")
    ] = None,
) -> None:
    """List stored credentials."""
    auth_list_cmd(SimpleNamespace(target=target))


@auth_app.command("show")
def auth_show(
    prefix: Annotated[str, typer.Argument(help="Credential id prefix.")],
) -> None:
    """Show a stored credential."""
    auth_show_cmd(SimpleNamespace(prefix=prefix))


if __name__ == "__main__":
    app()
