# ruff: noqa: E402

import builtins
import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import glbridge.io as io
import glbridge.log as glbridge_log

DOCTEST_MODULES = {
    ROOT / "src" / "glbridge" / "__init__.py",
    ROOT / "src" / "glbridge" / "auth.py",
    ROOT / "src" / "glbridge" / "config.py",
    ROOT / "src" / "glbridge" / "git.py",
    ROOT / "src" / "glbridge" / "gitlab.py",
    ROOT / "src" / "glbridge" / "identity.py",
    ROOT / "src" / "glbridge" / "log.py",
    ROOT / "src" / "glbridge" / "models.py",
    ROOT / "src" / "glbridge" / "paths.py",
    ROOT / "src" / "glbridge" / "selection.py",
    ROOT / "src" / "glbridge" / "services" / "bridge" / "resolve_credential.py",
}


@pytest.fixture(autouse=True)
def _default_io_patches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(io, "_use_questionary", lambda: False)
    monkeypatch.setattr(glbridge_log, "_configured_level", None)
    monkeypatch.setattr(glbridge_log, "_no_color_override", None)
    monkeypatch.delenv("GLBRIDGE_LOG_LEVEL", raising=False)

    def fail_input(prompt: str = "") -> str:
        raise AssertionError("prompted unexpectedly")

    monkeypatch.setattr(builtins, "input", fail_input)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
