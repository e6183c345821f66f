"""Shared pytest fixtures and test helpers for asini tests."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Generator
from pathlib import Path
from unittest.mock import create_autospec

import pytest
from click.testing import CliRunner

from asini.config.settings import AsiniSettings
from asini.infrastructure.process import ProcessRunner


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ASINI_* environment out of the tests."""
    monkeypatch.delenv("ASINI_CONFIG", raising=False)
    monkeypatch.delenv("ASINI_PROJECT_ROOT", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the handler swap each CLI invocation makes via configure_logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    asini = logging.getLogger("asini")
    asini_level = asini.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    asini.setLevel(asini_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def runner() -> ProcessRunner:
    """Autospecced ProcessRunner; async methods become AsyncMocks."""
    return create_autospec(ProcessRunner, instance=True)


@pytest.fixture
def settings(tmp_path: Path) -> AsiniSettings:
    return AsiniSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Temporary directory with an initialized git repo and one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()
    for args in (
        ["git", "init"],
        ["git", "config", "user.email", "test@test.com"],
        ["git", "config", "user.name", "Test"],
        ["git", "config", "commit.gpgsign", "false"],
        ["git", "config", "tag.gpgsign", "false"],
    ):
        subprocess.run(args, cwd=repo, capture_output=True, check=True)
    (repo / ".keep").write_text("", encoding="utf-8")
    subprocess.run(["git", "add", "."], cwd=repo, capture_output=True, check=True)
    subprocess.run(["git", "commit", "-m", "init"], cwd=repo, capture_output=True, check=True)
    return repo


@pytest.fixture
def packages_dir(tmp_path: Path) -> Path:
    """A packages root holding ``package-1`` at version 1.0.0."""
    root = tmp_path / "packages"
    write_manifest(root / "package-1", {"name": "package-1", "version": "1.0.0"})
    return root


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_manifest(directory: Path, manifest: dict) -> Path:
    """Write ``package.json`` into *directory*, creating it if needed."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


def argv_calls(mock_method) -> list[list[str]]:
    """argv of every Command passed to a mocked runner method."""
    return [c.args[0].argv for c in mock_method.call_args_list]
