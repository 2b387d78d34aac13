"""Shared pytest fixtures for calcscript tests."""

from pathlib import Path

import pytest

from calcscript import Context, EngineConfig, eval_source


@pytest.fixture
def ctx() -> Context:
    """Return a fresh evaluation context."""
    return Context()


@pytest.fixture
def run():
    """Evaluate source in a fresh context and return the result."""

    def _run(source: str, config: EngineConfig | None = None) -> float:
        return eval_source(source, Context(config))

    return _run


@pytest.fixture
def script(tmp_path: Path):
    """Write a calcscript file into a temporary directory."""

    def _write(source: str, name: str = "program.calc") -> Path:
        path = tmp_path / name
        path.write_text(source)
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from CALCSCRIPT_* variables and stray config files."""
    for name in ("CALCSCRIPT_STRICT_DIVISION", "CALCSCRIPT_MAX_CALL_DEPTH", "CALCSCRIPT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
