import os
from collections.abc import Iterator
from pathlib import Path

import pytest


class ScriptedInput:
    """Stands in for input(): replays canned answers and records the questions."""

    def __init__(self, *answers: str) -> None:
        self._answers: Iterator[str] = iter(answers)
        self.questions: list[str] = []

    def __call__(self, question: str) -> str:
        self.questions.append(question)
        return next(self._answers)


@pytest.fixture
def scripted_input() -> type[ScriptedInput]:
    return ScriptedInput


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's config files and FFMCAST_ variables out of the test."""
    for var in list(os.environ):
        if var.upper().startswith("FFMCAST_"):
            monkeypatch.delenv(var)

    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)

    return tmp_path
