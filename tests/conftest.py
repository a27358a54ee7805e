import contextlib
import io
import logging
import sys
from collections.abc import Sequence

import pytest

import narrsync.__main__ as narrsync_main


class ScriptedRandom:
    """Random source replaying fixed draws so synthesizer decisions are exact."""

    def __init__(
        self,
        draws: Sequence[float] = (),
        ints: Sequence[int] = (),
        choices: Sequence[int] = (),
    ) -> None:
        self.draws = list(draws)
        self.ints = list(ints)
        self.choices = list(choices)

    def random(self) -> float:
        if not self.draws:
            raise AssertionError("Unexpected random() draw")
        return self.draws.pop(0)

    def randint(self, a: int, b: int) -> int:
        value = self.ints.pop(0) if self.ints else a
        assert a <= value <= b
        return value

    def choice(self, seq):
        index = self.choices.pop(0) if self.choices else 0
        return seq[index]


@pytest.fixture
def scripted_rng():
    """Builds ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def run_cli(monkeypatch):
    """Run the narrsync CLI with a custom argv list."""

    def _run_cli(args: Sequence[str], *, expect_exit: bool = False) -> tuple[int, str]:
        monkeypatch.setattr(sys, "argv", ["narrsync", *args])
        monkeypatch.setattr(narrsync_main, "load_dotenv", lambda: None)
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stdout):
            try:
                narrsync_main.main()
            except SystemExit as exc:
                return exc.code, stdout.getvalue()
        if expect_exit:
            raise AssertionError("CLI did not exit as expected")
        return 0, stdout.getvalue()

    return _run_cli


@pytest.fixture(autouse=True)
def _silence_halo(monkeypatch):
    """Replace Halo spinners with a no-op context manager for tests."""

    class _DummyHalo:
        def __init__(self, *args, **kwargs):
            self.text = kwargs.get("text")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("narrsync.utils.timeline_utils.Halo", _DummyHalo, raising=False)


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
