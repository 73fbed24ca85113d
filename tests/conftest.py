"""Shared pytest fixtures and configuration for the billing-cli test suite.

Guidelines
----------
* No network access in any test — ``requests`` is mocked at the infra
  boundary and the API client is mocked everywhere else.
* No terminal interaction — prompts go through :class:`FakePrompter`.
* Tests must not depend on the user's real ``~/.now`` directory.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from billing_cli.core.models import Choice


class FakePrompter:
    """Scripted stand-in for :class:`~billing_cli.core.protocols.Prompter`.

    Records every call so tests can assert on what the user was asked.
    """

    def __init__(
        self,
        *,
        selection: str | None = None,
        confirm: bool = True,
        texts: Sequence[str | None] = (),
    ) -> None:
        self.selection = selection
        self.confirm_answer = confirm
        self._texts = list(texts)
        self.select_calls: list[tuple[str, list[Choice], str]] = []
        self.confirm_calls: list[str] = []
        self.text_calls: list[tuple[str, bool, bool]] = []

    def select(
        self,
        message: str,
        choices: Sequence[Choice],
        *,
        abort_position: str = "end",
    ) -> str | None:
        self.select_calls.append((message, list(choices), abort_position))
        return self.selection

    def confirm(self, message: str) -> bool:
        self.confirm_calls.append(message)
        return self.confirm_answer

    def text(
        self,
        message: str,
        *,
        required: bool = True,
        secret: bool = False,
    ) -> str | None:
        self.text_calls.append((message, required, secret))
        return self._texts.pop(0) if self._texts else None


@pytest.fixture
def prompter_factory() -> Callable[..., FakePrompter]:
    return FakePrompter


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point the global config directory at an empty temp dir."""
    config_dir = tmp_path / "now-home"
    config_dir.mkdir()
    monkeypatch.setenv("BILLING_GLOBAL_CONFIG", str(config_dir))
    monkeypatch.delenv("BILLING_API_URL", raising=False)
    return config_dir
