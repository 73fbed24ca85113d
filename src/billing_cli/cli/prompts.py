"""questionary-backed implementation of :class:`~billing_cli.core.protocols.Prompter`.

All terminal interaction of the application goes through
:class:`QuestionaryPrompter`.  ``questionary`` returns ``None`` when the
user presses Ctrl+C or Esc; that is surfaced as an abort, never as an
exception.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal

from billing_cli.core.models import Choice
from billing_cli.exceptions import EnvironmentError

ABORT_LABEL = "Abort"
_ABORT_VALUE = "__abort__"


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _require_value(value: str) -> bool | str:
    return bool(value.strip()) or "This field is required."


class QuestionaryPrompter:
    """Interactive prompts rendered with questionary arrow-key widgets.

    This class satisfies the :class:`~billing_cli.core.protocols.Prompter`
    protocol structurally — no explicit inheritance required.
    """

    def select(
        self,
        message: str,
        choices: Sequence[Choice],
        *,
        abort_position: Literal["start", "end"] = "end",
    ) -> str | None:
        questionary = _import_questionary()

        entries: list[Any] = []
        for index, choice in enumerate(choices):
            if index:
                entries.append(questionary.Separator())
            entries.append(questionary.Choice(title=choice.label, value=choice.value))

        abort = questionary.Choice(title=ABORT_LABEL, value=_ABORT_VALUE)
        if abort_position == "start":
            entries = [abort, questionary.Separator(), *entries]
        else:
            entries = [*entries, questionary.Separator(), abort]

        selected: str | None = questionary.select(
            message,
            choices=entries,
            use_arrow_keys=True,
            use_shortcuts=False,
        ).ask()  # Returns None on Ctrl+C / Esc

        if selected is None or selected == _ABORT_VALUE:
            return None
        return selected

    def confirm(self, message: str) -> bool:
        questionary = _import_questionary()
        answer: bool | None = questionary.confirm(message, default=False).ask()
        return bool(answer)

    def text(
        self,
        message: str,
        *,
        required: bool = True,
        secret: bool = False,
    ) -> str | None:
        questionary = _import_questionary()
        factory = questionary.password if secret else questionary.text
        validate = _require_value if required else None
        answer: str | None = factory(message, validate=validate).ask()
        if answer is None:
            return None
        return answer.strip()
