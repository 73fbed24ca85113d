"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and the CLI's
prompt implementation must satisfy.  Core code depends ONLY on these
protocols — never on ``requests`` or ``questionary`` directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal, Protocol

from billing_cli.core.models import Choice


class CreditCardsClient(Protocol):
    """Contract for the remote credit-card API.

    Implementations must map every transport or HTTP failure to
    :class:`~billing_cli.exceptions.ApiError`.
    """

    def list_cards(self) -> dict[str, Any]:
        """Return the raw ``{"cards": [...], "defaultCardId": ...}`` payload."""
        ...  # pragma: no cover

    def set_default(self, card_id: str) -> None:
        """Make *card_id* the default card of the account."""
        ...  # pragma: no cover

    def remove(self, card_id: str) -> None:
        """Delete *card_id* from the account."""
        ...  # pragma: no cover

    def add_card(self, card: dict[str, Any]) -> dict[str, Any]:
        """Store a new card and return at least ``id``, ``brand``, ``last4``."""
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the underlying connection resources."""
        ...  # pragma: no cover


class Prompter(Protocol):
    """Blocking request/response user interaction.

    Every method returns ``None`` (or ``False`` for :meth:`confirm`) when
    the user aborts instead of answering.
    """

    def select(
        self,
        message: str,
        choices: Sequence[Choice],
        *,
        abort_position: Literal["start", "end"] = "end",
    ) -> str | None:
        """Ask for one of *choices*; return its value or ``None`` on abort."""
        ...  # pragma: no cover

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; anything but an explicit yes is ``False``."""
        ...  # pragma: no cover

    def text(
        self,
        message: str,
        *,
        required: bool = True,
        secret: bool = False,
    ) -> str | None:
        """Ask for free text (hidden when *secret*); return ``None`` on abort."""
        ...  # pragma: no cover
