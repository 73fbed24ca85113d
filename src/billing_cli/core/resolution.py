"""Target resolution for ``set-default`` and ``remove``.

Both subcommands act on a single card that is either named on the
command line or picked interactively, confirmed, and then mutated
through the API.  This module owns that flow::

    START -> FETCHED -> {NO_CARDS | ID_KNOWN | PROMPTING}
          -> {NO_SELECTION | CONFIRMING} -> {DECLINED | APPLIED}
          -> [remove only: RESOLVING_NEW_DEFAULT] -> DONE

No terminal I/O happens here: the user is reached only through the
injected :class:`~billing_cli.core.protocols.Prompter`, and the results
are returned as value objects for the CLI layer to render.

An explicitly supplied card id is *not* checked against the fetched
collection.  The mutation goes ahead and the API decides whether the id
is valid; the result then carries ``card=None``.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from billing_cli.core.card_service import CardService
from billing_cli.core.models import Card, CardCollection, Choice
from billing_cli.core.protocols import Prompter
from billing_cli.exceptions import (
    CardFetchError,
    DefaultCardRefreshError,
    InvalidArgumentsError,
)
from billing_cli.utils.text import indent, mask_card_number

SET_DEFAULT_CONFIRMATION = "Are you sure that you want to set this card as the default?"
REMOVE_CONFIRMATION = "Are you sure that you want to remove this card?"


class Resolution(enum.Enum):
    """Terminal state reached by a resolution run."""

    NO_CARDS = "no-cards"
    """The account has no cards; nothing was asked or changed."""

    NO_SELECTION = "no-selection"
    """The user aborted the card picker."""

    DECLINED = "declined"
    """The user answered *no* to the confirmation."""

    APPLIED = "applied"
    """The mutating API call succeeded."""


@dataclass(frozen=True, slots=True)
class SetDefaultResult:
    resolution: Resolution
    card_id: str | None = None
    card: Card | None = None
    """Metadata of the target card, ``None`` if the id was not listed."""


@dataclass(frozen=True, slots=True)
class RemoveResult:
    resolution: Resolution
    card_id: str | None = None
    card: Card | None = None
    was_default: bool = False
    """Whether the removed card was the account default."""

    remaining: int = 0
    """Number of cards left after the removal."""

    new_default: Card | None = None
    """Default card promoted by the server, when one was looked up."""


def build_card_choices(collection: CardCollection) -> list[Choice]:
    """Build one picker entry per card, labelled like the card listing."""
    choices: list[Choice] = []
    for card in collection.cards:
        marker = " (default)" if collection.is_default(card) else ""
        label = "\n".join(
            (
                f"ID: {card.id}{marker}",
                indent(card.name, 2),
                indent(f"{card.brand} {mask_card_number(card.last4)}", 2),
            )
        )
        choices.append(Choice(label=label, value=card.id))
    return choices


class TargetResolver:
    """Drive the resolve -> confirm -> mutate flow for a single card.

    Parameters
    ----------
    service:
        Card service used for every API interaction.
    prompter:
        Any object satisfying the :class:`Prompter` protocol.
    """

    def __init__(self, service: CardService, prompter: Prompter) -> None:
        self._service = service
        self._prompter = prompter

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_default(
        self,
        args: Sequence[str],
        *,
        prompt_message: Callable[[], str],
    ) -> SetDefaultResult:
        """Resolve a card and make it the default.

        Raises
        ------
        InvalidArgumentsError
            If more than one card id is given.
        CardFetchError
            If the card list cannot be fetched.
        ApiError
            If the API rejects the change.
        """
        requested = self._single_argument(args)
        collection = self._service.fetch_cards()
        if not collection:
            return SetDefaultResult(Resolution.NO_CARDS)

        card_id = self._pick(collection, requested, prompt_message, "end")
        if not card_id:
            return SetDefaultResult(Resolution.NO_SELECTION)

        card = collection.find(card_id)
        if not self._prompter.confirm(SET_DEFAULT_CONFIRMATION):
            return SetDefaultResult(Resolution.DECLINED, card_id=card_id, card=card)

        self._service.set_default(card_id)
        return SetDefaultResult(Resolution.APPLIED, card_id=card_id, card=card)

    def remove(
        self,
        args: Sequence[str],
        *,
        prompt_message: Callable[[], str],
    ) -> RemoveResult:
        """Resolve a card and delete it.

        When the deleted card was the default and others remain, the list
        is fetched once more to learn which card the server promoted.

        Raises
        ------
        InvalidArgumentsError
            If more than one card id is given.
        CardFetchError
            If the card list cannot be fetched.
        DefaultCardRefreshError
            If the default card was removed and the follow-up fetch fails.
        ApiError
            If the API rejects the deletion.
        """
        requested = self._single_argument(args)
        collection = self._service.fetch_cards()
        if not collection:
            return RemoveResult(Resolution.NO_CARDS)

        card_id = self._pick(collection, requested, prompt_message, "start")
        if not card_id:
            return RemoveResult(Resolution.NO_SELECTION)

        card = collection.find(card_id)
        if not self._prompter.confirm(REMOVE_CONFIRMATION):
            return RemoveResult(Resolution.DECLINED, card_id=card_id, card=card)

        self._service.remove(card_id)

        was_default = card_id == collection.default_card_id
        remaining = collection.without(card_id)
        new_default: Card | None = None
        if was_default and remaining:
            new_default = self._refetch_default()

        return RemoveResult(
            Resolution.APPLIED,
            card_id=card_id,
            card=card,
            was_default=was_default,
            remaining=len(remaining),
            new_default=new_default,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _refetch_default(self) -> Card | None:
        try:
            return self._service.fetch_cards().default_card
        except CardFetchError as exc:
            raise DefaultCardRefreshError(
                str(exc), status_code=exc.status_code, code=exc.code, hint=exc.hint,
            ) from exc

    @staticmethod
    def _single_argument(args: Sequence[str]) -> str | None:
        if len(args) > 1:
            raise InvalidArgumentsError(
                "Invalid number of arguments",
                hint="Pass at most one card id.",
            )
        return args[0] if args else None

    def _pick(
        self,
        collection: CardCollection,
        requested: str | None,
        prompt_message: Callable[[], str],
        abort_position: Literal["start", "end"],
    ) -> str | None:
        if requested is not None:
            return requested
        return self._prompter.select(
            prompt_message(),
            build_card_choices(collection),
            abort_position=abort_position,
        )
