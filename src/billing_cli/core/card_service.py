"""Core card service — typed access to the credit-card API.

Depends on a :class:`~billing_cli.core.protocols.CreditCardsClient`
injected at construction time, converting its raw payloads into domain
models and guaranteeing that only
:class:`~billing_cli.exceptions.BillingError` subclasses escape.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from billing_cli.core.models import Card, CardCollection, CardSummary, NewCard
from billing_cli.core.protocols import CreditCardsClient
from billing_cli.exceptions import ApiError, BillingError, CardFetchError

_T = TypeVar("_T")


class CardService:
    """Stateless wrapper around a credit-card API client.

    Parameters
    ----------
    client:
        Any object satisfying the :class:`CreditCardsClient` protocol.
    """

    def __init__(self, client: CreditCardsClient) -> None:
        self._client: CreditCardsClient = client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_cards(self) -> CardCollection:
        """Fetch a fresh :class:`CardCollection`.

        Raises
        ------
        CardFetchError
            If the API cannot return the card list.
        """
        try:
            raw = self._client.list_cards()
        except BillingError as exc:
            raise CardFetchError(
                str(exc),
                status_code=getattr(exc, "status_code", None),
                code=getattr(exc, "code", None),
                hint=exc.hint,
            ) from exc
        except Exception as exc:
            raise CardFetchError(f"Unexpected API client error: {exc}") from exc
        return self._parse_collection(raw)

    def set_default(self, card_id: str) -> None:
        self._call(self._client.set_default, card_id)

    def remove(self, card_id: str) -> None:
        self._call(self._client.remove, card_id)

    def add_card(self, card: NewCard) -> CardSummary:
        """Store *card* and return what the API reports about it."""
        raw = self._call(self._client.add_card, self._serialize_new_card(card))
        return CardSummary(
            id=str(raw.get("id", "")),
            brand=str(raw.get("brand", "")),
            last4=str(raw.get("last4", "")),
        )

    # ------------------------------------------------------------------
    # Client delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _call(method: Callable[..., _T], *args: Any) -> _T:
        """Invoke a client method and ensure only our exceptions escape."""
        try:
            return method(*args)
        except BillingError:
            raise
        except Exception as exc:
            raise ApiError(f"Unexpected API client error: {exc}") from exc

    # ------------------------------------------------------------------
    # Raw-dict <-> domain-model conversion (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _optional(raw: dict[str, Any], key: str) -> str | None:
        value = raw.get(key)
        return str(value) if value else None

    @classmethod
    def _parse_card(cls, raw: dict[str, Any]) -> Card:
        """Convert one raw card dict to a :class:`Card`."""
        return Card(
            id=str(raw.get("id", "")),
            brand=str(raw.get("brand") or "Unknown"),
            last4=str(raw.get("last4") or ""),
            name=str(raw.get("name") or ""),
            address_line1=str(raw.get("address_line1") or ""),
            address_line2=cls._optional(raw, "address_line2"),
            address_city=str(raw.get("address_city") or ""),
            address_state=cls._optional(raw, "address_state"),
            address_zip=str(raw.get("address_zip") or ""),
            address_country=str(raw.get("address_country") or ""),
        )

    @classmethod
    def _parse_collection(cls, raw: dict[str, Any]) -> CardCollection:
        """Convert the list payload, dropping malformed and duplicate cards."""
        entries: object = raw.get("cards")
        if not isinstance(entries, list):
            entries = []

        cards: list[Card] = []
        seen: set[str] = set()
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            card = cls._parse_card(entry)
            # A repeated id would let two cards claim the default.
            if card.id in seen:
                continue
            seen.add(card.id)
            cards.append(card)

        default_id = raw.get("defaultCardId")
        return CardCollection(
            cards=tuple(cards),
            default_card_id=str(default_id) if default_id else None,
        )

    @staticmethod
    def _serialize_new_card(card: NewCard) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": card.name,
            "number": card.number,
            "cvc": card.ccv,
            "exp_month": card.exp_month,
            "exp_year": card.exp_year,
            "address_line1": card.address_line1,
            "address_city": card.address_city,
            "address_zip": card.address_zip,
            "address_country": card.address_country,
        }
        if card.address_state:
            payload["address_state"] = card.address_state
        return payload
