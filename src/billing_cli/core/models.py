"""Domain models for billing-cli.

All models are **frozen** dataclasses — immutable value objects that
mirror server-side state for the lifetime of a single subcommand.  They
carry zero I/O and no dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Card:
    """A credit card stored on the billing account."""

    id: str
    """Server-assigned card identifier."""

    brand: str
    """Card network, e.g. ``Visa``."""

    last4: str
    """Last four digits of the card number."""

    name: str
    """Cardholder name."""

    address_line1: str
    address_line2: str | None
    address_city: str
    address_state: str | None
    address_zip: str
    address_country: str


@dataclass(frozen=True, slots=True)
class CardCollection:
    """All cards of an account plus the id of the default one.

    At most one card has ``id == default_card_id``; ``None`` means the
    account has no default card.
    """

    cards: tuple[Card, ...]
    default_card_id: str | None = None

    def __len__(self) -> int:
        return len(self.cards)

    def __bool__(self) -> bool:
        return len(self.cards) > 0

    def find(self, card_id: str) -> Card | None:
        """Return the card with *card_id*, or ``None`` when absent."""
        return next((card for card in self.cards if card.id == card_id), None)

    def is_default(self, card: Card) -> bool:
        return card.id == self.default_card_id

    @property
    def default_card(self) -> Card | None:
        if self.default_card_id is None:
            return None
        return self.find(self.default_card_id)

    def without(self, card_id: str) -> tuple[Card, ...]:
        """Cards that remain once *card_id* is removed."""
        return tuple(card for card in self.cards if card.id != card_id)


@dataclass(frozen=True, slots=True)
class NewCard:
    """Card details collected interactively before an ``add`` call."""

    name: str
    number: str
    ccv: str
    exp_month: str
    exp_year: str
    address_line1: str
    address_city: str
    address_state: str | None
    address_zip: str
    address_country: str


# ---------------------------------------------------------------------------
# Prompt choices
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Choice:
    """One entry of a single-choice prompt."""

    label: str
    """Text displayed to the user (may span several lines)."""

    value: str
    """Value returned when this entry is selected."""


# ---------------------------------------------------------------------------
# Session context
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Team:
    slug: str
    id: str | None = None


@dataclass(frozen=True, slots=True)
class User:
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class Session:
    """Identifies whose cards are being operated on.  Read-only."""

    token: str
    user: User
    team: Team | None = None
    api_url: str = "https://api.zeit.co"

    @property
    def owner_name(self) -> str:
        """Team slug, else username, else email — used in every message."""
        if self.team is not None:
            return self.team.slug
        return self.user.username or self.user.email or "unknown"


@dataclass(frozen=True, slots=True)
class CardSummary:
    """What the API reports back about a freshly added card."""

    id: str
    brand: str
    last4: str
