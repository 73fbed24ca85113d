"""Core / service layer — card models and resolution logic.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* User interaction only through the :class:`Prompter` protocol.
"""

from billing_cli.core.card_service import CardService
from billing_cli.core.models import (
    Card,
    CardCollection,
    CardSummary,
    Choice,
    NewCard,
    Session,
    Team,
    User,
)
from billing_cli.core.protocols import CreditCardsClient, Prompter
from billing_cli.core.resolution import (
    RemoveResult,
    Resolution,
    SetDefaultResult,
    TargetResolver,
)

__all__: list[str] = [
    "Card",
    "CardCollection",
    "CardService",
    "CardSummary",
    "Choice",
    "CreditCardsClient",
    "NewCard",
    "Prompter",
    "RemoveResult",
    "Resolution",
    "Session",
    "SetDefaultResult",
    "TargetResolver",
    "Team",
    "User",
]
