"""Infrastructure layer — external system integration.

This layer wraps all interaction with the billing HTTP API and the
config files on disk.  Every raw third-party exception must be caught
here and re-raised as a :class:`~billing_cli.exceptions.BillingError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from billing_cli.infra.config import load_session
from billing_cli.infra.credit_cards_api import RequestsCreditCardsClient

__all__: list[str] = [
    "RequestsCreditCardsClient",
    "load_session",
]
