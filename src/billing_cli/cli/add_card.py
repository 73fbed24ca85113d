"""Interactive ``billing add`` flow.

Asks for the card details one field at a time and hands them to the
card service.  Card data is not validated locally; the API is the only
judge of what is acceptable.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from billing_cli.cli import exit_codes, render
from billing_cli.cli.console import console
from billing_cli.core.card_service import CardService
from billing_cli.core.models import NewCard, Session
from billing_cli.core.protocols import Prompter


def split_expiry(raw: str) -> tuple[str, str]:
    """Split ``"MM / YY"`` into ``("MM", "YY")``.

    Input without a slash is returned whole as the month so that the API
    can reject it with its own message.
    """
    month, sep, year = raw.partition("/")
    if not sep:
        return raw.strip(), ""
    return month.strip(), year.strip()


def collect_new_card(prompter: Prompter) -> NewCard | None:
    """Prompt for every field; ``None`` as soon as the user aborts."""
    answers: dict[str, str | None] = {}
    fields: tuple[tuple[str, str, bool, bool], ...] = (
        # key, label, required, secret
        ("name", "Full name", True, False),
        ("number", "Number", True, False),
        ("ccv", "CCV", True, True),
        ("expiry", "Exp. Date (MM / YY)", True, False),
        ("country", "Country", True, False),
        ("zip", "ZIP", True, False),
        ("state", "State", False, False),
        ("city", "City", True, False),
        ("address", "Address", True, False),
    )
    for key, label, required, secret in fields:
        answer = prompter.text(label, required=required, secret=secret)
        if answer is None:
            return None
        answers[key] = answer or None

    exp_month, exp_year = split_expiry(answers["expiry"] or "")
    return NewCard(
        name=answers["name"] or "",
        number=(answers["number"] or "").replace(" ", ""),
        ccv=answers["ccv"] or "",
        exp_month=exp_month,
        exp_year=exp_year,
        address_line1=answers["address"] or "",
        address_city=answers["city"] or "",
        address_state=answers["state"],
        address_zip=answers["zip"] or "",
        address_country=answers["country"] or "",
    )


def handle_add(
    service: CardService,
    prompter: Prompter,
    session: Session,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Run the add flow and report the stored card."""
    console.print(
        render.info(f"Enter your card details for {render.owner(session.owner_name)}")
    )
    card = collect_new_card(prompter)
    if card is None:
        console.print("No changes made")
        return exit_codes.SUCCESS

    start = clock()
    summary = service.add_card(card)
    console.print(render.card_added(summary, session.owner_name, clock() - start))
    return exit_codes.SUCCESS
