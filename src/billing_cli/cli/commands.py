"""Subcommand handlers and dispatch for ``billing``.

Each handler receives everything it needs as parameters and returns an
exit code.  Card-fetch failures are reported here: a failed initial fetch
ends the subcommand with exit 0 since nothing was changed, while a failed
lookup of the new default after a removal exits 1.  Every other
:class:`~billing_cli.exceptions.BillingError` propagates to the error
boundary in :mod:`billing_cli.cli.app`.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from billing_cli.cli import exit_codes, render
from billing_cli.cli.add_card import handle_add
from billing_cli.cli.console import console, err_console
from billing_cli.core.card_service import CardService
from billing_cli.core.models import Session
from billing_cli.core.protocols import CreditCardsClient, Prompter
from billing_cli.core.resolution import Resolution, TargetResolver
from billing_cli.exceptions import CardFetchError, DefaultCardRefreshError

Clock = Callable[[], float]

LIST_COMMANDS = ("ls", "list")
SET_DEFAULT_COMMANDS = ("set-default",)
REMOVE_COMMANDS = ("rm", "remove")
ADD_COMMANDS = ("add",)
SUBCOMMANDS = LIST_COMMANDS + SET_DEFAULT_COMMANDS + REMOVE_COMMANDS + ADD_COMMANDS


def _report_fetch_error(exc: CardFetchError, *, code: int = exit_codes.SUCCESS) -> int:
    err_console.print(render.failure(exc))
    if exc.hint:
        err_console.print(render.hint(exc.hint))
    return code


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def handle_list(service: CardService, session: Session, *, clock: Clock) -> int:
    """Print every card of the account."""
    start = clock()
    try:
        collection = service.fetch_cards()
    except CardFetchError as exc:
        return _report_fetch_error(exc)

    console.print(
        render.list_header(len(collection), session.owner_name, clock() - start)
    )
    listing = render.card_listing(collection)
    if listing:
        console.print(f"\n{listing}\n")
    return exit_codes.SUCCESS


def handle_set_default(
    resolver: TargetResolver,
    session: Session,
    args: Sequence[str],
    *,
    clock: Clock,
) -> int:
    start = clock()
    try:
        result = resolver.set_default(
            args,
            prompt_message=lambda: render.select_default_message(
                session.owner_name, clock() - start
            ),
        )
    except CardFetchError as exc:
        return _report_fetch_error(exc)

    if result.resolution is Resolution.NO_CARDS:
        err_console.print(render.error("You have no credit cards to choose from"))
    elif result.resolution is Resolution.NO_SELECTION:
        console.print("No changes made")
    elif result.resolution is Resolution.DECLINED:
        console.print(render.info("Aborted"))
    else:
        console.print(render.set_default_done(result, clock() - start))
    return exit_codes.SUCCESS


def handle_remove(
    resolver: TargetResolver,
    session: Session,
    args: Sequence[str],
    *,
    clock: Clock,
) -> int:
    start = clock()
    try:
        result = resolver.remove(
            args,
            prompt_message=lambda: render.select_remove_message(
                session.owner_name, clock() - start
            ),
        )
    except DefaultCardRefreshError as exc:
        return _report_fetch_error(exc, code=exit_codes.GENERAL_ERROR)
    except CardFetchError as exc:
        return _report_fetch_error(exc)

    if result.resolution is Resolution.NO_CARDS:
        err_console.print(
            render.error(
                "You have no credit cards to choose from to delete under "
                f"{render.owner(session.owner_name)}"
            )
        )
    elif result.resolution is Resolution.NO_SELECTION:
        console.print("No changes made")
    elif result.resolution is Resolution.DECLINED:
        console.print(render.info("Aborted"))
    else:
        console.print(render.remove_done(result, session.owner_name, clock() - start))
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def run_subcommand(
    subcommand: str,
    args: Sequence[str],
    *,
    session: Session,
    client: CreditCardsClient,
    prompter: Prompter,
    clock: Clock = time.monotonic,
) -> int:
    """Invoke exactly one handler for *subcommand*.

    The caller owns *client* and is responsible for closing it.
    """
    service = CardService(client)
    if subcommand in LIST_COMMANDS:
        return handle_list(service, session, clock=clock)
    if subcommand in ADD_COMMANDS:
        return handle_add(service, prompter, session, clock=clock)

    resolver = TargetResolver(service, prompter)
    if subcommand in SET_DEFAULT_COMMANDS:
        return handle_set_default(resolver, session, args, clock=clock)
    if subcommand in REMOVE_COMMANDS:
        return handle_remove(resolver, session, args, clock=clock)

    raise ValueError(f"unknown subcommand: {subcommand!r}")
