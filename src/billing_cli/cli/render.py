"""Presentation helpers — pure ``str -> str`` transforms producing Rich markup.

Nothing here prints; callers hand the returned strings to the console
proxies.  Every value that originates from the API is escaped so that
card names cannot inject markup.
"""

from __future__ import annotations

from rich.markup import escape

from billing_cli.core.models import Card, CardCollection, CardSummary
from billing_cli.core.resolution import RemoveResult, SetDefaultResult
from billing_cli.utils.text import format_elapsed, indent, pluralize


# ---------------------------------------------------------------------------
# Message prefixes
# ---------------------------------------------------------------------------

def success(message: str) -> str:
    return f"[cyan]> Success![/cyan] {message}"


def error(message: str) -> str:
    return f"[red]> Error![/red] {message}"


def failure(exc: BaseException) -> str:
    """Error line for an exception whose message is plain text."""
    return error(escape(str(exc)))


def info(message: str) -> str:
    return f"[dim]>[/dim] {message}"


def hint(message: str) -> str:
    return f"[yellow]Hint:[/yellow] {escape(message)}"


def elapsed(seconds: float) -> str:
    """Dimmed ``[12ms]`` suffix."""
    return f"[dim]{escape(f'[{format_elapsed(seconds)}]')}[/dim]"


def owner(name: str) -> str:
    return f"[bold]{escape(name)}[/bold]"


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

def describe_card(brand: str, last4: str) -> str:
    return f"{escape(brand)} ending in {escape(last4)}"


def format_address(card: Card) -> str:
    """Two-line postal address; the state is omitted when unknown."""
    first = card.address_line1
    first += f", {card.address_line2}." if card.address_line2 else "."

    second = f"{card.address_city}, "
    if card.address_state:
        second += f"{card.address_state}, "
    second += f"{card.address_zip}. {card.address_country}"
    return f"{first}\n{second}"


def card_block(card: Card, *, is_default: bool) -> str:
    marker = " [bold](default)[/bold]" if is_default else ""
    number = f"[dim]{'#### ' * 3}[/dim]{escape(card.last4)}"
    return "\n".join(
        (
            f"[dim]-[/dim] [cyan]ID: {escape(card.id)}[/cyan]{marker}",
            indent(escape(card.name), 2),
            indent(f"{escape(card.brand)} {number}", 2),
            indent(escape(format_address(card)), 2),
        )
    )


def card_listing(collection: CardCollection) -> str:
    """All cards, separated by blank lines; empty string for no cards."""
    return "\n\n".join(
        card_block(card, is_default=collection.is_default(card))
        for card in collection.cards
    )


def list_header(count: int, owner_name: str, seconds: float) -> str:
    return (
        f"> {pluralize('card', count)} found under {owner(owner_name)} "
        f"{elapsed(seconds)}"
    )


# ---------------------------------------------------------------------------
# Prompt messages
# ---------------------------------------------------------------------------

def select_default_message(owner_name: str, seconds: float) -> str:
    """Plain-text picker title (questionary does not render Rich markup)."""
    return (
        f"Selecting a new default payment card for {owner_name} "
        f"[{format_elapsed(seconds)}]"
    )


def select_remove_message(owner_name: str, seconds: float) -> str:
    return f"Selecting a card to remove under {owner_name} [{format_elapsed(seconds)}]"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

def _target(card: Card | None, card_id: str | None) -> str:
    if card is not None:
        return describe_card(card.brand, card.last4)
    # The id came from the command line and was not in the fetched list.
    return f"Card {escape(card_id or '')}"


def set_default_done(result: SetDefaultResult, seconds: float) -> str:
    return success(
        f"{_target(result.card, result.card_id)} is now the default {elapsed(seconds)}"
    )


def remove_done(result: RemoveResult, owner_name: str, seconds: float) -> str:
    text = f"{_target(result.card, result.card_id)} was deleted"
    if result.was_default:
        if result.remaining == 0:
            text += "\n[yellow]Warning![/yellow] You have no default card"
        elif result.new_default is not None:
            text += (
                f"\n{describe_card(result.new_default.brand, result.new_default.last4)}"
                f" is now default for {owner(owner_name)}"
            )
        else:
            text += f"\n[yellow]Warning![/yellow] {owner(owner_name)} has no default card"
    return success(f"{text} {elapsed(seconds)}")


def card_added(summary: CardSummary, owner_name: str, seconds: float) -> str:
    return success(
        f"{describe_card(summary.brand, summary.last4)} was added to "
        f"{owner(owner_name)} {elapsed(seconds)}"
    )
