"""Pure string helpers shared by the rendering code."""

from __future__ import annotations

import textwrap

_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS


def indent(text: str, width: int) -> str:
    """Prefix every non-blank line of *text* with *width* spaces."""
    return textwrap.indent(text, " " * width)


def pluralize(word: str, count: int) -> str:
    """Return ``"<count> <word>"`` with a naive English plural.

    >>> pluralize("card", 1)
    '1 card'
    >>> pluralize("card", 0)
    '0 cards'
    """
    return f"{count} {word if count == 1 else word + 's'}"


def format_elapsed(seconds: float) -> str:
    """Render a duration compactly, largest unit first (``"12ms"``, ``"3s"``)."""
    millis = max(seconds, 0.0) * 1000
    for unit, suffix in (
        (_DAY_MS, "d"),
        (_HOUR_MS, "h"),
        (_MINUTE_MS, "m"),
        (_SECOND_MS, "s"),
    ):
        if millis >= unit:
            return f"{int(millis / unit + 0.5)}{suffix}"
    return f"{int(millis + 0.5)}ms"


def mask_card_number(last4: str) -> str:
    """Return the masked card number shown to users."""
    return "#### " * 3 + last4
