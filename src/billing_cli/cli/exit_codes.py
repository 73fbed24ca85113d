"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed, or ended in a benign no-op (no cards, user declined)."""

GENERAL_ERROR: int = 1
"""Bad arguments, unknown subcommand, API failure, or an unexpected error."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
