"""CLI application entry point and command routing for billing-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~billing_cli.exceptions.BillingError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core and
  infrastructure layers.
* Parsed options are passed down explicitly; nothing is kept in module
  state between calls.
* The API client is acquired here and closed on every exit path.
"""

from __future__ import annotations

import argparse
import sys
from contextlib import closing
from pathlib import Path

from billing_cli.cli import exit_codes
from billing_cli.cli.console import configure_logging, err_console
from billing_cli.core.models import Session
from billing_cli.core.protocols import CreditCardsClient, Prompter
from billing_cli.exceptions import BillingError
from billing_cli.version import __version__

_COMMANDS_HELP = """\
commands:
  ls                   Show all of your credit cards
  add                  Add a new credit card
  rm            [id]   Remove a credit card
  set-default   [id]   Make a credit card your default one

examples:
  Add a new credit card (interactively)

    $ billing add
"""


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The subcommand is taken as a plain positional so that an unknown
    name can be reported with our own message and exit code instead of
    argparse's.  Options may appear anywhere on the line, so callers
    parse with :meth:`~argparse.ArgumentParser.parse_intermixed_args`.
    """
    parser = argparse.ArgumentParser(
        prog="billing",
        description="Manage the credit cards of your billing account.",
        epilog=_COMMANDS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Debug mode [off]",
    )
    parser.add_argument(
        "-A",
        "--local-config",
        type=Path,
        metavar="FILE",
        help="Path to the local `now.json` file",
    )
    parser.add_argument(
        "-Q",
        "--global-config",
        type=Path,
        metavar="DIR",
        help="Path to the global `.now` directory",
    )
    parser.add_argument("-t", "--token", metavar="TOKEN", help="Login token")
    parser.add_argument(
        "-T",
        "--team",
        metavar="SLUG",
        help="Set a custom team scope",
    )
    parser.add_argument(
        "subcommand",
        nargs="?",
        default=None,
        help="One of: ls, add, rm, set-default.",
    )
    parser.add_argument(
        "args",
        nargs="*",
        default=[],
        help="Optional card id for rm and set-default.",
    )
    return parser


# ---------------------------------------------------------------------------
# Collaborator factories (replaced in tests)
# ---------------------------------------------------------------------------

def _build_client(session: Session) -> CreditCardsClient:
    from billing_cli.infra.credit_cards_api import RequestsCreditCardsClient

    return RequestsCreditCardsClient(session)


def _build_prompter() -> Prompter:
    from billing_cli.cli.prompts import QuestionaryPrompter

    return QuestionaryPrompter()


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_subcommand(options: argparse.Namespace) -> int:
    """Load the session, open the API client, and run one subcommand."""
    from billing_cli.cli.commands import run_subcommand
    from billing_cli.infra.config import load_session

    session = load_session(
        global_config_dir=options.global_config,
        local_config=options.local_config,
        token=options.token,
        team=options.team,
    )
    with closing(_build_client(session)) as client:
        return run_subcommand(
            options.subcommand,
            options.args,
            session=session,
            client=client,
            prompter=_build_prompter(),
        )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the billing CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    options = parser.parse_intermixed_args(argv)

    if options.subcommand is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(debug=options.debug)

    from billing_cli.cli import render
    from billing_cli.cli.commands import SUBCOMMANDS

    if options.subcommand not in SUBCOMMANDS:
        err_console.print(
            render.error("Please specify a valid subcommand: ls | add | rm | set-default")
        )
        parser.print_help()
        return exit_codes.GENERAL_ERROR

    return _handle_subcommand(options)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Known errors print their message; anything else is a defect and is
    reported with its full traceback.  Both exit with status 1.
    """
    try:
        code = main()
        sys.exit(code)
    except BillingError as exc:
        from billing_cli.cli import render

        err_console.print(render.failure(exc))
        if exc.hint:
            err_console.print(render.hint(exc.hint))
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception:  # noqa: BLE001
        err_console.print("[red]> Error![/red] Unknown error:")
        err_console.print_exception()
        sys.exit(exit_codes.GENERAL_ERROR)
