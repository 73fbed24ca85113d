"""billing-cli — manage the credit cards of a billing account.

Lists, adds, removes and selects the default card through the remote
billing API, prompting interactively whenever a card id is not given.
"""

from billing_cli.version import __version__

__all__: list[str] = ["__version__"]
