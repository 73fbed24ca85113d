"""Allow ``python -m billing_cli`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m billing_cli`` behaves identically to the ``billing``
console script.
"""

from __future__ import annotations

from billing_cli.cli.app import cli

if __name__ == "__main__":
    cli()
