"""CLI console and logging helpers.

Rich is imported on first use rather than at module level so that
bootstrap paths (``--help``, ``--version``) stay cheap.  It is a hard
dependency: a missing install is reported as ``EnvironmentError``.
"""

from __future__ import annotations

import logging
from typing import Any

from billing_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = False) -> Any:
	"""Create a Rich console targeting stdout, or stderr when asked."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr, soft_wrap=True, highlight=False)


class _ConsoleProxy:
	"""``print``-compatible proxy that renders Rich markup.

	A fresh console is built per call so that output follows whatever
	``sys.stdout``/``sys.stderr`` are at that moment.
	"""

	def __init__(self, *, stderr: bool = False) -> None:
		self._stderr = stderr

	def print(self, *objects: object) -> None:
		get_rich_console(stderr=self._stderr).print(*objects)

	def print_exception(self) -> None:
		"""Render the exception currently being handled with its traceback."""
		get_rich_console(stderr=self._stderr).print_exception()


console = _ConsoleProxy()
err_console = _ConsoleProxy(stderr=True)


def configure_logging(*, debug: bool = False) -> None:
	"""Route ``billing_cli`` loggers to stderr, verbose when *debug* is set."""
	from rich.logging import RichHandler

	handler = RichHandler(
		console=get_rich_console(stderr=True),
		show_path=False,
		markup=False,
	)

	logger = logging.getLogger("billing_cli")
	for existing in list(logger.handlers):
		logger.removeHandler(existing)
	logger.addHandler(handler)
	logger.setLevel(logging.DEBUG if debug else logging.WARNING)
