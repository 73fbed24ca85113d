"""``requests`` backed implementation of :class:`~billing_cli.core.protocols.CreditCardsClient`.

This module is the **only** place in the codebase that talks HTTP.
Every ``requests`` exception and every non-2xx response is re-raised as
:class:`~billing_cli.exceptions.ApiError` — nothing raw escapes the
infrastructure boundary.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote

import requests

from billing_cli.core.models import Session
from billing_cli.exceptions import ApiError
from billing_cli.utils.text import format_elapsed
from billing_cli.version import __version__

logger = logging.getLogger(__name__)


class RequestsCreditCardsClient:
    """Concrete :class:`CreditCardsClient` for the billing HTTP API.

    Usage::

        with contextlib.closing(RequestsCreditCardsClient(session)) as client:
            payload = client.list_cards()

    One :class:`requests.Session` is held for the client's lifetime and
    released by :meth:`close`.
    """

    DEFAULT_TIMEOUT: float = 30.0

    def __init__(
        self,
        session: Session,
        *,
        http: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_url = session.api_url.rstrip("/")
        self._timeout = timeout
        self._params = self._scope_params(session)
        self._http = http if http is not None else requests.Session()
        self._http.headers.update(
            {
                "Authorization": f"Bearer {session.token}",
                "User-Agent": f"billing-cli/{__version__}",
            }
        )
        self._closed = False

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list_cards(self) -> dict[str, Any]:
        return self._request("GET", "/cards")

    def set_default(self, card_id: str) -> None:
        self._request("PUT", "/cards/default", json={"cardId": card_id})

    def remove(self, card_id: str) -> None:
        self._request("DELETE", f"/cards/{quote(card_id, safe='')}")

    def add_card(self, card: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/cards", json={"card": card})

    def close(self) -> None:
        """Release the HTTP session.  Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._http.close()
        logger.debug("HTTP session closed")

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    @staticmethod
    def _scope_params(session: Session) -> dict[str, str]:
        """Query parameters that select the team the request acts for."""
        if session.team is None:
            return {}
        if session.team.id:
            return {"teamId": session.team.id}
        return {"slug": session.team.slug}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._api_url}{path}"
        start = time.monotonic()
        try:
            response = self._http.request(
                method,
                url,
                params=self._params,
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise ApiError(
                f"Could not reach the billing API: {exc}",
                hint="Check your network connection and try again.",
            ) from exc

        logger.debug(
            "%s %s -> %s [%s]",
            method,
            path,
            response.status_code,
            format_elapsed(time.monotonic() - start),
        )

        if not response.ok:
            raise self._map_error(response)

        if not response.content:
            return {}
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ApiError(
                "The billing API returned a malformed response.",
                status_code=response.status_code,
            ) from exc
        return payload if isinstance(payload, dict) else {}

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _map_error(response: requests.Response) -> ApiError:
        """Translate a non-2xx response into an :class:`ApiError`."""
        message = f"HTTP {response.status_code}: {response.reason}"
        code: str | None = None
        try:
            body: Any = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = str(body["error"].get("message") or message)
            raw_code = body["error"].get("code")
            code = str(raw_code) if raw_code is not None else None

        hint: str | None = None
        if response.status_code in (401, 403):
            hint = "Your token may have expired. Log in again or pass --token."
        return ApiError(
            message,
            status_code=response.status_code,
            code=code,
            hint=hint,
        )
