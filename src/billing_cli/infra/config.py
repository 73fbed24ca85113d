"""Session loading from the global config directory and CLI overrides.

The global directory (``~/.now`` unless overridden) holds two JSON
files::

    auth.json    {"credentials": [{"provider": "sh", "token": "..."}]}
    config.json  {"sh": {"user": {...}, "currentTeam": {...}}, "apiUrl": "..."}

Missing files count as empty.  A local config file (``-A``) may name a
team via its ``scope`` key.

Precedence
----------
* token:   ``--token`` > ``auth.json``
* team:    ``--team`` > local ``scope`` > ``config.json`` ``currentTeam``
* API URL: ``$BILLING_API_URL`` > ``config.json`` ``apiUrl`` > default
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from billing_cli.core.models import Session, Team, User
from billing_cli.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.zeit.co"
GLOBAL_CONFIG_ENV = "BILLING_GLOBAL_CONFIG"
API_URL_ENV = "BILLING_API_URL"
AUTH_FILE = "auth.json"
CONFIG_FILE = "config.json"
CREDENTIALS_PROVIDER = "sh"


def default_global_config_dir() -> Path:
    override = os.environ.get(GLOBAL_CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".now"


def read_json_object(path: Path, *, required: bool = False) -> dict[str, Any]:
    """Read a JSON object from *path*.

    Returns an empty dict when the file is absent and not *required*.

    Raises
    ------
    ConfigError
        If the file is required but missing, unreadable, or does not
        contain a JSON object.
    """
    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("Config file %s not found, using defaults", path)
        return {}
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(
            f"Could not read config file {path}: {exc}",
            hint="Fix or delete the file and try again.",
        ) from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object.")
    return data


def _token_from_auth(auth: dict[str, Any]) -> str | None:
    credentials = auth.get("credentials")
    if not isinstance(credentials, list):
        return None
    for entry in credentials:
        if isinstance(entry, dict) and entry.get("provider") == CREDENTIALS_PROVIDER:
            token = entry.get("token")
            return str(token) if token else None
    return None


def _team_from_config(raw: Any) -> Team | None:
    if not isinstance(raw, dict) or not raw.get("slug"):
        return None
    team_id = raw.get("id")
    return Team(slug=str(raw["slug"]), id=str(team_id) if team_id else None)


def _user_from_config(raw: Any) -> User:
    if not isinstance(raw, dict):
        return User()
    username = raw.get("username")
    email = raw.get("email")
    return User(
        username=str(username) if username else None,
        email=str(email) if email else None,
    )


def load_session(
    *,
    global_config_dir: Path | None = None,
    local_config: Path | None = None,
    token: str | None = None,
    team: str | None = None,
) -> Session:
    """Build the :class:`Session` the billing commands operate on.

    Raises
    ------
    ConfigError
        If no token is available or a config file is malformed.
    """
    config_dir = global_config_dir or default_global_config_dir()
    auth = read_json_object(config_dir / AUTH_FILE)
    config = read_json_object(config_dir / CONFIG_FILE)
    local = read_json_object(local_config, required=True) if local_config else {}

    resolved_token = token or _token_from_auth(auth)
    if not resolved_token:
        raise ConfigError(
            "No login token found.",
            hint=f"Pass --token or add credentials to {config_dir / AUTH_FILE}.",
        )

    sh: Any = config.get("sh")
    if not isinstance(sh, dict):
        sh = {}

    current_team = _team_from_config(sh.get("currentTeam"))
    scope = team or local.get("scope")
    if scope:
        # Keep the stored id only when it belongs to the requested slug.
        same = current_team is not None and current_team.slug == scope
        resolved_team: Team | None = Team(
            slug=str(scope),
            id=current_team.id if same and current_team else None,
        )
    else:
        resolved_team = current_team

    api_url = os.environ.get(API_URL_ENV) or config.get("apiUrl") or DEFAULT_API_URL

    logger.debug(
        "Session loaded from %s (team=%s, api=%s)",
        config_dir,
        resolved_team.slug if resolved_team else None,
        api_url,
    )
    return Session(
        token=resolved_token,
        user=_user_from_config(sh.get("user")),
        team=resolved_team,
        api_url=str(api_url),
    )
