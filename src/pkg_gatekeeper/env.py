from __future__ import annotations

import os

from .domain.constants import DEFAULT_ALGORITHM, DEFAULT_HEADER_NAME
from .domain.exceptions import InvalidConfigError
from .settings import AuthSettings

DEFAULT_DATABASE_URL = "sqlite:///gatekeeper.db"


def _bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _split_csv(key: str) -> list[str]:
    raw = os.getenv(key)
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x and x.strip()]


def settings_from_env() -> AuthSettings:
    signing_key = os.getenv("GATEKEEPER_SIGNING_KEY")
    if not signing_key:
        raise InvalidConfigError("Missing bearer auth settings: GATEKEEPER_SIGNING_KEY")

    return AuthSettings(
        signing_key=signing_key,
        header_name=os.getenv("GATEKEEPER_HEADER_NAME") or DEFAULT_HEADER_NAME,
        algorithm=os.getenv("GATEKEEPER_ALGORITHM") or DEFAULT_ALGORITHM,
        context_key=os.getenv("GATEKEEPER_CONTEXT_KEY") or None,
        exclude_paths=_split_csv("GATEKEEPER_EXCLUDE_PATHS"),
        exclude_prefixes=_split_csv("GATEKEEPER_EXCLUDE_PREFIXES"),
        exempt_options=not _bool("GATEKEEPER_AUTH_ON_OPTIONS", False),
    )


def database_url_from_env() -> str:
    return os.getenv("GATEKEEPER_DATABASE_URL") or DEFAULT_DATABASE_URL
