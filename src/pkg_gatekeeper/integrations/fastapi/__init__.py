from __future__ import annotations

from fastapi import FastAPI

from .deps import FastAPIIdentity
from ..common.auth_factory import BearerAuth, create_bearer_auth
from ..starlette.middleware import BearerAuthMiddleware, ErrorResponder, plain_text_unauthorized
from ...settings import AuthSettings


def create_fastapi_auth(
    app: FastAPI,
    settings: AuthSettings,
    *,
    on_error: ErrorResponder = plain_text_unauthorized,
) -> FastAPIIdentity:
    """
    High-level helper for FastAPI apps:

    - Creates BearerAuth from AuthSettings
    - Installs BearerAuthMiddleware on `app`
    - Returns FastAPIIdentity, exposing dependencies like:

        identity.get_identity
        identity.get_optional_identity
    """
    auth: BearerAuth = create_bearer_auth(settings)
    app.add_middleware(BearerAuthMiddleware, auth=auth, on_error=on_error)
    return FastAPIIdentity(auth=auth)


__all__ = ["FastAPIIdentity", "create_fastapi_auth"]
