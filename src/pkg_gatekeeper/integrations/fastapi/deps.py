from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, Request, status

from ..common.auth_factory import BearerAuth
from ..starlette.middleware import get_identity
from ...domain.exceptions import IdentityNotFoundError


@dataclass(slots=True)
class FastAPIIdentity:
    """
    FastAPI dependencies reading the identity stored by BearerAuthMiddleware.

    The middleware does the token work; these only look up its result.
    """

    auth: BearerAuth

    async def get_identity(self, request: Request) -> Any:
        """Dependency: require an authenticated identity."""
        try:
            return get_identity(request, self.auth.context_key)
        except IdentityNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
            ) from exc

    async def get_optional_identity(self, request: Request) -> Any | None:
        """Dependency: identity or None (exempt / unauthenticated routes)."""
        try:
            return get_identity(request, self.auth.context_key)
        except IdentityNotFoundError:
            return None


"""

from fastapi import Depends, FastAPI
from pkg_gatekeeper import AuthSettings
from pkg_gatekeeper.integrations.fastapi import create_fastapi_auth

app = FastAPI()
identity = create_fastapi_auth(
    app,
    AuthSettings(signing_key=settings.JWT_SECRET, exclude_paths=["/login"]),
)

@app.get("/me")
async def me(user_id: str = Depends(identity.get_identity)):
    return {"user": user_id}

"""
