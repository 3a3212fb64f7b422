from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import HTTPConnection, Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from ...domain.exceptions import AuthenticationError, IdentityNotFoundError
from ...domain.value_objects import RequestDescriptor
from ..common.auth_factory import BearerAuth

logger = logging.getLogger(__name__)

# Returning None means "continue the chain anyway".
ErrorResponder = Callable[
    [Request, AuthenticationError],
    Union[Optional[Response], Awaitable[Optional[Response]]],
]


def plain_text_unauthorized(request: Request, exc: AuthenticationError) -> Optional[Response]:
    """Default error responder: 401 with the error message as body."""
    return PlainTextResponse(str(exc), status_code=401)


def request_descriptor(conn: HTTPConnection) -> RequestDescriptor:
    method = conn.scope.get("method", "GET")
    return RequestDescriptor(method=method, path=conn.url.path, headers=conn.headers)


def get_identity(conn: HTTPConnection, context_key: str) -> Any:
    """
    Return the identity value stored for this request.

    Raises:
        IdentityNotFoundError if the request was not authenticated
        (exempt path, OPTIONS, or a responder that let it through), or
        if the verified token carried no claim under `context_key`.
    """
    identity = getattr(conn.state, context_key, None)
    if identity is None:
        raise IdentityNotFoundError("token value not exist")
    return identity


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware running the bearer-token decision per request.

      - success: identity is stored on `request.state` under the
        configured context key, then the chain continues
      - failure: `on_error(request, exc)` decides; a Response stops the
        chain, None lets the request through unauthenticated

    Usage:

        auth = create_bearer_auth(AuthSettings(signing_key=...))
        app.add_middleware(BearerAuthMiddleware, auth=auth)
    """

    def __init__(
        self,
        app: ASGIApp,
        auth: BearerAuth,
        on_error: ErrorResponder = plain_text_unauthorized,
    ) -> None:
        super().__init__(app)
        self.auth = auth
        self.on_error = on_error

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            decision = self.auth.authenticate(request_descriptor(request))
        except AuthenticationError as exc:
            logger.debug("Authentication failed for %s %s: %s", request.method, request.url.path, exc)
            response = self.on_error(request, exc)
            if inspect.isawaitable(response):
                response = await response
            if response is not None:
                return response
            return await call_next(request)

        if not decision.exempt:
            setattr(request.state, self.auth.context_key, decision.identity)
        return await call_next(request)
