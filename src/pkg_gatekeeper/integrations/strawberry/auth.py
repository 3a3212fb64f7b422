from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from graphql import GraphQLError
from starlette.requests import Request
from strawberry.permission import BasePermission
from strawberry.types import Info

from ...domain.exceptions import AuthenticationError
from ..common.auth_factory import BearerAuth, create_bearer_auth
from ..starlette.middleware import request_descriptor
from ...settings import AuthSettings


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryAuthContext:
    """
    Default context type for Strawberry GraphQL.

    `identity` is the value of the configured identity claim, or None for
    anonymous / exempt requests.
    """
    request: Request
    identity: Any = None
    extra: Any = None  # host app can put UoW, services, etc. here if desired


# --------------------------------------------------------------------- #
# Main integration: StrawberryBearerAuth
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryBearerAuth:
    """
    Strawberry GraphQL integration for pkg_gatekeeper.

    Built on top of the framework-agnostic `BearerAuth` facade; runs the
    same decision procedure as the HTTP middleware, so exemptions and
    error messages are identical.
    """

    auth: BearerAuth

    def make_context_getter(
        self,
        *,
        optional: bool = True,
        extra_factory: Optional[Callable[[Request, Any], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            optional:
                - True:   auth errors become `identity=None` in context
                - False:  auth errors become GraphQL errors
            extra_factory:
                - Optional callable: (request, identity | None) -> Any
        """

        async def _context_getter(request: Request) -> StrawberryAuthContext:
            try:
                decision = self.auth.authenticate(request_descriptor(request))
                identity = decision.identity
            except AuthenticationError as exc:
                if not optional:
                    raise GraphQLError(str(exc))
                identity = None

            extra = extra_factory(request, identity) if extra_factory else None
            return StrawberryAuthContext(request=request, identity=identity, extra=extra)

        return _context_getter

    def require_identity(self) -> Type[BasePermission]:
        """
        Permission: request must carry an authenticated identity.
        """

        class _RequireIdentity(BasePermission):
            message = "Authentication required"

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryAuthContext = info.context
                return ctx.identity is not None

        return _RequireIdentity


def create_strawberry_auth(settings: AuthSettings) -> StrawberryBearerAuth:
    """
    Convenience helper:

        strawberry_auth = create_strawberry_auth(AuthSettings(signing_key=...))
        router = GraphQLRouter(schema, context_getter=strawberry_auth.make_context_getter())
    """
    return StrawberryBearerAuth(auth=create_bearer_auth(settings))
