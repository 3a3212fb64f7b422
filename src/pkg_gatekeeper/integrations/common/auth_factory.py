from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ...adapters.pyjwt.token_codec import JWTTokenCodec
from ...application.use_cases.authenticate import AuthenticateRequestUseCase
from ...domain.entities import AccessDecision
from ...domain.ports import RequestValidator, TokenCodec
from ...domain.value_objects import RequestDescriptor
from ...settings import AuthSettings


@dataclass(slots=True)
class BearerAuth:
    """
    Framework-agnostic bearer-token facade.

    Integrations (Starlette, FastAPI, Strawberry) adapt this to their own
    middleware / dependency / context systems.
    """

    settings: AuthSettings
    token_codec: TokenCodec
    validator: RequestValidator

    @property
    def context_key(self) -> str:
        return self.settings.context_key

    # --- Core operations --------------------------------------------------

    def authenticate(self, request: RequestDescriptor) -> AccessDecision:
        """Request -> AccessDecision (or raise AuthenticationError)."""
        return self.validator(request)

    def issue_token(self, identity: str, ttl: timedelta | float) -> str:
        """Sign a token for `identity` valid for `ttl`."""
        return self.token_codec.issue(identity, ttl)


def create_bearer_auth(settings: AuthSettings) -> BearerAuth:
    """
    High-level factory: AuthSettings -> BearerAuth.

    - builds a JWTTokenCodec from the signing settings
    - uses settings.validator, or wires the built-in
      AuthenticateRequestUseCase when none is configured
    """
    codec = JWTTokenCodec.from_settings(settings)
    validator = settings.validator or AuthenticateRequestUseCase(
        settings=settings,
        token_codec=codec,
    )
    return BearerAuth(settings=settings, token_codec=codec, validator=validator)
