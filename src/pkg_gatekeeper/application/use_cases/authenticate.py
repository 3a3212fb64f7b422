from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ...domain.constants import BEARER_SCHEME
from ...domain.entities import AccessDecision
from ...domain.exceptions import (
    AlgorithmMismatchError,
    MalformedAuthHeaderError,
    TokenCodecError,
    TokenInvalidError,
    TokenMissingError,
    TokenParseError,
)
from ...domain.ports import TokenCodec
from ...domain.value_objects import RequestDescriptor

if TYPE_CHECKING:
    from ...settings import AuthSettings

logger = logging.getLogger(__name__)


def extract_bearer_token(name: str, request: RequestDescriptor) -> Optional[str]:
    """
    Default token extractor: read `Bearer <token>` from header `name`.

    Returns None when no scheme + token is present (header absent, blank,
    or only the scheme word). Anything else that is not exactly
    `<scheme> <token>` with a bearer scheme is malformed.

    Raises:
        MalformedAuthHeaderError
    """
    value = request.header(name)
    if value is None or not value.strip():
        return None
    if value.strip().lower() == BEARER_SCHEME:
        return None

    parts = value.split(" ")
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME or not parts[1]:
        raise MalformedAuthHeaderError(
            f"{name} header format must be Bearer {{token}}"
        )
    return parts[1]


@dataclass(slots=True)
class AuthenticateRequestUseCase:
    """
    Application use case: decide whether a request may proceed.

    Checks run in a fixed order and stop at the first outcome:

      1. OPTIONS exemption
      2. exact path exemption
      3. path prefix exemption (plain string prefix)
      4. token extraction
      5. token presence
      6. signature verification
      7. declared algorithm == configured algorithm
      8. expiry
      9. identity claim extraction

    Exemptions come first so public endpoints never touch token parsing.
    """

    settings: AuthSettings
    token_codec: TokenCodec

    def __call__(self, request: RequestDescriptor) -> AccessDecision:
        return self.execute(request)

    def execute(self, request: RequestDescriptor) -> AccessDecision:
        """
        Authenticate a request and return an AccessDecision.

        Raises:
            MalformedAuthHeaderError
            TokenMissingError
            TokenParseError
            AlgorithmMismatchError
            TokenInvalidError
        """
        s = self.settings

        if self._is_exempt(request):
            return AccessDecision(exempt=True)

        token = s.extractor(s.header_name, request)
        if not token:
            raise TokenMissingError("Required authorization token not found")

        try:
            parsed = self.token_codec.parse_and_verify(token)
        except TokenCodecError as exc:
            logger.info("Rejected token on %s %s: %s", request.method, request.path, exc)
            raise TokenParseError(exc) from exc

        if parsed.algorithm != s.algorithm:
            logger.warning(
                "Algorithm mismatch on %s %s: expected %s, token specified %r",
                request.method,
                request.path,
                s.algorithm,
                parsed.algorithm,
            )
            raise AlgorithmMismatchError(s.algorithm, parsed.algorithm)

        if not parsed.valid:
            raise TokenInvalidError("Token is invalid")

        return AccessDecision(identity=parsed.claims.get(s.context_key))

    # ------------------------------------------------------------------ #
    # Internal: exemptions
    # ------------------------------------------------------------------ #

    def _is_exempt(self, request: RequestDescriptor) -> bool:
        s = self.settings
        if s.exempt_options and request.method == "OPTIONS":
            return True
        if request.path in s.exclude_paths:
            return True
        # Raw prefix match: "/api" also exempts "/apikeys".
        return any(request.path.startswith(prefix) for prefix in s.exclude_prefixes)
