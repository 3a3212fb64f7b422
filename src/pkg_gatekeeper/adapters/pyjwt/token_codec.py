import logging
import time
from datetime import timedelta
from typing import Any, Dict, List

import jwt
from jwt.exceptions import (
    DecodeError,
    InvalidAlgorithmError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.constants import DEFAULT_ALGORITHM, DEFAULT_HEADER_NAME, HMAC_ALGORITHMS
from ...domain.entities import ParsedToken
from ...domain.exceptions import BadSignatureError, InvalidConfigError, MalformedTokenError
from ...domain.ports import TokenCodec

logger = logging.getLogger(__name__)

# Claim checks other than the signature are made by the caller.
_DECODE_OPTIONS: Dict[str, bool] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


class JWTTokenCodec(TokenCodec):
    """
    Adapter implementing TokenCodec port using PyJWT and a shared secret.

    Infrastructure layer:
    - Knows about JWT structure, signing and verification.
    - Does not decide whether a verified token is acceptable.
    """

    def __init__(
        self,
        signing_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        identity_claim: str = DEFAULT_HEADER_NAME,
    ) -> None:
        if not signing_key:
            raise InvalidConfigError("token codec requires a signing key")
        if algorithm not in HMAC_ALGORITHMS:
            raise InvalidConfigError(f"Unsupported signing algorithm {algorithm!r}")

        self._key = signing_key
        self._algorithm = algorithm
        self._identity_claim = identity_claim

    @classmethod
    def from_settings(cls, settings: Any) -> "JWTTokenCodec":
        return cls(
            signing_key=settings.signing_key,
            algorithm=settings.algorithm,
            identity_claim=settings.context_key,
        )

    @property
    def algorithm(self) -> str:
        return self._algorithm

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def issue(self, identity: str, ttl: timedelta | float) -> str:
        """
        Sign a token carrying `identity` that expires `ttl` from now.

        A non-positive ttl yields an already-expired token.
        """
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        claims = {
            self._identity_claim: identity,
            "exp": int(time.time() + seconds),
        }
        return jwt.encode(claims, self._key, algorithm=self._algorithm)

    def parse_and_verify(self, token: str) -> ParsedToken:
        """
        Decode the token and verify its signature with the shared secret.

        Returns:
            ParsedToken; `valid` is False when `exp` is missing or past.

        Raises:
            MalformedTokenError
            BadSignatureError
        """
        try:
            header = jwt.get_unverified_header(token)
        except DecodeError as exc:
            raise MalformedTokenError(f"Malformed token: {exc}") from exc

        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=self._verification_algorithms(header.get("alg")),
                options=_DECODE_OPTIONS,
            )
        except (InvalidSignatureError, InvalidAlgorithmError) as exc:
            raise BadSignatureError(f"Bad token signature: {exc}") from exc
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise MalformedTokenError(f"Malformed token: {exc}") from exc

        return ParsedToken(header=header, claims=claims, valid=_not_expired(claims))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _verification_algorithms(self, declared: Any) -> List[str]:
        """
        Verify with the algorithm the token declares when it is an HMAC
        variant, so a sibling algorithm is reported as a mismatch rather
        than as a bad signature.
        """
        if isinstance(declared, str) and declared in HMAC_ALGORITHMS:
            return [declared]
        logger.debug("Token declares non-HMAC algorithm %r", declared)
        return [self._algorithm]


def _not_expired(claims: Dict[str, Any]) -> bool:
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False
    return exp > time.time()
