class GatekeeperError(Exception):
    """Base class for every error raised by pkg_gatekeeper."""
    pass


class InvalidConfigError(GatekeeperError):
    """Raised at construction time when settings cannot be used."""
    pass


# --- Authentication ------------------------------------------------------


class AuthenticationError(GatekeeperError):
    """Raised when a request cannot be authenticated."""
    pass


class MalformedAuthHeaderError(AuthenticationError):
    """Raised when the auth header is present but not `Bearer <token>`."""
    pass


class TokenMissingError(AuthenticationError):
    """Raised when a protected request carries no token."""
    pass


class TokenParseError(AuthenticationError):
    """Raised when the token codec rejects a token."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Error parsing token: {cause}")
        self.cause = cause


class AlgorithmMismatchError(AuthenticationError):
    """Raised when the token header names another signing algorithm."""

    def __init__(self, expected: str, actual: object) -> None:
        super().__init__(
            f"Error validating token algorithm: expected {expected} "
            f"signing method but token specified {actual}"
        )
        self.expected = expected
        self.actual = actual


class TokenInvalidError(AuthenticationError):
    """Raised when a verified token is expired or lacks an expiry."""
    pass


class IdentityNotFoundError(AuthenticationError):
    """Raised when no identity value was stored for the request."""
    pass


# --- Token codec ---------------------------------------------------------


class TokenCodecError(GatekeeperError):
    pass


class MalformedTokenError(TokenCodecError):
    """Raised when a token cannot be decoded."""
    pass


class BadSignatureError(TokenCodecError):
    """Raised when a token signature does not verify under the secret."""
    pass


# --- Audit log -----------------------------------------------------------


class PersistenceError(GatekeeperError):
    """Raised when the audit store rejects a read or write."""
    pass


class EncodingError(GatekeeperError):
    """Raised when the affected-group list cannot be (de)serialized."""
    pass


class OperationKindError(ValueError):
    """Raised when an `<operation>-<resource>` string cannot be parsed."""
    pass
