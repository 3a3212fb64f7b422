from .middleware import (
    BearerAuthMiddleware,
    ErrorResponder,
    get_identity,
    plain_text_unauthorized,
    request_descriptor,
)

__all__ = [
    "BearerAuthMiddleware",
    "ErrorResponder",
    "get_identity",
    "plain_text_unauthorized",
    "request_descriptor",
]
