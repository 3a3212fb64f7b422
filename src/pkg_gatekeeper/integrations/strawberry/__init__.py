from .auth import (
    StrawberryAuthContext,
    StrawberryBearerAuth,
    create_strawberry_auth,
)

__all__ = [
    "StrawberryAuthContext",
    "StrawberryBearerAuth",
    "create_strawberry_auth",
]
