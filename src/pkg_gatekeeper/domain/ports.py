from __future__ import annotations

from datetime import timedelta
from typing import Optional, Protocol, Sequence

from .entities import AccessDecision, AuditRecord, ParsedToken
from .value_objects import Page, RequestDescriptor


class TokenCodec(Protocol):
    """
    Port for issuing and verifying signed claims tokens.

    Implementations live in the adapters layer (e.g. PyJWT codec).
    """

    def issue(self, identity: str, ttl: timedelta | float) -> str:
        ...

    def parse_and_verify(self, token: str) -> ParsedToken:
        """
        Decode the token and verify its signature.

        Raises:
          - MalformedTokenError
          - BadSignatureError
        """
        ...


class TokenExtractor(Protocol):
    """Strategy: pull a raw token string out of a request, or None."""

    def __call__(self, name: str, request: RequestDescriptor) -> Optional[str]:
        ...


class RequestValidator(Protocol):
    """Strategy: end-to-end allow/deny decision for one request."""

    def __call__(self, request: RequestDescriptor) -> AccessDecision:
        ...


class AuditStore(Protocol):
    """
    Port for the append-only audit table.

    Implementations must order rows by create_time DESC, id DESC.
    """

    def insert(self, record: AuditRecord) -> AuditRecord:
        ...

    def count(self, share_id: Optional[str] = None) -> int:
        ...

    def fetch(self, page: Page, share_id: Optional[str] = None) -> Sequence[AuditRecord]:
        ...
