"""
pkg_gatekeeper

Bearer-token request authentication and an append-only operator audit
log, with a framework-agnostic core and FastAPI / Starlette / Strawberry
integrations.
"""

__version__ = "0.1.0"

from .domain.constants import OperationType, OperationResource
from .domain.entities import AccessDecision, AuditRecord, ParsedToken, audit_record
from .domain.exceptions import (
    GatekeeperError,
    InvalidConfigError,
    AuthenticationError,
    MalformedAuthHeaderError,
    TokenMissingError,
    TokenParseError,
    AlgorithmMismatchError,
    TokenInvalidError,
    IdentityNotFoundError,
    TokenCodecError,
    MalformedTokenError,
    BadSignatureError,
    PersistenceError,
    EncodingError,
    OperationKindError,
)
from .domain.value_objects import (
    RequestDescriptor,
    Page,
    check_operation_code,
    convert_operation_type,
    parse_operation_type,
)
from .domain.ports import TokenCodec, TokenExtractor, RequestValidator, AuditStore
from .settings import AuthSettings

from .application.use_cases.authenticate import AuthenticateRequestUseCase, extract_bearer_token
from .application.use_cases.audit_log import AuditLogService

from .adapters.pyjwt.token_codec import JWTTokenCodec
from .adapters.database.audit_store import SQLAlchemyAuditStore

from .integrations.common.auth_factory import BearerAuth, create_bearer_auth

__all__ = [
    "__version__",
    # domain core
    "OperationType",
    "OperationResource",
    "AccessDecision",
    "AuditRecord",
    "ParsedToken",
    "audit_record",
    "RequestDescriptor",
    "Page",
    "check_operation_code",
    "convert_operation_type",
    "parse_operation_type",
    "TokenCodec",
    "TokenExtractor",
    "RequestValidator",
    "AuditStore",
    "AuthSettings",
    # exceptions
    "GatekeeperError",
    "InvalidConfigError",
    "AuthenticationError",
    "MalformedAuthHeaderError",
    "TokenMissingError",
    "TokenParseError",
    "AlgorithmMismatchError",
    "TokenInvalidError",
    "IdentityNotFoundError",
    "TokenCodecError",
    "MalformedTokenError",
    "BadSignatureError",
    "PersistenceError",
    "EncodingError",
    "OperationKindError",
    # use cases
    "AuthenticateRequestUseCase",
    "AuditLogService",
    "extract_bearer_token",
    # adapters
    "JWTTokenCodec",
    "SQLAlchemyAuditStore",
    "BearerAuth",
    "create_bearer_auth",
]
