from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .constants import OperationResource, OperationType
from .value_objects import check_operation_code, convert_operation_type


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """
    Outcome of a successful authentication decision.

    `exempt` is True when the request skipped token checks entirely
    (OPTIONS, excluded path or prefix); `identity` is then None.
    """
    identity: Any = None
    exempt: bool = False


@dataclass(frozen=True, slots=True)
class ParsedToken:
    """
    A decoded token whose signature has been verified.

    `valid` carries the expiry check so callers can order their own
    header checks before rejecting an expired token.
    """
    header: Mapping[str, Any] = field(default_factory=dict)
    claims: Mapping[str, Any] = field(default_factory=dict)
    valid: bool = False

    @property
    def algorithm(self) -> Optional[str]:
        return self.header.get("alg")


def _code_label(value: int, enum_type: type) -> str:
    try:
        return enum_type(value).label
    except ValueError:
        return ""


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """
    One completed, attributable operator action.

    Records are append-only: `id` is assigned by the store and
    `create_time` is stamped by the write path.
    """
    share_id: str
    operating_object: str
    operating_type: int
    operating_resource: int
    group_ids: frozenset = frozenset()
    id: Optional[int] = None
    create_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        check_operation_code(self.operating_type, "operating_type")
        check_operation_code(self.operating_resource, "operating_resource")
        object.__setattr__(self, "group_ids", frozenset(int(g) for g in self.group_ids))

    # --- Read-only derived values -----------------------------------------

    @property
    def operation(self) -> str:
        return _code_label(self.operating_type, OperationType)

    @property
    def resource(self) -> str:
        return _code_label(self.operating_resource, OperationResource)

    @property
    def kind(self) -> str:
        return convert_operation_type(self.operating_type, self.operating_resource)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "share_id": self.share_id,
            "group_id": sorted(self.group_ids),
            "operating_object": self.operating_object,
            "create_time": self.create_time.isoformat() if self.create_time else None,
            "operation": self.operation,
            "resource": self.resource,
        }


def audit_record(
        *,
        share_id: str,
        operating_object: str,
        operation: OperationType,
        resource: OperationResource,
        group_ids: Iterable[int] = (),
) -> AuditRecord:
    """Convenience constructor taking the enum members directly."""
    return AuditRecord(
        share_id=share_id,
        operating_object=operating_object,
        operating_type=int(operation),
        operating_resource=int(resource),
        group_ids=frozenset(group_ids),
    )
