import json
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ...domain.entities import AuditRecord
from ...domain.exceptions import EncodingError, PersistenceError
from ...domain.ports import AuditStore
from ...domain.value_objects import Page
from .tables import GatekeeperBase, OperationAuditTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------- #
# Group-id column codec
# ---------------------------------------------------------------------- #


def encode_group_ids(group_ids: Iterable[int]) -> str:
    """frozenset({3, 1}) -> "[1, 3]"."""
    try:
        return json.dumps(sorted(int(g) for g in group_ids))
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Cannot encode group ids: {exc}") from exc


def decode_group_ids(raw: Optional[str]) -> frozenset:
    """'[1, 3]' -> frozenset({1, 3}); NULL -> empty set."""
    if raw is None or raw == "":
        return frozenset()
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EncodingError(f"Cannot decode group ids {raw!r}: {exc}") from exc

    if not isinstance(values, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in values
    ):
        raise EncodingError(f"Group ids must be a JSON array of integers, got {raw!r}")
    return frozenset(values)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------- #
# Store
# ---------------------------------------------------------------------- #


class SQLAlchemyAuditStore(AuditStore):
    """
    Adapter implementing the AuditStore port on SQLAlchemy 2.0.

    Infrastructure layer:
    - Knows the `operation_audit` table layout.
    - Opens one short session per call, so instances can be shared.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> "SQLAlchemyAuditStore":
        return cls(create_engine(url, **engine_kwargs))

    def create_tables(self) -> None:
        GatekeeperBase.metadata.create_all(self._engine)

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def insert(self, record: AuditRecord) -> AuditRecord:
        row = OperationAuditTable(
            share_id=record.share_id,
            group_id=encode_group_ids(record.group_ids),
            operating_object=record.operating_object,
            operating_type=int(record.operating_type),
            operating_resource=int(record.operating_resource),
            create_time=record.create_time,
        )
        try:
            with self._sessions.begin() as session:
                session.add(row)
                session.flush()
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to insert audit record: {exc}") from exc

    def count(self, share_id: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(OperationAuditTable)
        if share_id is not None:
            stmt = stmt.where(OperationAuditTable.share_id == share_id)
        try:
            with self._sessions() as session:
                return int(session.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to count audit records: {exc}") from exc

    def fetch(self, page: Page, share_id: Optional[str] = None) -> Sequence[AuditRecord]:
        stmt = select(OperationAuditTable)
        if share_id is not None:
            stmt = stmt.where(OperationAuditTable.share_id == share_id)
        stmt = (
            stmt.order_by(
                OperationAuditTable.create_time.desc(),
                OperationAuditTable.id.desc(),
            )
            .offset(page.offset)
            .limit(page.page_size)
        )
        try:
            with self._sessions() as session:
                rows: List[OperationAuditTable] = list(session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to fetch audit records: {exc}") from exc
        return [self._to_record(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_record(row: OperationAuditTable) -> AuditRecord:
        return AuditRecord(
            id=row.id,
            share_id=row.share_id,
            group_ids=decode_group_ids(row.group_id),
            operating_object=row.operating_object,
            operating_type=row.operating_type,
            operating_resource=row.operating_resource,
            create_time=_as_utc(row.create_time),
        )
