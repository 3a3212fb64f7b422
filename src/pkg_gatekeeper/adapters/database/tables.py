"""Declarative base and audit table for the SQLAlchemy audit store.

Uses SQLAlchemy 2.0 ``DeclarativeBase``. The affected-group list is kept
in a TEXT column holding a JSON array; encoding and decoding happen in
``audit_store`` rather than in a custom column type.
"""

from __future__ import annotations

import datetime

from sqlalchemy import DateTime, Integer, SmallInteger, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class GatekeeperBase(DeclarativeBase):
    """Shared declarative base for pkg_gatekeeper tables."""


class OperationAuditTable(GatekeeperBase):
    __tablename__ = "operation_audit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    share_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    group_id: Mapped[str | None] = mapped_column(Text)
    operating_object: Mapped[str] = mapped_column(Text, nullable=False, default="")
    operating_type: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    operating_resource: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    create_time: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
