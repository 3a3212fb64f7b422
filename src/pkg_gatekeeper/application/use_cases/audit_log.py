from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Tuple

from ...domain.entities import AuditRecord
from ...domain.exceptions import EncodingError, PersistenceError
from ...domain.ports import AuditStore
from ...domain.value_objects import Page

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class AuditLogService:
    """
    Application use case for the append-only operator audit log.

    Takes an AuditStore port and:
      - stamps `create_time` on every appended record
      - returns pages newest-first together with the total row count

    Store failures surface as PersistenceError; nothing is retried here.
    """

    store: AuditStore
    clock: Callable[[], datetime] = field(default=_utcnow)

    def append(self, record: AuditRecord) -> AuditRecord:
        """
        Persist `record` with a server-assigned creation time.

        Any caller-provided `create_time` is overwritten.

        Raises:
            PersistenceError
            EncodingError
        """
        stamped = replace(record, id=None, create_time=self.clock())
        stored = self._call(self.store.insert, stamped)
        logger.debug(
            "Audit record %s appended for share %s (%s)",
            stored.id,
            stored.share_id,
            stored.kind,
        )
        return stored

    def list(self, page: Page) -> Tuple[int, List[AuditRecord]]:
        """All records, newest first, sliced to `page`."""
        total = self._call(self.store.count)
        records = self._call(self.store.fetch, page)
        return total, list(records)

    def list_by_session(self, share_id: str, page: Page) -> Tuple[int, List[AuditRecord]]:
        """
        Records whose share id equals `share_id` exactly.

        An unknown share id yields (0, []).
        """
        total = self._call(self.store.count, share_id=share_id)
        if total == 0:
            return 0, []
        records = self._call(self.store.fetch, page, share_id=share_id)
        return total, list(records)

    # ------------------------------------------------------------------ #
    # Internal
    # ------------------------------------------------------------------ #

    @staticmethod
    def _call(fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (PersistenceError, EncodingError):
            raise
        except Exception as exc:
            # Wrap unexpected store errors so callers see one failure type
            logger.exception("Audit store call %s failed", getattr(fn, "__name__", fn))
            raise PersistenceError(f"Audit store failure: {exc}") from exc
