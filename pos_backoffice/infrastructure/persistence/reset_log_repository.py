"""
SqlAlchemyResetLogRepository - Journal des resets dans la table reset_logs.

Implemente le port ResetLogRepository.
Les entrees ne sont jamais modifiees ni supprimees.
"""

from datetime import timezone
from typing import List

from sqlalchemy import desc

from pos_backoffice.domain.entities.reset_log import ResetLogEntry
from pos_backoffice.domain.ports.reset_log_repository import ResetLogRepository
from pos_backoffice.infrastructure.persistence.database import DatabaseManager
from pos_backoffice.infrastructure.persistence.models import ResetLogRecord


class SqlAlchemyResetLogRepository(ResetLogRepository):
    """Repository SQLAlchemy pour le journal des resets."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def append(self, entry: ResetLogEntry) -> ResetLogEntry:
        with self._db.get_session() as session:
            record = ResetLogRecord(
                created_at=entry.created_at,
                backup_filename=entry.backup_filename,
                preserve_master_data=entry.preserve_master_data,
                content=entry.content,
            )
            session.add(record)
            session.flush()
            return self._to_entity(record)

    def list(self, limit: int = 100) -> List[ResetLogEntry]:
        with self._db.get_session() as session:
            records = (
                session.query(ResetLogRecord)
                .order_by(desc(ResetLogRecord.created_at), desc(ResetLogRecord.id))
                .limit(limit)
                .all()
            )
            return [self._to_entity(r) for r in records]

    def _to_entity(self, record: ResetLogRecord) -> ResetLogEntry:
        created_at = record.created_at
        if created_at.tzinfo is None:
            # SQLite ne conserve pas le fuseau
            created_at = created_at.replace(tzinfo=timezone.utc)
        return ResetLogEntry(
            id=record.id,
            created_at=created_at,
            backup_filename=record.backup_filename,
            preserve_master_data=record.preserve_master_data,
            content=record.content,
        )
