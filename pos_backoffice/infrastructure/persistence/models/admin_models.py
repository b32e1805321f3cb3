"""
Modeles SQLAlchemy des tables d'administration.
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from pos_backoffice.infrastructure.persistence.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppSettings(Base):
    """Table app_settings - Parametres persistants (valeur JSON par cle)"""
    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)
    description = Column(String(255))
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class ResetLogRecord(Base):
    """Table reset_logs - Journal append-only des resets"""
    __tablename__ = "reset_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    backup_filename = Column(String(64), nullable=False)
    preserve_master_data = Column(Boolean, nullable=False)
    content = Column(Text, nullable=False)

    __table_args__ = (
        Index('idx_reset_logs_created', 'created_at'),
    )
