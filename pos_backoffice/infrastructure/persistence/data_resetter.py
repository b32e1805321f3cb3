"""
SqlAlchemyDataResetter - Phase destructive du reset.

Implemente le port DataResetter.

Modes:
------
- Conservation (preserve_master_data=True): DELETE des tables
  transactionnelles dans UNE transaction, puis remise a 1 des
  sequences (PostgreSQL). Utilisateurs, categories et produits restent.
- Complet (preserve_master_data=False): DROP puis CREATE du schema
  du point de vente depuis les modeles SQLAlchemy.

Les tables d'administration (app_settings, reset_logs) sont sur une
autre metadata et ne sont jamais touchees.

Annulation:
-----------
Le mode conservation est toujours annule en cas d'erreur. En mode
complet, le DDL n'est transactionnel que sous PostgreSQL.
"""

from typing import Dict

from sqlalchemy import delete, func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError

from pos_backoffice.domain.ports.data_resetter import DataResetError, DataResetter
from pos_backoffice.infrastructure.logging import get_logger
from pos_backoffice.infrastructure.persistence.database import DatabaseManager
from pos_backoffice.infrastructure.persistence.models import PosBase, TRANSACTIONAL_MODELS

logger = get_logger(__name__)


class SqlAlchemyDataResetter(DataResetter):
    """
    Reset des donnees du point de vente.

    Example:
        >>> resetter = SqlAlchemyDataResetter(db)
        >>> resetter.count_rows()["sales"]
        42
        >>> resetter.reset(preserve_master_data=True)
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def count_rows(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}

        try:
            existing = set(inspect(self._db.engine).get_table_names())
            with self._db.engine.connect() as conn:
                for table in PosBase.metadata.sorted_tables:
                    if table.name not in existing:
                        counts[table.name] = 0
                        continue
                    counts[table.name] = conn.execute(
                        select(func.count()).select_from(table)
                    ).scalar_one()
        except SQLAlchemyError as e:
            logger.error("row_count_failed", error=str(e))
            raise DataResetError(_safe_reason(e), rolled_back=True) from e

        return counts

    def reset(self, preserve_master_data: bool) -> None:
        if preserve_master_data:
            self._clear_transactional()
        else:
            self._recreate_schema()

    def _clear_transactional(self) -> None:
        try:
            with self._db.engine.begin() as conn:
                for model in TRANSACTIONAL_MODELS:
                    conn.execute(delete(model.__table__))
                if self._db.is_postgresql:
                    for model in TRANSACTIONAL_MODELS:
                        conn.execute(
                            text("SELECT setval(pg_get_serial_sequence(:table, 'id'), 1, false)"),
                            {"table": model.__tablename__},
                        )
        except SQLAlchemyError as e:
            logger.error("transactional_clear_failed", error=str(e))
            raise DataResetError(_safe_reason(e), rolled_back=True) from e

        logger.info("transactional_tables_cleared", tables=[m.__tablename__ for m in TRANSACTIONAL_MODELS])

    def _recreate_schema(self) -> None:
        try:
            with self._db.engine.begin() as conn:
                PosBase.metadata.drop_all(conn)
                PosBase.metadata.create_all(conn)
        except SQLAlchemyError as e:
            logger.error("schema_recreate_failed", error=str(e))
            raise DataResetError(_safe_reason(e), rolled_back=self._db.is_postgresql) from e

        logger.info("pos_schema_recreated", tables=len(PosBase.metadata.sorted_tables))


def _safe_reason(error: SQLAlchemyError) -> str:
    # Le detail SQL reste dans les logs serveur
    return f"erreur de la base de donnees ({type(error).__name__})"
