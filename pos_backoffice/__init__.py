"""
POS Back-Office - Cycle de vie des sauvegardes de la base

Structure:
    - domain/: Coeur metier (artifacts, parametres, cron, exceptions)
    - application/: Use cases (backup, planning, reset, restauration)
    - infrastructure/: Adapters (pg_dump, fichiers, SQLAlchemy, APScheduler)
    - presentation/: API REST (FastAPI)
"""

__version__ = "1.0.0"
