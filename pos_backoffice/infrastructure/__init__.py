"""
Infrastructure Layer - Adapters vers le monde exterieur.

Ce module contient:
    - backup/: pg_dump/pg_restore, stockage des fichiers, timer APScheduler
    - persistence/: SQLAlchemy (parametres, journal, schema POS)
    - logging/: structlog
    - container.py: Assemblage des dependances
"""
