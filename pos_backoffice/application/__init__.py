"""
Application Layer - Orchestration des operations de sauvegarde.

Ce module contient:
    - use_cases/: Backup, planning, reset, restauration, parametres

Les use cases ne dependent que du domaine (entites et ports).
"""
