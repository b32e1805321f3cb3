"""
Presentation Layer - Interfaces exposees.

    - api/: API REST FastAPI (backup, reset)
"""
