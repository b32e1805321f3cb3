"""
Bases declaratives SQLAlchemy.

Deux metadata distinctes:
- Base: tables d'administration (parametres, journal des resets),
  jamais touchees par un reset.
- PosBase: schema metier du point de vente, cible du reset.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

PosBase = declarative_base()
