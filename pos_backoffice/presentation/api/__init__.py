"""
API REST FastAPI du back-office.

Routes (prefixe /api/v1, acces administrateur):
    - /backup/...: parametres, liste, backup manuel, telechargement,
      suppression, planning, restauration
    - /reset/...: parametres, reset, etat, journal
"""
