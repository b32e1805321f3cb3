"""Endpoints des sauvegardes."""
