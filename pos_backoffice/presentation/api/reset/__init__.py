"""Endpoints du reset de la base."""
