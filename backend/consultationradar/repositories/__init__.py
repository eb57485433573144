"""Repositorios de persistencia (cache local)."""

from consultationradar.repositories.cache_repo import CacheRepo

__all__ = ["CacheRepo"]
