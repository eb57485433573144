"""Enums de dominio para los tipos de fuente."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class SourceType(str, Enum):
    """Tipos de fuente soportados."""

    CITIZEN_SPACE = "citizen_space"
    RSS_CIVIQ = "rss_civiq"

    @classmethod
    def parse(cls, raw: str) -> Optional["SourceType"]:
        """Normaliza el tipo declarado en config; None si es desconocido.

        Acepta ``civiq`` como alias historico de ``rss_civiq``.
        """
        value = (raw or "").strip().lower()
        if value == "civiq":
            return cls.RSS_CIVIQ
        try:
            return cls(value)
        except ValueError:
            return None
