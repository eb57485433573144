"""Contrato del tablero destino (sink de tarjetas)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from consultationradar.domain.models import BoardContext, CardRequest


class BoardSink(ABC):
    """Tablero capaz de resolver su contexto y crear tarjetas."""

    @abstractmethod
    def load_context(self, board_id: str, list_name: str) -> BoardContext:
        """Resuelve lista destino y etiquetas; lanza ``BoardLookupError`` si falla."""
        raise NotImplementedError

    @abstractmethod
    def create_card(self, request: CardRequest) -> str:
        """Crea la tarjeta y devuelve su id; lanza ``BoardError`` si falla."""
        raise NotImplementedError
