"""Tableros destino de las tarjetas."""

from consultationradar.boards.base import BoardSink
from consultationradar.boards.trello import TrelloBoard

__all__ = ["BoardSink", "TrelloBoard"]
