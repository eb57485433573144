"""Agregador de consultas publicas hacia un tablero de Trello."""

__version__ = "0.1.0"
