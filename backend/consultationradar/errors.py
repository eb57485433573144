"""Jerarquia de errores del agregador.

Los errores fatales (``FatalError``) solo se traducen a codigo de salida en
``consultationradar.cli.main``; el resto se registran y la ejecucion sigue.
"""

from __future__ import annotations


class FatalError(RuntimeError):
    """Condicion de arranque irrecuperable: aborta la ejecucion."""


class ConfigLoadError(FatalError):
    """Fichero de configuracion ausente o mal formado."""


class CacheLoadError(FatalError):
    """Cache de ids ausente o mal formado."""


class CacheSaveError(FatalError):
    """No se pudo escribir el cache de ids."""


class BoardLookupError(FatalError):
    """Fallo resolviendo el tablero, sus listas o sus etiquetas."""


class BoardError(RuntimeError):
    """Fallo puntual del tablero (p.ej. creacion de una tarjeta)."""


class SourceFetchError(RuntimeError):
    """Fallo de red o de decodificacion de una fuente concreta."""


class EndDateParseError(ValueError):
    """El atributo de fecha de cierre existe pero no se puede parsear."""
