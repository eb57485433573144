"""Modelos canonicos del dominio (Pydantic)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ConsultationRecord(BaseModel):
    """Consulta normalizada, comun a todos los adapters.

    El ``id`` debe ser estable entre ejecuciones: el cache de deduplicacion
    depende de ello.
    """

    id: str
    title: str
    url: str
    label: str
    end_date: Optional[datetime] = None


class SourceConfig(BaseModel):
    """Fuente a consultar tal y como aparece en el fichero de config."""

    model_config = ConfigDict(frozen=True)

    type: str
    url: str
    label: str


class AggregatorConfig(BaseModel):
    """Fichero de configuracion completo (credenciales de Trello + fuentes)."""

    model_config = ConfigDict(frozen=True)

    trello_key: str
    trello_token: str
    trello_board_id: str
    trello_list_name: str
    sources: List[SourceConfig] = Field(default_factory=list)


class BoardContext(BaseModel):
    """Tablero resuelto una vez por ejecucion: lista destino y etiquetas."""

    model_config = ConfigDict(frozen=True)

    board_id: str
    list_id: str
    labels: Dict[str, str] = Field(default_factory=dict)

    def resolve_label(self, name: str) -> Optional[str]:
        """Devuelve el id de la etiqueta con ese nombre exacto, o None."""
        return self.labels.get(name)


class DedupCache(BaseModel):
    """Conjunto ordenado de ids ya convertidos en tarjeta.

    Sin duplicados: ``add`` de un id existente no hace nada y los duplicados
    de entrada se colapsan manteniendo la primera aparicion.
    """

    ids: List[str] = Field(default_factory=list)
    _index: Set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        ordered: List[str] = []
        seen: Set[str] = set()
        for value in self.ids:
            if value in seen:
                continue
            seen.add(value)
            ordered.append(value)
        self.ids = ordered
        self._index = seen

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "DedupCache":
        return cls(ids=list(ids))

    def contains(self, record_id: str) -> bool:
        return record_id in self._index

    def add(self, record_id: str) -> None:
        if record_id in self._index:
            return
        self._index.add(record_id)
        self.ids.append(record_id)

    def copy_cache(self) -> "DedupCache":
        """Copia independiente (la orquestacion no toca el cache del llamador)."""
        return DedupCache(ids=list(self.ids))

    def __len__(self) -> int:
        return len(self.ids)


class CardRequest(BaseModel):
    """Peticion de creacion de tarjeta hacia el tablero."""

    board_id: str
    list_id: str
    name: str
    desc: str
    due: Optional[datetime] = None
    label_ids: List[str] = Field(default_factory=list)


class SyncReport(BaseModel):
    """Resultado de una sincronizacion, incluido el cache actualizado."""

    cache: DedupCache
    created: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    unknown_sources: List[str] = Field(default_factory=list)
