"""Contrato base de adaptadores de fuentes de consultas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

import httpx

from consultationradar.domain.models import ConsultationRecord, SourceConfig
from consultationradar.errors import SourceFetchError
from consultationradar.logging_utils import get_logger

logger = get_logger(__name__)

USER_AGENT = "consultationradar/0.1"


class Adapter(ABC):
    """Interfaz minima que todo adaptador debe implementar.

    ``read`` nunca propaga fallos de red o decodificacion: la fuente
    simplemente no aporta registros en esta ejecucion.
    """

    def __init__(
        self,
        source: SourceConfig,
        client: httpx.Client | None = None,
        timeout_sec: float = 30.0,
    ) -> None:
        self._source = source
        self._client = client
        self._timeout_sec = timeout_sec

    @property
    def label(self) -> str:
        return self._source.label

    @property
    def url(self) -> str:
        return self._source.url

    def source_id(self) -> str:
        """Identificador legible de la fuente (tipo + url)."""
        return f"{self._source.type}:{self._source.url}"

    def read(self) -> list[ConsultationRecord]:
        """Lee la fuente y devuelve registros normalizados."""
        try:
            with self._client_context() as client:
                records = self._fetch(client)
        except SourceFetchError as exc:
            logger.error("error getting consultations from %s: %s", self.source_id(), exc)
            return []
        logger.debug("[%s] records: %s", self.source_id(), len(records))
        return records

    @abstractmethod
    def _fetch(self, client: httpx.Client) -> list[ConsultationRecord]:
        """Descarga y normaliza; lanza ``SourceFetchError`` si la fuente falla."""
        raise NotImplementedError

    @contextmanager
    def _client_context(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=self._timeout_sec,
            follow_redirects=True,
        ) as client:
            yield client
