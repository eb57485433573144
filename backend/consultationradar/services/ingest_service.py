"""Servicio de ingest: construye adapters por fuente y concatena registros."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import httpx

from consultationradar.adapters import Adapter, CitizenSpaceAdapter, CiviqRSSAdapter
from consultationradar.config import Settings
from consultationradar.domain.enums import SourceType
from consultationradar.domain.models import ConsultationRecord, SourceConfig
from consultationradar.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass
class IngestResult:
    records: list[ConsultationRecord] = field(default_factory=list)
    unknown_sources: list[str] = field(default_factory=list)


class IngestService:
    """Orquestador de lectura de las fuentes configuradas (en orden)."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client

    def build_adapter(self, source: SourceConfig) -> Adapter | None:
        """Adapter para la fuente, o None si el tipo es desconocido."""
        source_type = SourceType.parse(source.type)
        if source_type is SourceType.CITIZEN_SPACE:
            return CitizenSpaceAdapter(
                source,
                search_window=self._settings.search_window(),
                client=self._client,
                timeout_sec=self._settings.http_timeout_sec,
            )
        if source_type is SourceType.RSS_CIVIQ:
            return CiviqRSSAdapter(
                source,
                client=self._client,
                timeout_sec=self._settings.http_timeout_sec,
            )
        return None

    def ingest(self, sources: Sequence[SourceConfig]) -> IngestResult:
        """Lee todas las fuentes y concatena resultados en orden de config."""
        result = IngestResult()
        for source in sources:
            adapter = self.build_adapter(source)
            if adapter is None:
                logger.error("do not have source type %s (%s)", source.type, source.url)
                result.unknown_sources.append(source.type)
                continue
            logger.debug("Reading adapter: %s", adapter.source_id())
            result.records.extend(adapter.read())
        logger.info("Total consultations fetched: %s", len(result.records))
        return result
