"""Servicio de sincronizacion: registros nuevos -> tarjetas en el tablero.

Estados de cada registro::

    Fetched -> LabelResolved | LabelMissing
            -> Skipped (duplicado)
             | CardCreated -> CacheUpdated
             | CardCreateFailed

No hay reintentos. El cache recibido no se modifica: se trabaja sobre una
copia que se devuelve en ``SyncReport`` para que el llamador la persista.
"""

from __future__ import annotations

from typing import Sequence

from consultationradar.boards.base import BoardSink
from consultationradar.domain.models import (
    BoardContext,
    CardRequest,
    ConsultationRecord,
    DedupCache,
    SourceConfig,
    SyncReport,
)
from consultationradar.errors import BoardError
from consultationradar.logging_utils import get_logger
from consultationradar.services.ingest_service import IngestService

logger = get_logger(__name__)


class SyncService:
    """Compone ingest, deduplicacion y creacion de tarjetas."""

    def __init__(self, board: BoardSink, ingest_service: IngestService) -> None:
        self._board = board
        self._ingest = ingest_service

    def run(
        self,
        sources: Sequence[SourceConfig],
        context: BoardContext,
        cache: DedupCache,
    ) -> SyncReport:
        """Lee las fuentes y sincroniza sus registros con el tablero."""
        ingested = self._ingest.ingest(sources)
        report = self.sync_records(ingested.records, context, cache)
        report.unknown_sources = list(ingested.unknown_sources)
        return report

    def sync_records(
        self,
        records: Sequence[ConsultationRecord],
        context: BoardContext,
        cache: DedupCache,
    ) -> SyncReport:
        report = SyncReport(cache=cache.copy_cache())
        for record in records:
            self._sync_one(record, context, report)
        logger.info(
            "Sync finished: created=%s skipped=%s failed=%s",
            len(report.created),
            len(report.skipped),
            len(report.failed),
        )
        return report

    def _sync_one(self, record: ConsultationRecord, context: BoardContext, report: SyncReport) -> None:
        label_ids: list[str] = []
        label_id = context.resolve_label(record.label)
        if label_id is None:
            # Se intenta igualmente la tarjeta, sin etiqueta.
            logger.error("label error: could not find label %s in board", record.label)
        else:
            label_ids.append(label_id)

        if report.cache.contains(record.id):
            logger.debug("Skipping already synced consultation %s", record.id)
            report.skipped.append(record.id)
            return

        request = CardRequest(
            board_id=context.board_id,
            list_id=context.list_id,
            name=record.title,
            desc=record.url,
            due=record.end_date,
            label_ids=label_ids,
        )
        try:
            card_id = self._board.create_card(request)
        except BoardError as exc:
            logger.error("error creating card for %s: %s", record.title, exc)
            report.failed.append(record.id)
            return

        report.cache.add(record.id)
        report.created.append(record.id)
        logger.info("Created card %s for consultation %s", card_id, record.id)
