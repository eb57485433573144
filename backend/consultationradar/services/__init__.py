"""Servicios de negocio (ingest, sincronizacion)."""

from consultationradar.services.ingest_service import IngestResult, IngestService
from consultationradar.services.sync_service import SyncService

__all__ = ["IngestResult", "IngestService", "SyncService"]
