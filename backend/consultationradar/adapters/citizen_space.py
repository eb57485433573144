"""Adapter Citizen Space: busqueda JSON de consultas abiertas."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, List, Optional, cast

import httpx

from consultationradar.adapters.base import Adapter
from consultationradar.adapters.utils import http_get, parse_search_date, to_str
from consultationradar.domain.models import ConsultationRecord, SourceConfig
from consultationradar.errors import SourceFetchError
from consultationradar.logging_utils import get_logger

logger = get_logger(__name__)

SEARCH_PATH = "/api/2.3/json_search_results"
# dk=op: solo consultas abiertas
SEARCH_STATE = "op"


class CitizenSpaceAdapter(Adapter):
    """Consulta ``json_search_results`` en una ventana de fechas fija.

    Formato esperado: lista de objetos con al menos ``id``, ``title`` y
    ``url``; ``enddate`` (YYYY/MM/DD) es opcional.
    """

    def __init__(
        self,
        source: SourceConfig,
        search_window: tuple[str, str],
        client: httpx.Client | None = None,
        timeout_sec: float = 30.0,
    ) -> None:
        super().__init__(source, client=client, timeout_sec=timeout_sec)
        self._from_date, self._to_date = search_window

    def search_url(self) -> str:
        return f"{self.url.rstrip('/')}{SEARCH_PATH}"

    def _fetch(self, client: httpx.Client) -> list[ConsultationRecord]:
        params = {"dk": SEARCH_STATE, "fd": self._from_date, "td": self._to_date}
        resp = http_get(client, self.search_url(), params=params)

        try:
            loaded: Any = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SourceFetchError(f"error decoding consultations: {exc}") from exc
        if not isinstance(loaded, list):
            raise SourceFetchError("error decoding consultations: expected a JSON array")

        data: List[object] = cast(List[object], loaded)
        out: list[ConsultationRecord] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            record = self._map_entry(cast(Mapping[str, Any], item))
            if record is not None:
                out.append(record)
        return out

    def _map_entry(self, row: Mapping[str, Any]) -> Optional[ConsultationRecord]:
        record_id = to_str(row.get("id"))
        title = to_str(row.get("title")) or ""
        if not record_id:
            logger.warning("[%s] skipping consultation without id: %r", self.source_id(), title)
            return None

        return ConsultationRecord(
            id=record_id,
            title=title,
            url=to_str(row.get("url")) or "",
            label=self.label,
            end_date=self._end_date(row, title),
        )

    def _end_date(self, row: Mapping[str, Any], title: str) -> Optional[datetime]:
        raw = to_str(row.get("enddate"))
        if raw is None:
            return None
        try:
            return parse_search_date(raw)
        except ValueError as exc:
            # Se conserva el registro: tarjeta sin fecha de vencimiento.
            logger.error("failed to parse date for submission %s: %s", title, exc)
            return None
