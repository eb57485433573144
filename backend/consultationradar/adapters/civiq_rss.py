"""Adapter Civiq: feed RSS de consultas."""

from __future__ import annotations

import html
from datetime import datetime
from typing import Optional

import httpx

from consultationradar.adapters.base import Adapter
from consultationradar.adapters.end_date import extract_end_date
from consultationradar.adapters.utils import http_get, parse_feed, site_root, to_str
from consultationradar.domain.models import ConsultationRecord
from consultationradar.errors import EndDateParseError
from consultationradar.logging_utils import get_logger

logger = get_logger(__name__)

NODE_PATH = "/en/node/"


class CiviqRSSAdapter(Adapter):
    """Lee el RSS de una instancia Civiq.

    El ``link`` de los items no es fiable: la URL se reconstruye con el host
    del propio feed y el guid del item.
    """

    def node_url(self, root: str, guid: str) -> str:
        return f"{root}{NODE_PATH}{guid}"

    def _fetch(self, client: httpx.Client) -> list[ConsultationRecord]:
        root = site_root(self.url)
        resp = http_get(client, self.url)
        entries = parse_feed(resp.text)

        out: list[ConsultationRecord] = []
        for entry in entries:
            guid = to_str(entry.get("guid"))
            title = html.unescape(entry.get("title") or "")
            if not guid:
                logger.warning("[%s] skipping item without guid: %r", self.source_id(), title)
                continue
            out.append(
                ConsultationRecord(
                    id=guid,
                    title=title,
                    url=self.node_url(root, guid),
                    label=self.label,
                    end_date=self._end_date(entry.get("description"), title),
                )
            )
        return out

    def _end_date(self, description: Optional[str], title: str) -> Optional[datetime]:
        try:
            return extract_end_date(description)
        except EndDateParseError as exc:
            logger.error("error parsing date for %s: %s", title, exc)
            return None
