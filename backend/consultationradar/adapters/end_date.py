"""Extraccion de la fecha de cierre embebida en la descripcion HTML."""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup

from consultationradar.errors import EndDateParseError

END_DATE_SELECTOR = ".date-display-end"
END_DATE_ATTRIBUTE = "content"
# RFC3339: fraccion de segundos opcional (cualquier precision) y offset obligatorio.
_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def extract_end_date(description: str | None) -> Optional[datetime]:
    """Busca ``.date-display-end`` y parsea su atributo ``content`` (RFC3339).

    - Sin elemento (o sin atributo): devuelve None, no es un error.
    - Atributo presente pero no parseable: lanza ``EndDateParseError``.

    La descripcion puede venir con el HTML escapado, por eso se desescapa
    antes de parsear.
    """
    if not description:
        return None

    soup = BeautifulSoup(html.unescape(description), "html.parser")
    node = soup.select_one(END_DATE_SELECTOR)
    if node is None:
        return None

    raw = node.get(END_DATE_ATTRIBUTE)
    if raw is None:
        return None
    if isinstance(raw, list):
        raw = " ".join(raw)

    return parse_rfc3339(raw)


def parse_rfc3339(value: str) -> datetime:
    """Parsea un instante RFC3339 con offset; lanza ``EndDateParseError`` si no encaja."""
    match = _RFC3339.match(value.strip())
    if match is None:
        raise EndDateParseError(f"invalid end date {value!r}: not an RFC3339 timestamp")
    day, clock, fraction, offset = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        return datetime.fromisoformat(f"{day}T{clock}.{micros}{offset}")
    except ValueError as exc:
        raise EndDateParseError(f"invalid end date {value!r}: {exc}") from exc
