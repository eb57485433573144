"""Utilidades HTTP y de parsing compartidas por los adapters."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlsplit
from xml.etree.ElementTree import Element, ParseError

import httpx
from defusedxml import ElementTree as SafeElementTree
from defusedxml.common import DefusedXmlException

from consultationradar.errors import SourceFetchError

_RSS1_NS = "{http://purl.org/rss/1.0/}"
_RDF_ABOUT = "{http://www.w3.org/1999/02/22-rdf-syntax-ns#}about"
_DC_NS = "{http://purl.org/dc/elements/1.1/}"


def to_str(v: object) -> Optional[str]:
    """Convierte un valor escalar a string limpio o None."""
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def safe_url_for_logs(url: str) -> str:
    """Quita query/fragment para no filtrar credenciales en logs."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    if not parts.hostname:
        return "<invalid-url>"
    port = f":{parts.port}" if parts.port else ""
    return f"{parts.scheme or 'http'}://{parts.hostname}{port}{parts.path or ''}"


def site_root(url: str) -> str:
    """Devuelve ``scheme://host[:port]`` sin path, query ni fragment."""
    parts = urlsplit((url or "").strip())
    if not parts.scheme or not parts.netloc:
        raise SourceFetchError(f"invalid feed url: {url!r}")
    return f"{parts.scheme}://{parts.netloc}"


def http_get(
    client: httpx.Client, url: str, params: dict[str, Any] | None = None
) -> httpx.Response:
    """GET con ``raise_for_status``; cualquier fallo se traduce a ``SourceFetchError``."""
    try:
        resp = client.get(url, params=params)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceFetchError(
            f"HTTP {exc.response.status_code} for {safe_url_for_logs(url)}"
        ) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise SourceFetchError(f"request to {safe_url_for_logs(url)} failed: {exc}") from exc
    return resp


def parse_search_date(value: str) -> datetime:
    """Parsea ``YYYY/MM/DD`` como medianoche UTC (lanza ValueError si no encaja)."""
    return datetime.strptime(value.strip(), "%Y/%m/%d").replace(tzinfo=timezone.utc)


def parse_feed(xml_text: str) -> list[dict[str, Optional[str]]]:
    """Parsea RSS 2.0, RSS 1.0 (RDF) o Atom a dicts planos.

    Un XML valido con otra raiz (p.ej. una pagina HTML de mantenimiento) no es
    un feed vacio: se rechaza con ``SourceFetchError``.
    """
    try:
        root = SafeElementTree.fromstring(xml_text)
    except (ParseError, DefusedXmlException) as exc:
        raise SourceFetchError(f"could not parse feed: {exc}") from exc

    kind = _local_name(root.tag)
    if kind == "rss":
        channel = root.find("channel")
        items = channel.findall("item") if channel is not None else []
        return [_parse_rss_item(item) for item in items]
    if kind == "channel":
        return [_parse_rss_item(item) for item in root.findall("item")]
    if kind == "RDF":
        return [_parse_rdf_item(item) for item in root.findall(f"{_RSS1_NS}item")]
    if kind == "feed":
        ns = _get_ns(root)
        return [_parse_atom_entry(entry, ns) for entry in root.findall(f"{ns}entry")]
    raise SourceFetchError(f"unrecognized feed format: <{kind}>")


def _parse_rss_item(item: Element) -> dict[str, Optional[str]]:
    return {
        "guid": _text(item.find("guid")),
        "title": _text(item.find("title")),
        "link": _text(item.find("link")),
        "description": _text(item.find("description")),
        "published": _text(item.find("pubDate")),
    }


def _parse_rdf_item(item: Element) -> dict[str, Optional[str]]:
    return {
        "guid": _text(item.find(f"{_DC_NS}identifier")) or to_str(item.attrib.get(_RDF_ABOUT)),
        "title": _text(item.find(f"{_RSS1_NS}title")),
        "link": _text(item.find(f"{_RSS1_NS}link")),
        "description": _text(item.find(f"{_RSS1_NS}description")),
        "published": _text(item.find(f"{_DC_NS}date")),
    }


def _parse_atom_entry(entry: Element, ns: str) -> dict[str, Optional[str]]:
    link_elem = entry.find(f"{ns}link")
    link = link_elem.attrib.get("href") if link_elem is not None else None
    return {
        "guid": _text(entry.find(f"{ns}id")),
        "title": _text(entry.find(f"{ns}title")),
        "link": link,
        "description": _text(entry.find(f"{ns}summary")) or _text(entry.find(f"{ns}content")),
        "published": _text(entry.find(f"{ns}updated")) or _text(entry.find(f"{ns}published")),
    }


def _text(elem: Element | None) -> Optional[str]:
    if elem is None:
        return None
    if elem.text:
        return elem.text.strip()
    return None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _get_ns(elem: Element) -> str:
    if elem.tag.startswith("{"):
        return elem.tag.split("}")[0] + "}"
    return ""
