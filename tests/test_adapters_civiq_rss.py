from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest

from consultationradar.adapters import CiviqRSSAdapter
from consultationradar.domain.models import SourceConfig

_FEED_URL = "https://consult.example.scot:8443/en/consultations/rss?status=open#top"

_RSS = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Consultations</title>
    <link>https://consult.example.scot/en</link>
    <item>
      <title>Parks &amp;amp; Gardens</title>
      <link>https://wrong.example/node/1</link>
      <description>&lt;span class="date-display-end" content="2018-06-30T00:00:00+00:00"&gt;30 June&lt;/span&gt;</description>
      <guid isPermaLink="false">101</guid>
    </item>
    <item>
      <title>Bus lanes</title>
      <link>https://wrong.example/node/2</link>
      <description>&lt;p&gt;No closing date&lt;/p&gt;</description>
      <guid isPermaLink="false">102</guid>
    </item>
    <item>
      <title>Broken date</title>
      <description>&lt;span class="date-display-end" content="tomorrow"&gt;&lt;/span&gt;</description>
      <guid>103</guid>
    </item>
    <item>
      <title>No guid</title>
      <description></description>
    </item>
  </channel>
</rss>
"""

_ATOM = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Consultations</title>
  <entry>
    <id>201</id>
    <title>Atom item</title>
    <link href="https://wrong.example/node/201"/>
    <summary>&lt;span class="date-display-end" content="2018-06-30T00:00:00+00:00"&gt;&lt;/span&gt;</summary>
  </entry>
</feed>
"""


def _adapter(handler, mock_client, url: str = _FEED_URL) -> CiviqRSSAdapter:
    source = SourceConfig(type="rss_civiq", url=url, label="Scotland")
    return CiviqRSSAdapter(source, client=mock_client(handler))


def test_civiq_rss_maps_items(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_RSS)

    records = _adapter(handler, mock_client).read()

    assert [r.id for r in records] == ["101", "102", "103"]
    assert all(r.label == "Scotland" for r in records)
    assert records[0].title == "Parks & Gardens"
    assert records[0].end_date == datetime(2018, 6, 30, tzinfo=timezone.utc)
    assert records[1].end_date is None
    # Fecha no parseable: el registro se conserva sin fecha.
    assert records[2].end_date is None


def test_civiq_rss_builds_url_from_feed_host_and_guid(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_RSS)

    records = _adapter(handler, mock_client).read()

    assert [r.url for r in records] == [
        "https://consult.example.scot:8443/en/node/101",
        "https://consult.example.scot:8443/en/node/102",
        "https://consult.example.scot:8443/en/node/103",
    ]
    assert all("wrong.example" not in r.url for r in records)


def test_civiq_rss_supports_atom_entries(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_ATOM)

    records = _adapter(handler, mock_client, url="http://civiq.example/feed").read()

    assert len(records) == 1
    assert records[0].id == "201"
    assert records[0].url == "http://civiq.example/en/node/201"
    assert records[0].end_date == datetime(2018, 6, 30, tzinfo=timezone.utc)


def test_civiq_rss_yields_nothing_on_invalid_xml(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<rss><channel><item>")

    assert _adapter(handler, mock_client).read() == []


def test_civiq_rss_yields_nothing_on_http_error(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    assert _adapter(handler, mock_client).read() == []


def test_civiq_rss_yields_nothing_for_url_without_host(mock_client) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text=_RSS)

    assert _adapter(handler, mock_client, url="not-a-url").read() == []
    assert calls == []


def test_civiq_rss_logs_maintenance_page_as_source_error(
    mock_client, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    package_logger = logging.getLogger("consultationradar")
    monkeypatch.setattr(package_logger, "propagate", True)
    monkeypatch.setattr(package_logger, "disabled", False)
    caplog.set_level(logging.ERROR, logger="consultationradar")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html><body><p>maintenance</p></body></html>")

    assert _adapter(handler, mock_client).read() == []
    assert "unrecognized feed format" in caplog.text
