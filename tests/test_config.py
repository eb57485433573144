from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from consultationradar.config import Settings, load_aggregator_config
from consultationradar.domain.enums import SourceType
from consultationradar.errors import ConfigLoadError


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_aggregator_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {
            "trello_key": "k",
            "trello_token": "t",
            "trello_board_id": "b",
            "trello_list_name": "Inbox",
            "sources": [
                {"type": "citizen_space", "url": "https://cs", "label": "CS"},
                {"type": "civiq", "url": "https://cq/rss", "label": "Civiq"},
                {"type": "mystery", "url": "https://x", "label": "X"},
            ],
        },
    )

    cfg = load_aggregator_config(path)

    assert cfg.trello_list_name == "Inbox"
    assert [s.type for s in cfg.sources] == ["citizen_space", "civiq", "mystery"]
    assert [SourceType.parse(s.type) for s in cfg.sources] == [
        SourceType.CITIZEN_SPACE,
        SourceType.RSS_CIVIQ,
        None,
    ]


def test_load_aggregator_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="could not get config"):
        load_aggregator_config(tmp_path / "nope.json")


def test_load_aggregator_config_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="could not decode config"):
        load_aggregator_config(path)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"trello_key": "k"},
        {
            "trello_key": "k",
            "trello_token": "t",
            "trello_board_id": "b",
            "trello_list_name": "Inbox",
            "sources": [{"type": "citizen_space", "url": "https://cs"}],
        },
    ],
)
def test_load_aggregator_config_schema_errors(tmp_path: Path, payload: object) -> None:
    with pytest.raises(ConfigLoadError):
        load_aggregator_config(_write(tmp_path / "config.json", payload))


def test_search_window_defaults_to_current_year() -> None:
    settings = Settings(CITIZEN_SPACE_FROM_DATE="", CITIZEN_SPACE_TO_DATE="")
    assert settings.search_window(today=date(2018, 5, 17)) == ("2018/01/01", "2018/12/31")


def test_search_window_uses_configured_dates() -> None:
    settings = Settings(CITIZEN_SPACE_FROM_DATE="2018/01/01", CITIZEN_SPACE_TO_DATE="2018/03/31")
    assert settings.search_window() == ("2018/01/01", "2018/03/31")


def test_cache_path_expands_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = Settings(CACHE_PATH="~/.ConsultationCache")
    assert settings.resolved_cache_path() == tmp_path / ".ConsultationCache"
