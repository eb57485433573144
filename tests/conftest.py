"""Fixtures compartidas para tests del agregador."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"

# Ensure the backend package is importable without installing.
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

from consultationradar.boards.base import BoardSink  # noqa: E402
from consultationradar.domain.models import (  # noqa: E402
    BoardContext,
    CardRequest,
    ConsultationRecord,
)
from consultationradar.errors import BoardError  # noqa: E402


class FakeBoard(BoardSink):
    """Tablero en memoria: registra las peticiones de tarjeta."""

    def __init__(
        self,
        context: BoardContext | None = None,
        fail_titles: set[str] | None = None,
    ) -> None:
        self.context = context or BoardContext(
            board_id="board-1", list_id="list-1", labels={"Scotland": "label-scot"}
        )
        self.fail_titles = fail_titles or set()
        self.requests: list[CardRequest] = []

    def load_context(self, board_id: str, list_name: str) -> BoardContext:
        return self.context

    def create_card(self, request: CardRequest) -> str:
        if request.name in self.fail_titles:
            raise BoardError(f"boom: {request.name}")
        self.requests.append(request)
        return f"card-{len(self.requests)}"


def make_record(
    record_id: str,
    *,
    title: str | None = None,
    label: str = "Scotland",
    end_date: datetime | None = None,
) -> ConsultationRecord:
    return ConsultationRecord(
        id=record_id,
        title=title or f"Consultation {record_id}",
        url=f"https://consult.example/{record_id}",
        label=label,
        end_date=end_date,
    )


@pytest.fixture()
def fake_board() -> FakeBoard:
    return FakeBoard()


@pytest.fixture()
def board_context() -> BoardContext:
    return BoardContext(board_id="board-1", list_id="list-1", labels={"Scotland": "label-scot"})


@pytest.fixture()
def june_30() -> datetime:
    return datetime(2018, 6, 30, tzinfo=timezone.utc)


@pytest.fixture()
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Construye un ``httpx.Client`` con ``MockTransport`` a partir de un handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return factory
