"""Cliente Trello: contexto del tablero y creacion de tarjetas via API REST."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from consultationradar.boards.base import BoardSink
from consultationradar.domain.models import BoardContext, CardRequest
from consultationradar.errors import BoardError, BoardLookupError
from consultationradar.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.trello.com/1"


def _extract_trello_error_detail(resp: httpx.Response | None) -> str | None:
    if resp is None:
        return None
    try:
        data = resp.json()
    except Exception:
        text = (resp.text or "").strip()
        return text[:200] or None
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _format_due(request: CardRequest) -> str | None:
    if request.due is None:
        return None
    return request.due.isoformat()


class TrelloBoard(BoardSink):
    """Tablero Trello autenticado con key + token (query params)."""

    def __init__(
        self,
        key: str,
        token: str,
        client: httpx.Client | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout_sec: float = 30.0,
    ) -> None:
        self._key = key
        self._token = token
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._timeout_sec = timeout_sec

    def load_context(self, board_id: str, list_name: str) -> BoardContext:
        try:
            with self._client_context() as client:
                board = self._get_dict(client, f"boards/{board_id}")
                labels = self._get_list(client, f"boards/{board_id}/labels")
                lists = self._get_list(client, f"boards/{board_id}/lists")
        except BoardError as exc:
            raise BoardLookupError(f"board error: {exc}") from exc

        resolved_board_id = str(board.get("id") or board_id)

        list_id = ""
        for entry in lists:
            if entry.get("name") == list_name:
                list_id = str(entry.get("id") or "")
                break
        if not list_id:
            raise BoardLookupError(f"Could not find list {list_name!r} in board {board_id}")

        label_map: dict[str, str] = {}
        for entry in labels:
            name = entry.get("name")
            label_id = entry.get("id")
            if isinstance(name, str) and label_id and name not in label_map:
                label_map[name] = str(label_id)

        logger.debug(
            "[TrelloBoard] board=%s list=%s labels=%s",
            resolved_board_id,
            list_id,
            sorted(label_map),
        )
        return BoardContext(board_id=resolved_board_id, list_id=list_id, labels=label_map)

    def create_card(self, request: CardRequest) -> str:
        # Se crea via /cards y no a traves de la lista: asi se conservan las etiquetas.
        params: dict[str, str] = {
            "idList": request.list_id,
            "name": request.name,
            "desc": request.desc,
        }
        if request.label_ids:
            params["idLabels"] = ",".join(request.label_ids)
        due = _format_due(request)
        if due:
            params["due"] = due

        with self._client_context() as client:
            data = self._request(client, "POST", "cards", params)
        if not isinstance(data, dict) or not data.get("id"):
            raise BoardError("Invalid Trello response (expected card object)")
        return str(data["id"])

    @contextmanager
    def _client_context(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(
            headers={"Accept": "application/json"},
            timeout=self._timeout_sec,
            follow_redirects=True,
        ) as client:
            yield client

    def _url(self, path: str) -> str:
        return f"{self._api_url}/{path.lstrip('/')}"

    def _request(
        self,
        client: httpx.Client,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        query = {"key": self._key, "token": self._token}
        if params:
            query.update(params)
        try:
            resp = client.request(method, self._url(path), params=query)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _extract_trello_error_detail(exc.response)
            status_code = exc.response.status_code
            if detail:
                raise BoardError(f"Trello request failed ({status_code}): {detail}") from exc
            raise BoardError(f"Trello request failed ({status_code}).") from exc
        except httpx.HTTPError as exc:
            raise BoardError(f"Trello request failed: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise BoardError("Unexpected Trello response (non-JSON)") from exc

    def _get_dict(self, client: httpx.Client, path: str) -> dict[str, Any]:
        data = self._request(client, "GET", path)
        if not isinstance(data, dict):
            raise BoardError(f"Invalid Trello response for {path} (expected JSON object)")
        return data

    def _get_list(self, client: httpx.Client, path: str) -> list[dict[str, Any]]:
        data = self._request(client, "GET", path)
        if not isinstance(data, list):
            raise BoardError(f"Invalid Trello response for {path} (expected JSON array)")
        return [entry for entry in data if isinstance(entry, dict)]
