"""CLI para sincronizar consultas con el tablero desde terminal."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from consultationradar.boards import BoardSink, TrelloBoard
from consultationradar.config import Settings, load_aggregator_config
from consultationradar.domain.models import AggregatorConfig
from consultationradar.errors import FatalError
from consultationradar.logging_utils import configure_logging, get_logger
from consultationradar.repositories import CacheRepo
from consultationradar.services import IngestService, SyncService


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="consultationradar",
        description="Crea tarjetas de Trello para consultas publicas nuevas.",
    )
    parser.add_argument("--config", default=None, help="Ruta del config JSON (CONFIG_PATH)")
    parser.add_argument("--cache", default=None, help="Ruta del cache de ids (CACHE_PATH)")
    return parser.parse_args(argv)


def build_board(cfg: AggregatorConfig, settings: Settings) -> BoardSink:
    return TrelloBoard(
        cfg.trello_key,
        cfg.trello_token,
        api_url=settings.trello_api_url,
        timeout_sec=settings.http_timeout_sec,
    )


def run(settings: Settings, config_path: str, cache_path: str, board: BoardSink | None = None) -> int:
    """Ejecuta una sincronizacion completa; lanza ``FatalError`` ante fallos de arranque."""
    logger = get_logger(__name__)

    cfg = load_aggregator_config(config_path)
    repo = CacheRepo(cache_path)
    cache = repo.load()
    logger.info("Cache loaded from %s (%s ids)", repo.path, len(cache))

    sink = board or build_board(cfg, settings)
    context = sink.load_context(cfg.trello_board_id, cfg.trello_list_name)

    service = SyncService(sink, IngestService(settings))
    report = service.run(cfg.sources, context, cache)

    # Se guarda siempre, aunque no se haya creado ninguna tarjeta.
    repo.save(report.cache)
    logger.info("Cache written to %s", repo.path)

    print(f"Created: {len(report.created)}")
    print(f"Skipped: {len(report.skipped)}")
    print(f"Failed: {len(report.failed)}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Punto de entrada CLI.

    Uso: consultationradar [--config PATH] [--cache PATH]
    """
    args = _parse_args(argv)
    settings = Settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    config_path = args.config or str(settings.resolved_config_path())
    cache_path = args.cache or str(settings.resolved_cache_path())

    try:
        code = run(settings, config_path, cache_path)
    except FatalError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
