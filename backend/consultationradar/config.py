"""Configuracion central del agregador.

Dos capas:
- ``Settings``: variables de entorno / ``.env`` (rutas, ventana de busqueda,
  timeouts, logging) leidas con pydantic-settings.
- ``AggregatorConfig``: fichero JSON con credenciales de Trello y fuentes.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from consultationradar.domain.models import AggregatorConfig
from consultationradar.errors import ConfigLoadError

# Repo / env paths
REPO_ROOT = Path(__file__).resolve().parents[2]
CONSULTATION_ENV_PATH = REPO_ROOT / "backend" / "consultationradar" / ".env"
CONSULTATION_ENV_EXAMPLE = REPO_ROOT / "backend" / "consultationradar" / ".env.example"

SEARCH_DATE_FORMAT = "%Y/%m/%d"


def _ensure_env_file() -> None:
    """Crear `backend/consultationradar/.env` desde su `.env.example` si falta."""
    if CONSULTATION_ENV_PATH.exists():
        return
    if not CONSULTATION_ENV_EXAMPLE.exists():
        return
    try:
        CONSULTATION_ENV_PATH.write_text(
            CONSULTATION_ENV_EXAMPLE.read_text(encoding="utf-8"), encoding="utf-8"
        )
    except OSError:
        # Instalaciones de solo lectura: se usan defaults y entorno.
        return


# Ensure env exists before pydantic reads it
_ensure_env_file()


class Settings(BaseSettings):
    """Parametros de ejecucion del agregador.

    Se cargan desde entorno/.env con pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=str(CONSULTATION_ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    ########################################
    # Paths
    ########################################
    config_path: str = Field(default="config.json", validation_alias="CONFIG_PATH")
    cache_path: str = Field(default="~/.ConsultationCache", validation_alias="CACHE_PATH")

    ########################################
    # Citizen Space search window (YYYY/MM/DD)
    ########################################
    citizen_space_from_date: str = Field(default="", validation_alias="CITIZEN_SPACE_FROM_DATE")
    citizen_space_to_date: str = Field(default="", validation_alias="CITIZEN_SPACE_TO_DATE")

    ########################################
    # HTTP / Trello
    ########################################
    http_timeout_sec: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT_SEC")
    trello_api_url: str = Field(default="https://api.trello.com/1", validation_alias="TRELLO_API_URL")

    ########################################
    # Logging
    ########################################
    log_enabled: bool = Field(default=True, validation_alias="LOG_ENABLED")
    log_to_file: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    log_file_name: str = Field(default="consultationradar.log", validation_alias="LOG_FILE_NAME")
    log_debug: bool = Field(default=False, validation_alias="LOG_DEBUG")

    def resolved_cache_path(self) -> Path:
        """Ruta del cache de ids con ``~`` expandido."""
        return Path(self.cache_path).expanduser()

    def resolved_config_path(self) -> Path:
        return Path(self.config_path).expanduser()

    def search_window(self, today: date | None = None) -> tuple[str, str]:
        """Ventana de fechas (desde, hasta) para la busqueda de Citizen Space.

        Si no se configura, cubre el año natural en curso.
        """
        current = today or date.today()
        from_date = self.citizen_space_from_date.strip() or date(current.year, 1, 1).strftime(
            SEARCH_DATE_FORMAT
        )
        to_date = self.citizen_space_to_date.strip() or date(current.year, 12, 31).strftime(
            SEARCH_DATE_FORMAT
        )
        return from_date, to_date


def load_aggregator_config(path: str | Path) -> AggregatorConfig:
    """Carga y valida el fichero JSON de configuracion.

    Cualquier fallo (fichero ausente, JSON invalido, esquema incorrecto) es
    fatal y se reporta como ``ConfigLoadError``.
    """
    cfg_path = Path(path).expanduser()
    try:
        raw = cfg_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"could not get config {cfg_path}: {exc}") from exc

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"could not decode config {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config at {cfg_path} must be a JSON object")

    try:
        return AggregatorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(f"invalid config {cfg_path}: {exc}") from exc
