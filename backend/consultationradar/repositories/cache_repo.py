"""Repositorio del cache de deduplicacion en JSON (lectura/escritura)."""

from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from consultationradar.domain.models import DedupCache
from consultationradar.errors import CacheLoadError, CacheSaveError


class CacheRepo:
    """Acceso al cache de ids almacenado como array JSON de strings."""

    def __init__(self, cache_path: str | Path) -> None:
        self._path = Path(cache_path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> DedupCache:
        """Carga el cache completo.

        Un fichero ausente NO es una primera ejecucion: es un error fatal,
        igual que un contenido que no sea una lista de strings.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CacheLoadError(f"cache file error: {exc}") from exc

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CacheLoadError(f"cache decode error: {exc}") from exc

        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise CacheLoadError(f"cache decode error: {self._path} must hold a JSON array of strings")
        return DedupCache.from_ids(data)

    def _target_mode(self) -> int:
        """Permisos del cache actual; si no existe, los por defecto segun umask."""
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, cache: DedupCache) -> None:
        """Sobrescribe el cache de forma atomica (fichero temporal + rename)."""
        directory = self._path.parent
        payload = json.dumps(cache.ids, ensure_ascii=False)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.write("\n")
                os.chmod(tmp_name, self._target_mode())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CacheSaveError(f"cache encoding error: {exc}") from exc
