# File: cutshape/core/settings.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Configuración del pipeline: cutshape_settings.json (repo-local) + env vars.
# Notes: No depende de Qt. El JSON se vuelca a env vars; los consumidores leen env.
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from cutshape.core.version import (
    DEFAULT_COMPACT_BREAKPOINT_PX,
    DEFAULT_FONT_SIZE_PX,
    DEFAULT_JITTER_THRESHOLD_PX,
    DEFAULT_RESIZE_DEBOUNCE_MS,
    DEFAULT_SETTLE_RECHECK_MS,
)

log = logging.getLogger(__name__)

# Archivo esperado en la raíz del proyecto (o en un padre del CWD).
PROJECT_SETTINGS_FILENAME = "cutshape_settings.json"

# clave JSON (con puntos) -> (env var, tipo, min, max)
_ENV_KEYS: Dict[str, tuple[str, type, float, float]] = {
    "pipeline.compact_breakpoint_px": ("CUTSHAPE_COMPACT_BREAKPOINT_PX", int, 0, 10000),
    "pipeline.resize_debounce_ms": ("CUTSHAPE_RESIZE_DEBOUNCE_MS", int, 0, 5000),
    "pipeline.settle_recheck_ms": ("CUTSHAPE_SETTLE_RECHECK_MS", int, 0, 5000),
    "pipeline.jitter_threshold_px": ("CUTSHAPE_JITTER_THRESHOLD_PX", int, 0, 2000),
    "lengths.font_size_px": ("CUTSHAPE_FONT_SIZE_PX", float, 1, 512),
    "lengths.root_font_size_px": ("CUTSHAPE_ROOT_FONT_SIZE_PX", float, 1, 512),
}


def _env_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    try:
        raw = os.environ.get(name, "")
        v = int(str(raw).strip()) if raw != "" else int(default)
    except ValueError:
        v = int(default)

    if min_value is not None:
        v = max(int(min_value), int(v))
    if max_value is not None:
        v = min(int(max_value), int(v))
    return int(v)


def _env_float(
    name: str, default: float, *, min_value: float | None = None, max_value: float | None = None
) -> float:
    try:
        raw = os.environ.get(name, "")
        v = float(str(raw).strip()) if raw != "" else float(default)
    except ValueError:
        v = float(default)
    if v != v:  # NaN
        v = float(default)

    if min_value is not None:
        v = max(float(min_value), v)
    if max_value is not None:
        v = min(float(max_value), v)
    return float(v)


@dataclass(frozen=True)
class ShapeSettings:
    compact_breakpoint_px: int = DEFAULT_COMPACT_BREAKPOINT_PX
    resize_debounce_ms: int = DEFAULT_RESIZE_DEBOUNCE_MS
    settle_recheck_ms: int = DEFAULT_SETTLE_RECHECK_MS
    jitter_threshold_px: int = DEFAULT_JITTER_THRESHOLD_PX
    font_size_px: float = DEFAULT_FONT_SIZE_PX
    root_font_size_px: float = DEFAULT_FONT_SIZE_PX

    def is_compact(self, viewport_width: float) -> bool:
        """Equivale a la media query (max-width: breakpoint)."""
        return float(viewport_width) <= float(self.compact_breakpoint_px)


def load_shape_settings() -> ShapeSettings:
    """Lee la configuración desde env vars (con límites)."""
    return ShapeSettings(
        compact_breakpoint_px=_env_int(
            "CUTSHAPE_COMPACT_BREAKPOINT_PX", DEFAULT_COMPACT_BREAKPOINT_PX, min_value=0, max_value=10000
        ),
        resize_debounce_ms=_env_int(
            "CUTSHAPE_RESIZE_DEBOUNCE_MS", DEFAULT_RESIZE_DEBOUNCE_MS, min_value=0, max_value=5000
        ),
        settle_recheck_ms=_env_int(
            "CUTSHAPE_SETTLE_RECHECK_MS", DEFAULT_SETTLE_RECHECK_MS, min_value=0, max_value=5000
        ),
        jitter_threshold_px=_env_int(
            "CUTSHAPE_JITTER_THRESHOLD_PX", DEFAULT_JITTER_THRESHOLD_PX, min_value=0, max_value=2000
        ),
        font_size_px=_env_float("CUTSHAPE_FONT_SIZE_PX", DEFAULT_FONT_SIZE_PX, min_value=1, max_value=512),
        root_font_size_px=_env_float(
            "CUTSHAPE_ROOT_FONT_SIZE_PX", DEFAULT_FONT_SIZE_PX, min_value=1, max_value=512
        ),
    )


def find_project_settings_path(start: Path | None = None) -> Path | None:
    """Busca cutshape_settings.json subiendo desde start (o CWD)."""
    start = (start or Path.cwd()).resolve()
    for p in (start, *start.parents):
        candidate = p / PROJECT_SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_project_settings(start: Path | None = None, *, logger: logging.Logger | None = None) -> Dict[str, Any]:
    """Carga el JSON de project settings. Devuelve {} si no existe o es inválido."""
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_get(d: Dict[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def apply_project_settings(
    start: Path | None = None,
    *,
    logger: logging.Logger | None = None,
    prefer_env: bool = True,
) -> Dict[str, Any]:
    """Carga cutshape_settings.json (si existe) y aplica overrides vía env vars.

    - Si `prefer_env=True`, una env var ya seteada NO se pisa.
    - Si `prefer_env=False`, el JSON pisa la env var.

    Devuelve un dict con los valores aplicados desde JSON.
    """
    _log = logger or log
    data = load_project_settings(start, logger=_log)
    if not data:
        return {}

    applied: Dict[str, Any] = {}
    for key, (env, typ, lo, hi) in _ENV_KEYS.items():
        value = _deep_get(data, key)
        if value is None or isinstance(value, bool):
            continue
        if typ is int and not isinstance(value, int):
            _log.warning("%s debe ser entero: %r", key, value)
            continue
        if not isinstance(value, (int, float)) or not (lo <= value <= hi):
            _log.warning("%s fuera de rango [%s, %s]: %r", key, lo, hi, value)
            continue
        if prefer_env and os.environ.get(env):
            continue
        os.environ[env] = str(value)
        applied[key] = value

    if applied:
        _log.info("Project settings aplicados: %s", applied)
    return applied
