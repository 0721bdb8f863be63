# File: cutshape/utils/log.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Logging centralizado (consola + archivo) y helpers.
# Notes: El nivel se puede forzar con CUTSHAPE_LOG_LEVEL (DEBUG/INFO/WARNING...).
from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_CONFIGURED = False

LOG_FILENAME = "cutshape.log"


def _level_from_env(default: int) -> int:
    raw = os.environ.get("CUTSHAPE_LOG_LEVEL", "").strip().upper()
    if not raw:
        return default
    v = logging.getLevelName(raw)
    return v if isinstance(v, int) else default


def setup_logging(
    log_dir: str | os.PathLike | None = "logs",
    level: int = logging.INFO,
) -> None:
    """Configura logging en consola + archivo.

    Nota:
        - `log_dir=None` deja solo consola (CLI / tests).
        - No lanza excepción si no puede escribir el archivo; cae a consola.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    level = _level_from_env(level)
    logger = logging.getLogger("cutshape")
    logger.setLevel(level)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir is not None:
        try:
            d = Path(log_dir)
            d.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(d / LOG_FILENAME, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(fmt)
            logger.addHandler(fh)
        except OSError as e:
            logging.getLogger(__name__).warning("No se pudo inicializar FileHandler: %s", e)

    _LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
