# File: cutshape/cli.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: CLI: genera el path / documento SVG del contorno para un tamaño dado.
# Notes: Sin Qt. Usa el mismo ShapeController que el widget (debounce manual).
from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional, Tuple

from cutshape.core.pipeline import ShapeController
from cutshape.core.settings import apply_project_settings, load_shape_settings
from cutshape.core.version import APP_VERSION
from cutshape.svg.exporter import export_svg, render_svg
from cutshape.svg.path import outline_bbox
from cutshape.utils.errors import CutShapeError
from cutshape.utils.log import get_logger, setup_logging

log = get_logger(__name__)

_ATTR_OPTIONS = (
    "id",
    "rounded",
    "rounded-compact",
    "corner-rounded",
    "corner-rounded-compact",
    "corner-size",
    "corner-size-compact",
    "corner",
    "variant",
    "stroke-width",
    "filter",
    "image",
    "image-position",
    "overlay",
)


def _parse_viewport(s: str) -> Tuple[float, float]:
    try:
        w, h = s.lower().split("x", 1)
        return float(w), float(h)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"viewport inválido (esperado WxH): {s!r}") from e


def _parse_var(s: str) -> Tuple[str, str]:
    name, sep, value = s.partition("=")
    if not sep or not name.startswith("--"):
        raise argparse.ArgumentTypeError(f"custom property inválida (esperado --nombre=valor): {s!r}")
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="cutshape-svg",
        description="Genera el contorno SVG de un panel con esquina cortada.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    ap.add_argument("--width", type=float, required=True, help="Ancho de la caja (px)")
    ap.add_argument("--height", type=float, required=True, help="Alto de la caja (px)")
    for name in _ATTR_OPTIONS:
        ap.add_argument(f"--{name}", dest=name.replace("-", "_"), default=None)
    ap.add_argument("--viewport", type=_parse_viewport, default=None, help="Viewport WxH (vw/vh + breakpoint)")
    ap.add_argument("--compact", action="store_true", help="Forzar modo compacto")
    ap.add_argument(
        "--var",
        dest="custom_properties",
        type=_parse_var,
        action="append",
        default=[],
        help="Custom property para var(): --var=--gap=12px (repetible)",
    )
    ap.add_argument("--path-only", action="store_true", help="Imprimir solo el path data")
    ap.add_argument("--bbox", action="store_true", help="Reportar el bbox del contorno en stderr")
    ap.add_argument("-o", "--out", default=None, help="Archivo .svg de salida")
    ap.add_argument("--log-level", default="WARNING")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    level = logging.getLevelName(str(ns.log_level).upper())
    setup_logging(log_dir=None, level=level if isinstance(level, int) else logging.WARNING)
    apply_project_settings(logger=log, prefer_env=True)

    attrs: Dict[str, str] = {}
    for name in _ATTR_OPTIONS:
        v = getattr(ns, name.replace("-", "_"))
        if v is not None:
            attrs[name] = v

    ctl = ShapeController(
        attrs,
        settings=load_shape_settings(),
        viewport=ns.viewport,
        compact=True if ns.compact else None,
        custom_properties=dict(ns.custom_properties),
    )
    try:
        result = ctl.set_box_size(ns.width, ns.height)
        if result is None:
            print("error: caja degenerada o path inválido; no se generó contorno", file=sys.stderr)
            return 2
        if ctl.attributes.image:
            result = ctl.mark_image_loaded() or result

        if ns.bbox:
            x0, y0, x1, y1 = outline_bbox(result.path_data)
            print(f"bbox: {x0:g} {y0:g} {x1:g} {y1:g}", file=sys.stderr)

        if ns.path_only:
            print(result.path_data)
        elif ns.out:
            p = export_svg(result, ctl.attributes, ns.out)
            log.info("SVG exportado: %s", p)
        else:
            print(render_svg(result, ctl.attributes))
    except CutShapeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        ctl.dispose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
