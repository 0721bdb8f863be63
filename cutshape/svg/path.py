# File: cutshape/svg/path.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Path data SVG del contorno con esquina cortada (6 variantes).
# Notes:
#   - generate_path() es pura: mismas entradas -> mismo string.
#   - Solo M / L / Q / Z. Contorno único, sentido horario, cerrado con Z.
#   - Las coordenadas llegan enteras (ver build_outline); no se formatea con decimales fijos.
from __future__ import annotations

import math
import re
from typing import List, Sequence, Tuple, Union

from svgelements import Path as SvgPath

from cutshape.core.models import Corner, GeometryParams, ShapeConfig, Variant, coerce_corner, coerce_variant
from cutshape.geom.params import ceil_or_zero
from cutshape.utils.errors import InvalidPathDataError

Number = Union[int, float]
Command = Tuple[Union[str, Number], ...]

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_COMMANDS = frozenset("MmLlHhVvCcSsQqTtAaZz")
_SPLIT_RE = re.compile(r"[\s,]+")


def fmt(n: Number) -> str:
    """Formato de número estilo JS: enteros sin decimales, NaN como 'NaN'."""
    if isinstance(n, int) and not isinstance(n, bool):
        return str(n)
    f = float(n)
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Infinity" if f > 0 else "-Infinity"
    if f.is_integer():
        return str(int(f))
    return repr(f)


def commands_to_path(cmds: Sequence[Command]) -> str:
    d: List[str] = []
    for cmd in cmds:
        op, *args = cmd
        d.append(" ".join([str(op), *(fmt(a) for a in args)]))
    d.append("Z")
    return " ".join(d)


# ---------------------------------------------------------------------------
# Familia default: una esquina cortada, tres redondeadas
# ---------------------------------------------------------------------------

def _cut_bottom_right(w: int, h: int, r: int, cr: int, c: int) -> List[Command]:
    return [
        ("M", r, 0),
        ("L", w - r, 0),
        ("Q", w, 0, w, r),
        ("L", w, h - c - cr),
        ("Q", w, h - c, w - cr, h - c + cr),
        ("L", w - c + cr, h - cr),
        ("Q", w - c, h, w - c - cr, h),
        ("L", r, h),
        ("Q", 0, h, 0, h - r),
        ("L", 0, r),
        ("Q", 0, 0, r, 0),
    ]


def _cut_top_right(w: int, h: int, r: int, cr: int, c: int) -> List[Command]:
    return [
        ("M", r, 0),
        ("L", w - c - cr, 0),
        ("Q", w - c, 0, w - c + cr, cr),
        ("L", w - cr, c - cr),
        ("Q", w, c, w, c + cr),
        ("L", w, h - r),
        ("Q", w, h, w - r, h),
        ("L", r, h),
        ("Q", 0, h, 0, h - r),
        ("L", 0, r),
        ("Q", 0, 0, r, 0),
    ]


def _cut_bottom_left(w: int, h: int, r: int, cr: int, c: int) -> List[Command]:
    return [
        ("M", r, 0),
        ("L", w - r, 0),
        ("Q", w, 0, w, r),
        ("L", w, h - r),
        ("Q", w, h, w - r, h),
        ("L", c + cr, h),
        ("Q", c, h, c - cr, h - cr),
        ("L", cr, h - c + cr),
        ("Q", 0, h - c, 0, h - c - cr),
        ("L", 0, r),
        ("Q", 0, 0, r, 0),
    ]


def _cut_top_left(w: int, h: int, r: int, cr: int, c: int) -> List[Command]:
    return [
        ("M", c + cr, 0),
        ("L", w - r, 0),
        ("Q", w, 0, w, r),
        ("L", w, h - r),
        ("Q", w, h, w - r, h),
        ("L", r, h),
        ("Q", 0, h, 0, h - r),
        ("L", 0, c + cr),
        ("Q", 0, c, cr, c - cr),
        ("L", c - cr, cr),
        ("Q", c, 0, c + cr, 0),
    ]


_DEFAULT_FAMILY = {
    Corner.BOTTOM_RIGHT: _cut_bottom_right,
    Corner.TOP_RIGHT: _cut_top_right,
    Corner.BOTTOM_LEFT: _cut_bottom_left,
    Corner.TOP_LEFT: _cut_top_left,
}


# ---------------------------------------------------------------------------
# Variantes con nombre: esquina fija + bordes rectos metidos medio trazo
# ---------------------------------------------------------------------------

def _button(w: int, h: int, r: int, cr: int, c: int, i: int) -> List[Command]:
    # Corte abajo-derecha.
    return [
        ("M", r, i),
        ("L", w - r, i),
        ("Q", w, 0, w - i, r),
        ("L", w - i, h - c - cr),
        ("Q", w - i, h - c, w - cr, h - c + cr),
        ("L", w - c + cr, h - cr - i),
        ("Q", w - c, h - i, w - c - cr, h - i),
        ("L", r, h - i),
        ("Q", 0, h, i, h - r),
        ("L", i, r),
        ("Q", 0, 0, r, i),
    ]


def _solutions(w: int, h: int, r: int, cr: int, c: int, i: int) -> List[Command]:
    # Corte arriba-derecha.
    return [
        ("M", r, i),
        ("L", w - c - cr, i),
        ("Q", w - c, i, w - c + cr, cr + i),
        ("L", w - cr, c - cr - i),
        ("Q", w - i, c, w - i, c + cr),
        ("L", w - i, h - r),
        ("Q", w, h, w - r, h - i),
        ("L", r, h - i),
        ("Q", 0, h, i, h - r),
        ("L", i, r),
        ("Q", 0, 0, r, i),
    ]


def stroke_inset(stroke_width: Number) -> int:
    """Medio trazo, redondeado hacia arriba (coordenadas enteras)."""
    return ceil_or_zero(float(stroke_width) / 2)


def generate_path(
    variant: Variant | str,
    width: int,
    height: int,
    corner_radius: int,
    cut_corner_radius: int,
    cut_size: int,
    cut_position: Corner | str = Corner.BOTTOM_RIGHT,
    stroke_width: Number = 0,
) -> str:
    """Path data del contorno para una de las seis construcciones.

    `cut_position` solo aplica a la familia default; `stroke_width` solo a
    las variantes con nombre.
    """
    v = coerce_variant(variant)
    if v is Variant.BUTTON:
        cmds = _button(width, height, corner_radius, cut_corner_radius, cut_size, stroke_inset(stroke_width))
    elif v is Variant.SOLUTIONS:
        cmds = _solutions(width, height, corner_radius, cut_corner_radius, cut_size, stroke_inset(stroke_width))
    else:
        build = _DEFAULT_FAMILY[coerce_corner(cut_position)]
        cmds = build(width, height, corner_radius, cut_corner_radius, cut_size)
    return commands_to_path(cmds)


def outline_size(config: ShapeConfig) -> Tuple[int, int]:
    """Ancho/alto de dibujo: caja menos trazo, redondeado hacia arriba."""
    return (
        ceil_or_zero(config.width - config.stroke_width),
        ceil_or_zero(config.height - config.stroke_width),
    )


def view_box(config: ShapeConfig) -> str:
    s = ceil_or_zero(config.stroke_width)
    return f"0 0 {ceil_or_zero(config.width) - s} {ceil_or_zero(config.height) - s}"


def build_outline(config: ShapeConfig, params: GeometryParams) -> str:
    """Aplica redondeo entero + ajuste de trazo y genera el path."""
    w, h = outline_size(config)
    return generate_path(
        config.variant,
        w,
        h,
        params.corner_radius,
        params.cut_corner_radius,
        params.cut_size,
        config.corner,
        ceil_or_zero(config.stroke_width),
    )


def validate_path_data(d: str) -> str:
    """Devuelve `d` si solo tiene comandos y números; si no, InvalidPathDataError."""
    if not d or not d.strip():
        raise InvalidPathDataError("Path data vacío")
    for tok in _SPLIT_RE.split(d.strip()):
        if tok in _COMMANDS or _NUMBER_RE.match(tok):
            continue
        raise InvalidPathDataError(f"Token no numérico en path data: {tok!r}")
    return d


def is_valid_path_data(d: str) -> bool:
    try:
        validate_path_data(d)
    except InvalidPathDataError:
        return False
    return True


def outline_bbox(d: str) -> Tuple[float, float, float, float]:
    """Bounding box (x0, y0, x1, y1) del path, con las curvas incluidas."""
    b = SvgPath(validate_path_data(d)).bbox()
    if b is None:
        raise InvalidPathDataError("Path sin segmentos")
    return (float(b[0]), float(b[1]), float(b[2]), float(b[3]))
