# File: cutshape/svg/qpath_render.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Path data -> QPainterPath (para pintar el contorno en un QWidget).
# Notes:
#   - Evita QSvgRenderer: el contorno se pinta directo con QPainter.
#   - svgelements parsea el atributo d; no se re-implementa el parser.
from __future__ import annotations

from PySide6.QtGui import QPainterPath
from svgelements import Close, CubicBezier, Line, Move, Path as SvgPath, QuadraticBezier

from cutshape.svg.path import validate_path_data


def path_data_to_qpath(d: str, *, offset: float = 0.0) -> QPainterPath:
    """Convierte path data a QPainterPath.

    `offset` desplaza todo el contorno (medio trazo, para que no se corte en el borde).
    Path inválido -> InvalidPathDataError (el llamador decide).
    """
    sp = SvgPath(validate_path_data(d))
    q = QPainterPath()
    current_set = False

    def map_pt(pt) -> tuple[float, float]:
        return float(pt.x) + offset, float(pt.y) + offset

    for seg in sp:
        if isinstance(seg, Move):
            q.moveTo(*map_pt(seg.end))
            current_set = True
            continue

        # si no hubo move previo, anclamos en el start
        if not current_set and seg.start is not None:
            q.moveTo(*map_pt(seg.start))
            current_set = True

        if isinstance(seg, Close):
            q.closeSubpath()
        elif isinstance(seg, Line):
            q.lineTo(*map_pt(seg.end))
        elif isinstance(seg, QuadraticBezier):
            cx, cy = map_pt(seg.control)
            ex, ey = map_pt(seg.end)
            q.quadTo(cx, cy, ex, ey)
        elif isinstance(seg, CubicBezier):
            c1x, c1y = map_pt(seg.control1)
            c2x, c2y = map_pt(seg.control2)
            ex, ey = map_pt(seg.end)
            q.cubicTo(c1x, c1y, c2x, c2y, ex, ey)
        else:
            # Arcos u otros: sampleo simple.
            steps = 12
            for i in range(1, steps + 1):
                q.lineTo(*map_pt(seg.point(i / steps)))

    return q
