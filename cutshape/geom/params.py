# File: cutshape/geom/params.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Derivar los parámetros geométricos (radio, radio del corte, tamaño del corte).
# Notes:
#   - Función pura salvo por el resolver (que solo lee su contexto).
#   - No se rechazan longitudes negativas: pasan tal cual al generador.
from __future__ import annotations

import logging
import math

from cutshape.core.models import GeometryParams, RawLengths
from cutshape.core.version import (
    DEFAULT_CUT_CAP_PX,
    DEFAULT_ROUNDED_PX,
    EXPLICIT_CUT_MAX_RATIO,
    FALLBACK_CUT_DIVISOR,
)
from cutshape.geom.lengths import LengthContext, LengthResolver
from cutshape.utils.errors import LengthSyntaxError

log = logging.getLogger(__name__)


def ceil_or_zero(v: float) -> int:
    """ceil() que nunca deja pasar NaN/inf (-> 0)."""
    try:
        f = float(v)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(f):
        return 0
    return int(math.ceil(f))


def default_cut_size(corner_radius: float, width: float, height: float) -> float:
    """Tamaño de corte sin atributo: mitad del lado menor, con tope en 60px."""
    return max(corner_radius * 2, min(min(width, height) / 2, DEFAULT_CUT_CAP_PX))


def resolve_corner_radius(raw: RawLengths, compact: bool, resolver: LengthResolver) -> float:
    return resolver.resolve(raw.pick("rounded", compact), DEFAULT_ROUNDED_PX)


def resolve_cut_corner_radius(
    raw: RawLengths, compact: bool, resolver: LengthResolver, corner_radius: float
) -> float:
    value = raw.pick("corner_rounded", compact)
    if value is None:
        return corner_radius
    return resolver.resolve(value, corner_radius)


def resolve_cut_size(
    raw: RawLengths,
    compact: bool,
    resolver: LengthResolver,
    corner_radius: float,
    width: float,
    height: float,
) -> float:
    value = raw.pick("corner_size", compact)
    if value is None:
        return default_cut_size(corner_radius, width, height)

    try:
        measured = resolver.measure(value)
    except LengthSyntaxError as e:
        log.warning("corner-size no resoluble %r: %s", value, e)
        return max(corner_radius * 2, min(width, height) / FALLBACK_CUT_DIVISOR)

    if not math.isfinite(measured):
        log.warning("corner-size inválido %r; se usa el tamaño por defecto", value)
        return default_cut_size(corner_radius, width, height)

    # Al menos 2x el radio, como máximo el 90% del lado menor.
    return max(corner_radius * 2, min(min(width, height) * EXPLICIT_CUT_MAX_RATIO, measured))


def compute_params(
    raw: RawLengths,
    width: float,
    height: float,
    compact: bool,
    resolver: LengthResolver | None = None,
) -> GeometryParams:
    """Combina longitudes crudas + tamaño de caja en GeometryParams enteros.

    El llamador debe saltear el recomputo si width o height son 0.
    Sin resolver explícito se usa uno temporal con `%` relativo al ancho.
    """
    if resolver is None:
        resolver = LengthResolver(LengthContext(reference_width=float(width)))

    corner_radius = resolve_corner_radius(raw, compact, resolver)
    cut_corner_radius = resolve_cut_corner_radius(raw, compact, resolver, corner_radius)
    cut_size = resolve_cut_size(raw, compact, resolver, corner_radius, width, height)

    r = ceil_or_zero(corner_radius)
    # Tras el redondeo el corte sigue cubriendo 2x el radio entero.
    return GeometryParams(
        corner_radius=r,
        cut_corner_radius=ceil_or_zero(cut_corner_radius),
        cut_size=max(ceil_or_zero(cut_size), 2 * r),
    )
