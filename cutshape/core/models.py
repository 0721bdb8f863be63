# File: cutshape/core/models.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Modelos de datos: atributos declarativos, config por recomputo y parámetros geométricos.
# Notes: Todo inmutable (frozen). Un cambio de atributo produce un objeto nuevo.
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional, Union

from cutshape.core.version import DEFAULT_STROKE_WIDTH

log = logging.getLogger(__name__)

LengthValue = Union[int, float, str]

# Prefijo de ids derivados (pattern/clip) cuando el elemento no tiene id.
DEFAULT_ELEMENT_ID = "cutshape"


class Corner(str, Enum):
    """Esquina que recibe el corte (solo aplica a la familia default)."""

    TOP_RIGHT = "top-right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"
    TOP_LEFT = "top-left"

    @property
    def short(self) -> str:
        return _CORNER_SHORT[self]


_CORNER_SHORT = {
    Corner.TOP_RIGHT: "tr",
    Corner.BOTTOM_RIGHT: "br",
    Corner.BOTTOM_LEFT: "bl",
    Corner.TOP_LEFT: "tl",
}
_CORNER_ALIASES = {v: k for k, v in _CORNER_SHORT.items()}


def coerce_corner(v: object, default: Corner = Corner.BOTTOM_RIGHT) -> Corner:
    """Acepta `tr`/`top-right` (y variantes con mayúsculas/espacios)."""
    if isinstance(v, Corner):
        return v
    s = str(v or "").strip().lower().replace("_", "-")
    if not s:
        return default
    if s in _CORNER_ALIASES:
        return _CORNER_ALIASES[s]
    for c in Corner:
        if c.value == s:
            return c
    log.warning("Esquina desconocida %r; se usa %s", v, default.value)
    return default


class Variant(str, Enum):
    """Construcción de contorno.

    - default: familia rotable (la esquina la decide `Corner`).
    - button: contorno fijo con corte abajo-derecha e inset de trazo.
    - solutions: contorno fijo con corte arriba-derecha e inset de trazo.

    Se fija explícitamente al construir; nunca se deduce del id del elemento.
    """

    DEFAULT = "default"
    BUTTON = "button"
    SOLUTIONS = "solutions"


_VARIANT_ALIASES = {
    "named-a": Variant.BUTTON,
    "named-b": Variant.SOLUTIONS,
}


def coerce_variant(v: object, default: Variant = Variant.DEFAULT) -> Variant:
    if isinstance(v, Variant):
        return v
    s = str(v or "").strip().lower()
    if not s:
        return default
    if s in _VARIANT_ALIASES:
        return _VARIANT_ALIASES[s]
    for m in Variant:
        if m.value == s:
            return m
    log.warning("Variante desconocida %r; se usa %s", v, default.value)
    return default


@dataclass(frozen=True)
class RawLengths:
    """Longitudes tal como llegan de los atributos (número, expresión CSS o None)."""

    rounded: Optional[LengthValue] = None
    rounded_compact: Optional[LengthValue] = None
    corner_rounded: Optional[LengthValue] = None
    corner_rounded_compact: Optional[LengthValue] = None
    corner_size: Optional[LengthValue] = None
    corner_size_compact: Optional[LengthValue] = None

    def pick(self, base: str, compact: bool) -> Optional[LengthValue]:
        """Elige la variante compacta si corresponde y existe; si no, la base."""
        if compact:
            v = getattr(self, f"{base}_compact")
            if v is not None:
                return v
        return getattr(self, base)


@dataclass(frozen=True)
class GeometryParams:
    corner_radius: int
    cut_corner_radius: int
    cut_size: int


@dataclass(frozen=True)
class ShapeConfig:
    """Snapshot para un recomputo. Se reconstruye en cada cambio."""

    width: float
    height: float
    stroke_width: float = DEFAULT_STROKE_WIDTH
    variant: Variant = Variant.DEFAULT
    corner: Corner = Corner.BOTTOM_RIGHT
    compact: bool = False

    @property
    def is_degenerate(self) -> bool:
        return not (self.width > 0 and self.height > 0)


# Nombre de atributo -> campo de RawLengths. Se aceptan los sufijos -mobile por compat.
_LENGTH_ATTRS = {
    "rounded": "rounded",
    "rounded-compact": "rounded_compact",
    "rounded-mobile": "rounded_compact",
    "corner-rounded": "corner_rounded",
    "corner-rounded-compact": "corner_rounded_compact",
    "corner-rounded-mobile": "corner_rounded_compact",
    "corner-size": "corner_size",
    "corner-size-compact": "corner_size_compact",
    "corner-size-mobile": "corner_size_compact",
}

OBSERVED_ATTRIBUTES = (
    "id",
    "width",
    "height",
    *_LENGTH_ATTRS.keys(),
    "corner",
    "variant",
    "stroke-width",
    "filter",
    "image",
    "image-position",
    "overlay",
)


def _as_number(v: Any, default: float) -> float:
    """Number(attr) || default: vacío, None o inválido -> default."""
    if v is None or isinstance(v, bool):
        return default
    try:
        f = float(str(v).strip()) if isinstance(v, str) else float(v)
    except (ValueError, OverflowError):
        return default
    if math.isnan(f) or f == 0:
        return default
    return f


def _as_stroke(v: Any) -> float:
    if v is None or (isinstance(v, str) and not v.strip()):
        return DEFAULT_STROKE_WIDTH
    try:
        f = float(v)
    except (TypeError, ValueError, OverflowError):
        f = float("nan")
    if not math.isfinite(f):
        log.warning("stroke-width inválido %r; se usa 0", v)
        return 0.0
    return f


def _as_length(v: Any) -> Optional[LengthValue]:
    if v is None or isinstance(v, (int, float, str)) and not isinstance(v, bool):
        return v
    return str(v)


def _as_opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    return str(v)


@dataclass(frozen=True)
class ShapeAttributes:
    """Conjunto declarativo de atributos del componente."""

    id: Optional[str] = None
    width: float = 0.0
    height: float = 0.0
    lengths: RawLengths = field(default_factory=RawLengths)
    corner: Corner = Corner.BOTTOM_RIGHT
    variant: Variant = Variant.DEFAULT
    stroke_width: float = DEFAULT_STROKE_WIDTH
    filter: Optional[str] = None
    image: Optional[str] = None
    image_position: Optional[str] = None
    overlay: Optional[str] = None

    @property
    def pattern_id(self) -> str:
        return f"{self.id or DEFAULT_ELEMENT_ID}-pattern"

    @property
    def clip_id(self) -> str:
        return f"{self.id or DEFAULT_ELEMENT_ID}-clip"

    @property
    def wants_blur(self) -> bool:
        return bool(self.filter)

    def with_attribute(self, name: str, value: Any) -> "ShapeAttributes":
        """Devuelve una copia con el atributo aplicado (`None` = atributo removido)."""
        key = str(name).strip().lower()
        if key in _LENGTH_ATTRS:
            lengths = replace(self.lengths, **{_LENGTH_ATTRS[key]: _as_length(value)})
            return replace(self, lengths=lengths)
        if key == "id":
            return replace(self, id=_as_opt_str(value))
        if key == "width":
            return replace(self, width=_as_number(value, 0.0))
        if key == "height":
            return replace(self, height=_as_number(value, 0.0))
        if key == "corner":
            return replace(self, corner=coerce_corner(value))
        if key == "variant":
            return replace(self, variant=coerce_variant(value))
        if key == "stroke-width":
            return replace(self, stroke_width=_as_stroke(value))
        if key == "filter":
            return replace(self, filter=_as_opt_str(value))
        if key == "image":
            return replace(self, image=_as_opt_str(value))
        if key == "image-position":
            return replace(self, image_position=_as_opt_str(value))
        if key == "overlay":
            return replace(self, overlay=_as_opt_str(value))
        log.debug("Atributo ignorado: %s", name)
        return self

    @staticmethod
    def from_mapping(d: Mapping[str, Any]) -> "ShapeAttributes":
        out = ShapeAttributes()
        for k, v in d.items():
            out = out.with_attribute(k, v)
        return out

    def to_config(self, width: float, height: float, compact: bool) -> ShapeConfig:
        return ShapeConfig(
            width=float(width),
            height=float(height),
            stroke_width=float(self.stroke_width),
            variant=self.variant,
            corner=self.corner,
            compact=bool(compact),
        )
