# File: cutshape/svg/exporter.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Documento SVG standalone con el contorno (+ blur recortado / pattern de imagen).
# Notes: El path ya viene validado por el pipeline; acá solo se arma markup.
from __future__ import annotations

from pathlib import Path
from xml.etree.ElementTree import Element, SubElement, tostring

from cutshape.core.models import ShapeAttributes
from cutshape.core.pipeline import OutlineResult
from cutshape.svg.path import fmt
from cutshape.utils.errors import CutShapeIOError

SVG_NS = "http://www.w3.org/2000/svg"
XHTML_NS = "http://www.w3.org/1999/xhtml"

BLUR_STYLE = "backdrop-filter:blur(12px);-webkit-backdrop-filter:blur(12px);clip-path:url(#{clip});height:100%;width:100%"

# image-position -> alineación del <image> como fracción (x, y) del sobrante.
# tl solo fija el borde superior: en x queda centrado (xMidYMin).
_IMAGE_ANCHOR = {
    "tl": (0.5, 0.0),
    "tr": (1.0, 0.0),
    "bl": (0.0, 1.0),
    "br": (1.0, 1.0),
}
_CENTER = (0.5, 0.5)
_ALIGN_X = {0.0: "xMin", 0.5: "xMid", 1.0: "xMax"}
_ALIGN_Y = {0.0: "YMin", 0.5: "YMid", 1.0: "YMax"}


def image_anchor(position: str | None) -> tuple[float, float]:
    """Fracción (x, y) del espacio sobrante que queda a la izquierda/arriba."""
    return _IMAGE_ANCHOR.get(str(position or "").strip().lower(), _CENTER)


def image_aspect(position: str | None) -> str:
    fx, fy = image_anchor(position)
    return f"{_ALIGN_X[fx]}{_ALIGN_Y[fy]} slice"


def image_offset(
    position: str | None, box_w: float, box_h: float, image_w: float, image_h: float
) -> tuple[float, float]:
    """Origen de una imagen que ya cubre la caja (modo slice)."""
    fx, fy = image_anchor(position)
    return (box_w - image_w) * fx, (box_h - image_h) * fy


def build_svg_document(result: OutlineResult, attrs: ShapeAttributes) -> Element:
    """Arma el árbol <svg> para un OutlineResult ya aplicado."""
    cfg = result.config
    svg = Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "version": "1.1",
            "width": fmt(cfg.width),
            "height": fmt(cfg.height),
            "viewBox": result.view_box,
            "preserveAspectRatio": "none",
        },
    )

    path_attrs = {"d": result.path_data, "stroke-width": str(result.stroke_width)}
    if result.fill_ref:
        path_attrs["fill"] = result.fill_ref
    SubElement(svg, "path", path_attrs)

    if result.clip_path_data:
        fo = SubElement(svg, "foreignObject", {"x": "0", "y": "0", "width": "100%", "height": "100%"})
        SubElement(fo, "div", {"xmlns": XHTML_NS, "style": BLUR_STYLE.format(clip=attrs.clip_id)})
        defs = SubElement(svg, "defs")
        clip = SubElement(defs, "clipPath", {"id": attrs.clip_id})
        SubElement(clip, "path", {"d": result.clip_path_data})

    if attrs.image:
        pattern = SubElement(
            svg,
            "pattern",
            {
                "id": attrs.pattern_id,
                "patternUnits": "userSpaceOnUse",
                "width": "100%",
                "height": "100%",
            },
        )
        SubElement(
            pattern,
            "image",
            {
                "href": attrs.image,
                "x": "0",
                "y": "0",
                "width": "100%",
                "height": "100%",
                "preserveAspectRatio": image_aspect(attrs.image_position),
            },
        )
        if attrs.overlay:
            SubElement(
                pattern,
                "rect",
                {"x": "0", "y": "0", "width": "100%", "height": "100%", "fill": "black", "opacity": attrs.overlay},
            )

    return svg


def render_svg(result: OutlineResult, attrs: ShapeAttributes) -> str:
    return tostring(build_svg_document(result, attrs), encoding="unicode")


def export_svg(result: OutlineResult, attrs: ShapeAttributes, out_path: str | Path) -> Path:
    """Escribe el SVG a disco. Fuerza extensión .svg."""
    p = Path(out_path)
    if p.suffix.lower() != ".svg":
        p = p.with_suffix(".svg")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(render_svg(result, attrs), encoding="utf-8")
        return p
    except OSError as e:
        raise CutShapeIOError(f"No se pudo exportar SVG: {p}") from e
