"""Generación de path data, export SVG y conversión a QPainterPath."""
