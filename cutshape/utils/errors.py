# File: cutshape/utils/errors.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Errores tipados del proyecto.
# Notes: Ningún error de este paquete debe tumbar al host; se recuperan localmente.
from __future__ import annotations


class CutShapeError(Exception):
    """Error base del proyecto."""


class CutShapeValidationError(CutShapeError):
    """Error de validación (atributo/expresión/path)."""


class LengthSyntaxError(CutShapeValidationError):
    """Expresión de longitud CSS mal formada."""


class InvalidPathDataError(CutShapeValidationError):
    """Path data con tokens no numéricos (p.ej. NaN)."""


class CutShapeStateError(CutShapeError):
    """Uso de un recurso ya liberado (resolver dispuesto, etc.)."""


class CutShapeIOError(CutShapeError):
    """Error de E/S (lectura/escritura)."""
