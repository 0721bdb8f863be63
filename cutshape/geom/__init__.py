"""Geometry helpers.

This package is dependency-light on purpose: length resolution and the
shape parameter calculator only need the standard library.
"""

from __future__ import annotations
