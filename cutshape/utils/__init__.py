"""Utilidades transversales (logging, errores)."""
