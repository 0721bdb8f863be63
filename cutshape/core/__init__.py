"""Modelo, configuración y pipeline reactivo (sin Qt)."""
