"""Widgets PySide6."""
