# File: cutshape/ui/shape_widget.py
# Project: CutShape
# Version: 0.1.0
# Status: wip
# Date: 2026-10-19
# Purpose: QWidget decorativo que pinta el contorno con esquina cortada detrás del contenido.
# Notes:
#   - Sigue el tamaño del padre (como un :host absoluto al 100%).
#   - Toda la lógica vive en ShapeController; acá solo eventos Qt -> estímulos.
#   - No recibe mouse (WA_TransparentForMouseEvents).
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from PySide6.QtCore import QEvent, QObject, QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from cutshape.core.models import ShapeAttributes
from cutshape.core.pipeline import OutlineResult, ShapeController
from cutshape.core.settings import ShapeSettings
from cutshape.svg.exporter import image_offset
from cutshape.svg.qpath_render import path_data_to_qpath
from cutshape.utils.errors import InvalidPathDataError

log = logging.getLogger(__name__)


class QtDebouncer:
    """Debouncer sobre un QTimer single-shot: re-armar cancela lo pendiente."""

    def __init__(self, parent: QObject) -> None:
        self._fn: Optional[Callable[[], None]] = None
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> None:
        self._timer.stop()
        self._fn = fn
        self._timer.start(int(delay_ms))

    def cancel(self) -> None:
        self._timer.stop()
        self._fn = None

    def _fire(self) -> None:
        fn, self._fn = self._fn, None
        if fn is not None:
            fn()


class CutCornerShape(QWidget):
    path_changed = Signal(str)

    def __init__(
        self,
        attributes: ShapeAttributes | Mapping[str, Any] | None = None,
        parent: QWidget | None = None,
        *,
        settings: ShapeSettings | None = None,
        stroke_color: QColor | None = None,
        fill_color: QColor | None = None,
    ) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WA_NoSystemBackground, True)

        self._controller = ShapeController(attributes, settings=settings, debouncer=QtDebouncer(self))
        self._controller.add_listener(self._on_result)

        self._qpath = QPainterPath()
        self._pixmap: Optional[QPixmap] = None
        self._pixmap_source: Optional[str] = None
        self._stroke_color = stroke_color or QColor(200, 200, 200)
        self._fill_color = fill_color or QColor(40, 40, 40)
        self._window: Optional[QWidget] = None

        if parent is not None:
            parent.installEventFilter(self)
            self.setGeometry(parent.rect())
            self.lower()

    # -----------------------------
    # Public API
    # -----------------------------
    @property
    def controller(self) -> ShapeController:
        return self._controller

    @property
    def path_data(self) -> Optional[str]:
        return self._controller.path_data

    def qpath(self) -> QPainterPath:
        return QPainterPath(self._qpath)

    def set_attribute(self, name: str, value: Any) -> None:
        self._controller.set_attribute(name, value)

    def set_attributes(self, values: Mapping[str, Any]) -> None:
        self._controller.set_attributes(values)

    def check_and_update_size(self) -> None:
        """Medición directa sin debounce (primer layout)."""
        self._controller.set_box_size(self.width(), self.height())

    def dispose(self) -> None:
        if self._window is not None:
            self._window.removeEventFilter(self)
            self._window = None
        if self.parent() is not None:
            self.parent().removeEventFilter(self)
        self._controller.dispose()

    # -----------------------------
    # Qt events
    # -----------------------------
    def showEvent(self, event) -> None:
        super().showEvent(event)
        win = self.window()
        if win is not None and win is not self and win is not self._window:
            if self._window is not None:
                self._window.removeEventFilter(self)
            self._window = win
            win.installEventFilter(self)
            self._controller.on_viewport_change(win.width(), win.height())
        self.check_and_update_size()
        # Segundo chequeo tras el primer paint (layout asentado).
        QTimer.singleShot(self._controller.settings.resize_debounce_ms, self._settle_check)

    def _settle_check(self) -> None:
        if not self._controller.disposed:
            self.check_and_update_size()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        win = self.window()
        vh = win.height() if win is not None and win is not self else None
        self._controller.on_box_resize(self.width(), self.height(), viewport_height=vh)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Resize:
            if watched == self.parent():
                self.setGeometry(watched.rect())
            if self._window is not None and watched == self._window:
                self._controller.on_viewport_change(watched.width(), watched.height())
        return super().eventFilter(watched, event)

    def closeEvent(self, event) -> None:
        self.dispose()
        super().closeEvent(event)

    def paintEvent(self, event) -> None:
        if self._qpath.isEmpty():
            return
        result = self._controller.result
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            painter.setRenderHint(QPainter.SmoothPixmapTransform, True)

            if result is not None and result.fill_ref and self._pixmap is not None:
                self._paint_image(painter, result)
            else:
                fill = QColor(self._fill_color)
                if result is not None and result.clip_path_data:
                    # Sin backdrop-filter en Qt: relleno translúcido recortado al contorno.
                    fill.setAlpha(min(fill.alpha(), 160))
                painter.fillPath(self._qpath, QBrush(fill))

            stroke = result.stroke_width if result is not None else 0
            if stroke > 0:
                painter.setPen(QPen(self._stroke_color, float(stroke)))
                painter.setBrush(Qt.NoBrush)
                painter.drawPath(self._qpath)
        finally:
            painter.end()

    # -----------------------------
    # Internals
    # -----------------------------
    def _on_result(self, result: OutlineResult) -> None:
        try:
            self._qpath = path_data_to_qpath(result.path_data, offset=result.stroke_width / 2)
        except InvalidPathDataError as e:
            log.error("No se pudo convertir el contorno: %s", e)
            return
        if result.pattern_id and not result.fill_ref:
            self._load_image()
        self.path_changed.emit(result.path_data)
        self.update()

    def _load_image(self) -> None:
        src = self._controller.attributes.image
        if not src or src == self._pixmap_source:
            return
        self._pixmap_source = src
        pm = QPixmap(str(Path(src)))
        if pm.isNull():
            log.warning("No se pudo cargar la imagen de fondo: %s", src)
            self._pixmap = None
            return
        self._pixmap = pm
        self._controller.mark_image_loaded()

    def _paint_image(self, painter: QPainter, result: OutlineResult) -> None:
        painter.save()
        painter.setClipPath(self._qpath)
        target = QRectF(self.rect())
        pm = self._pixmap
        # slice: cubrir el rect manteniendo aspecto, anclado según image-position.
        scaled = pm.scaled(target.size().toSize(), Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
        x, y = image_offset(
            self._controller.attributes.image_position,
            target.width(),
            target.height(),
            scaled.width(),
            scaled.height(),
        )
        painter.drawPixmap(int(x), int(y), scaled)

        overlay = self._controller.attributes.overlay
        if overlay:
            try:
                opacity = float(overlay)
            except ValueError:
                opacity = 0.0
            painter.setOpacity(max(0.0, min(1.0, opacity)))
            painter.fillRect(target, QColor(0, 0, 0))
        painter.restore()
