# File: cutshape/app.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Entry-point de la demo Qt: panel con contenido sobre un CutCornerShape.
# Notes: Redimensionar la ventana recorre todo el pipeline (viewport + breakpoint + debounce).
from __future__ import annotations

import argparse
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QVBoxLayout, QWidget

from cutshape.core.settings import apply_project_settings, load_shape_settings
from cutshape.core.version import APP_NAME, APP_VERSION
from cutshape.ui.shape_widget import CutCornerShape
from cutshape.utils.log import get_logger, setup_logging

log = get_logger(__name__)


class DemoWindow(QMainWindow):
    def __init__(self, attributes: dict[str, str]) -> None:
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} {APP_VERSION}")
        self.resize(720, 420)

        central = QWidget(self)
        root = QVBoxLayout(central)
        root.setContentsMargins(40, 40, 40, 40)

        panel = QWidget(central)
        inner = QVBoxLayout(panel)
        inner.setContentsMargins(32, 32, 32, 32)
        self.label = QLabel("Panel con esquina cortada", panel)
        self.label.setAlignment(Qt.AlignCenter)
        inner.addWidget(self.label)

        self.shape = CutCornerShape(attributes, panel, settings=load_shape_settings())
        self.shape.path_changed.connect(self._on_path)

        root.addWidget(panel, 1)
        self.setCentralWidget(central)

    def _on_path(self, d: str) -> None:
        log.debug("Contorno: %s", d)
        p = self.shape.controller.result.params
        mode = "compacto" if self.shape.controller.compact else "normal"
        self.label.setText(
            f"r={p.corner_radius} corte={p.cut_size} r_corte={p.cut_corner_radius} ({mode})"
        )

    def closeEvent(self, event) -> None:
        self.shape.dispose()
        super().closeEvent(event)


def _parse_args(argv: list[str] | None) -> dict[str, str]:
    ap = argparse.ArgumentParser(prog="cutshape", description="Demo del panel con esquina cortada")
    ap.add_argument("--rounded", default="20")
    ap.add_argument("--rounded-compact")
    ap.add_argument("--corner-size", default="clamp(40px, 10vw, 90px)")
    ap.add_argument("--corner-rounded")
    ap.add_argument("--corner", default="br")
    ap.add_argument("--variant", default="default")
    ap.add_argument("--stroke-width", default="2")
    ap.add_argument("--image")
    ap.add_argument("--overlay")
    ns, _qt_args = ap.parse_known_args(argv)
    attrs = {k.replace("_", "-"): v for k, v in vars(ns).items() if v is not None}
    return attrs


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    apply_project_settings(logger=log, prefer_env=True)
    attrs = _parse_args(argv if argv is not None else sys.argv[1:])
    app = QApplication(sys.argv[:1])
    w = DemoWindow(attrs)
    w.show()
    log.info("%s iniciado (v%s)", APP_NAME, APP_VERSION)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
