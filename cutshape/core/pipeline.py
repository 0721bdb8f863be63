# File: cutshape/core/pipeline.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Pipeline reactivo: tamaño/atributos/modo compacto -> recompute_and_apply().
# Notes:
#   - Sin Qt. El timer de debounce se inyecta (QtDebouncer en ui, ManualDebouncer acá).
#   - Armar un timer nuevo cancela el pendiente; solo el último ve el tamaño final.
#   - Caja 0x0 o path inválido: no se toca el contorno anterior.
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Protocol, Tuple

from cutshape.core.models import GeometryParams, ShapeAttributes, ShapeConfig
from cutshape.core.settings import ShapeSettings, load_shape_settings
from cutshape.geom.lengths import LengthResolver
from cutshape.geom.params import ceil_or_zero, compute_params
from cutshape.svg.path import build_outline, validate_path_data, view_box
from cutshape.utils.errors import InvalidPathDataError

log = logging.getLogger(__name__)


class Debouncer(Protocol):
    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class ManualDebouncer:
    """Timer explícito sin event loop: `flush()` dispara la llamada pendiente.

    Útil en CLI/tests. Guarda contadores para poder inspeccionar el debounce.
    """

    def __init__(self) -> None:
        self._pending: Optional[Callable[[], None]] = None
        self.last_delay_ms: Optional[int] = None
        self.armed = 0
        self.cancelled = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, delay_ms: int, fn: Callable[[], None]) -> None:
        self.cancel()
        self._pending = fn
        self.last_delay_ms = int(delay_ms)
        self.armed += 1

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending = None
            self.cancelled += 1

    def flush(self) -> bool:
        fn = self._pending
        self._pending = None
        if fn is None:
            return False
        fn()
        return True


@dataclass(frozen=True)
class OutlineResult:
    """Lo que se escribe en la superficie de render."""

    path_data: str
    view_box: str
    stroke_width: int
    config: ShapeConfig
    params: GeometryParams
    clip_path_data: Optional[str] = None
    pattern_id: Optional[str] = None
    fill_ref: Optional[str] = None


Listener = Callable[[OutlineResult], None]


class ShapeController:
    """Dueño del estado de una forma y de su resolver de longitudes."""

    def __init__(
        self,
        attributes: ShapeAttributes | Mapping[str, Any] | None = None,
        *,
        settings: ShapeSettings | None = None,
        debouncer: Debouncer | None = None,
        viewport: Tuple[float, float] | None = None,
        compact: bool | None = None,
        custom_properties: Mapping[str, str] | None = None,
    ) -> None:
        if attributes is None:
            attributes = ShapeAttributes()
        elif not isinstance(attributes, ShapeAttributes):
            attributes = ShapeAttributes.from_mapping(attributes)
        self._settings = settings or load_shape_settings()
        self._attrs = attributes
        self._debouncer: Debouncer = debouncer or ManualDebouncer()

        self._width = float(attributes.width)
        self._height = float(attributes.height)
        vw, vh = viewport if viewport is not None else (0.0, 0.0)
        self._viewport = (float(vw), float(vh))
        self._last_viewport_height = float(vh)
        if compact is None:
            compact = viewport is not None and self._settings.is_compact(vw)
        self._compact = bool(compact)
        self._custom_properties = dict(custom_properties or {})

        self._resolver: Optional[LengthResolver] = None
        self._result: Optional[OutlineResult] = None
        self._image_loaded = False
        self._listeners: List[Listener] = []
        self._disposed = False

    # -----------------------------
    # Estado
    # -----------------------------
    @property
    def attributes(self) -> ShapeAttributes:
        return self._attrs

    @property
    def settings(self) -> ShapeSettings:
        return self._settings

    @property
    def compact(self) -> bool:
        return self._compact

    @property
    def size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    @property
    def result(self) -> Optional[OutlineResult]:
        return self._result

    @property
    def path_data(self) -> Optional[str]:
        return self._result.path_data if self._result else None

    @property
    def has_resolver(self) -> bool:
        return self._resolver is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_listener(self, fn: Listener) -> None:
        self._listeners.append(fn)

    def remove_listener(self, fn: Listener) -> None:
        if fn in self._listeners:
            self._listeners.remove(fn)

    # -----------------------------
    # Estímulos
    # -----------------------------
    def on_box_resize(self, width: float, height: float, viewport_height: float | None = None) -> bool:
        """Notificación de tamaño de caja. Devuelve True si se agendó un recomputo."""
        if self._disposed:
            return False

        if viewport_height is not None:
            diff = abs(float(viewport_height) - self._last_viewport_height)
            self._last_viewport_height = float(viewport_height)
            # En compacto, saltos chicos del alto del viewport son la barra del navegador/teclado.
            if self._compact and 0 < diff < self._settings.jitter_threshold_px:
                log.debug("Resize descartado (jitter %.1fpx)", diff)
                return False

        w, h = float(width), float(height)
        if not (w > 0 and h > 0):
            return False
        if (w, h) == (self._width, self._height):
            return False

        self._width, self._height = w, h
        self._debouncer.schedule(self._settings.resize_debounce_ms, self._on_debounced)
        return True

    def set_box_size(self, width: float, height: float) -> Optional[OutlineResult]:
        """Medición directa (primer layout / chequeos de asentado): recomputo inmediato."""
        w, h = float(width), float(height)
        if not (w > 0 and h > 0):
            return None
        self._width, self._height = w, h
        return self.recompute_and_apply()

    def on_viewport_change(self, width: float, height: float) -> bool:
        """Cambio de viewport: breakpoint -> modo compacto; si no, recomputo diferido."""
        if self._disposed:
            return False
        self._viewport = (float(width), float(height))
        compact = self._settings.is_compact(width)
        if compact != self._compact:
            self.set_compact(compact)
            return True
        if compact:
            return False
        # Unidades vw/vh pueden haber cambiado aunque la caja no.
        self._debouncer.schedule(self._settings.resize_debounce_ms, self._on_debounced)
        return True

    def set_compact(self, compact: bool) -> Optional[OutlineResult]:
        compact = bool(compact)
        if compact == self._compact:
            return None
        self._compact = compact
        return self.recompute_and_apply()

    def set_attribute(self, name: str, value: Any) -> Optional[OutlineResult]:
        return self.set_attributes({name: value})

    def set_attributes(self, values: Mapping[str, Any]) -> Optional[OutlineResult]:
        if self._disposed:
            return None
        attrs = self._attrs
        for name, value in values.items():
            attrs = attrs.with_attribute(name, value)
        if attrs == self._attrs:
            return None

        if attrs.width != self._attrs.width:
            self._width = attrs.width
        if attrs.height != self._attrs.height:
            self._height = attrs.height
        if attrs.image != self._attrs.image:
            self._image_loaded = False
        self._attrs = attrs
        return self.recompute_and_apply()

    def set_custom_properties(self, props: Mapping[str, str]) -> Optional[OutlineResult]:
        self._custom_properties = dict(props)
        return self.recompute_and_apply()

    def mark_image_loaded(self) -> Optional[OutlineResult]:
        """La imagen de fondo terminó de cargar: el path pasa a usar el pattern."""
        self._image_loaded = True
        if self._result is None or not self._attrs.image:
            return None
        return self._apply(replace(self._result, fill_ref=f"url(#{self._attrs.pattern_id})"))

    # -----------------------------
    # Recomputo
    # -----------------------------
    def recompute_and_apply(self) -> Optional[OutlineResult]:
        """Único punto de recomputo. None si se salteó (caja vacía / path inválido)."""
        if self._disposed:
            return None
        if not (self._width > 0 and self._height > 0):
            log.debug("Caja degenerada %sx%s: sin recomputo", self._width, self._height)
            return None

        config = self._attrs.to_config(self._width, self._height, self._compact)
        params = compute_params(
            self._attrs.lengths, config.width, config.height, config.compact, self._box_resolver()
        )
        d = build_outline(config, params)
        try:
            validate_path_data(d)
        except InvalidPathDataError as e:
            log.error("Path inválido generado: %s (%s)", d, e)
            return None

        attrs = self._attrs
        result = OutlineResult(
            path_data=d,
            view_box=view_box(config),
            stroke_width=ceil_or_zero(config.stroke_width),
            config=config,
            params=params,
            clip_path_data=d if attrs.wants_blur else None,
            pattern_id=attrs.pattern_id if attrs.image else None,
            fill_ref=f"url(#{attrs.pattern_id})" if attrs.image and self._image_loaded else None,
        )
        return self._apply(result)

    def _apply(self, result: OutlineResult) -> OutlineResult:
        if result == self._result:
            return result
        self._result = result
        for fn in list(self._listeners):
            fn(result)
        return result

    def _on_debounced(self, settle: bool = False) -> None:
        self.recompute_and_apply()
        if not settle and self._settings.settle_recheck_ms > 0 and not self._disposed:
            # Segunda pasada corta por si el layout todavía se estaba asentando.
            self._debouncer.schedule(self._settings.settle_recheck_ms, lambda: self._on_debounced(settle=True))

    def _box_resolver(self) -> LengthResolver:
        if self._resolver is None:
            self._resolver = LengthResolver()
        self._resolver.update_context(
            reference_width=self._width,
            viewport_width=self._viewport[0],
            viewport_height=self._viewport[1],
            font_size=self._settings.font_size_px,
            root_font_size=self._settings.root_font_size_px,
            custom_properties=dict(self._custom_properties),
        )
        return self._resolver

    def dispose(self) -> None:
        """Teardown: cancela el timer y libera el resolver."""
        self._debouncer.cancel()
        if self._resolver is not None:
            self._resolver.dispose()
            self._resolver = None
        self._listeners.clear()
        self._disposed = True

