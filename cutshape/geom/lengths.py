# File: cutshape/geom/lengths.py
# Project: CutShape
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Resolver longitudes CSS (px/%/vw/vh/rem/em + calc/min/max/clamp/var) a píxeles.
# Notes:
#   - No hay motor de estilos: todo se evalúa contra un LengthContext explícito.
#   - `%` se resuelve contra reference_width (ancho actual de la caja).
#   - Un número sin unidad se toma como px (atributos numéricos planos).
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, NamedTuple, Optional

from cutshape.core.version import DEFAULT_FONT_SIZE_PX
from cutshape.utils.errors import CutShapeStateError, LengthSyntaxError

log = logging.getLogger(__name__)

_MAX_VAR_DEPTH = 16

_TOKEN_RE = re.compile(
    r"""
    (?P<num>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)(?P<unit>%|[a-zA-Z]+)?
    | (?P<func>[a-zA-Z][a-zA-Z-]*)\(
    | (?P<ident>--[A-Za-z0-9_-]+)
    | (?P<op>[-+*/(),])
    """,
    re.VERBOSE,
)

# Unidades absolutas (CSS: 1in = 96px).
_ABSOLUTE_UNITS = {
    "px": 1.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
    "q": 96.0 / 101.6,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
}

_FUNCTIONS = ("calc", "min", "max", "clamp", "var")


@dataclass(frozen=True)
class LengthContext:
    """Contexto de resolución. Sustituye al estilo computado del navegador."""

    reference_width: float = 0.0
    viewport_width: float = 0.0
    viewport_height: float = 0.0
    font_size: float = DEFAULT_FONT_SIZE_PX
    root_font_size: float = DEFAULT_FONT_SIZE_PX
    custom_properties: Mapping[str, str] = field(default_factory=dict)

    def unit_px(self, unit: str) -> float:
        u = unit.lower()
        if u in _ABSOLUTE_UNITS:
            return _ABSOLUTE_UNITS[u]
        if u == "%":
            return self.reference_width / 100.0
        if u == "em":
            return self.font_size
        if u == "rem":
            return self.root_font_size
        # Variantes small/large/dynamic del viewport se tratan igual.
        if u in ("vw", "svw", "lvw", "dvw"):
            return self.viewport_width / 100.0
        if u in ("vh", "svh", "lvh", "dvh"):
            return self.viewport_height / 100.0
        if u == "vmin":
            return min(self.viewport_width, self.viewport_height) / 100.0
        if u == "vmax":
            return max(self.viewport_width, self.viewport_height) / 100.0
        raise LengthSyntaxError(f"Unidad desconocida: {unit!r}")


class _Token(NamedTuple):
    kind: str  # num | func | ident | op
    text: str
    unit: str = ""


class _Quantity(NamedTuple):
    value: float
    is_length: bool


def _tokenize(text: str) -> list[_Token]:
    out: list[_Token] = []
    pos = 0
    n = len(text)
    while pos < n:
        if text[pos].isspace():
            pos += 1
            continue
        m = _TOKEN_RE.match(text, pos)
        if not m:
            raise LengthSyntaxError(f"Expresión inválida cerca de {text[pos:pos + 12]!r}")
        if m.group("num") is not None:
            out.append(_Token("num", m.group("num"), m.group("unit") or ""))
        elif m.group("func") is not None:
            out.append(_Token("func", m.group("func").lower()))
        elif m.group("ident") is not None:
            out.append(_Token("ident", m.group("ident")))
        else:
            out.append(_Token("op", m.group("op")))
        pos = m.end()
    return out


class _Parser:
    """Descenso recursivo que evalúa mientras parsea."""

    def __init__(self, text: str, ctx: LengthContext, depth: int = 0) -> None:
        self.text = text
        self.ctx = ctx
        self.depth = depth
        self.tokens = _tokenize(text)
        self.i = 0

    # -----------------------------
    # Token helpers
    # -----------------------------
    def _peek(self) -> Optional[_Token]:
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            raise LengthSyntaxError(f"Fin inesperado en {self.text!r}")
        self.i += 1
        return tok

    def _expect(self, op: str) -> None:
        tok = self._next()
        if tok.kind != "op" or tok.text != op:
            raise LengthSyntaxError(f"Se esperaba {op!r} en {self.text!r}")

    def _at_op(self, *ops: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "op" and tok.text in ops

    # -----------------------------
    # Grammar
    # -----------------------------
    def parse_value(self) -> _Quantity:
        # Fuera de calc() solo se admite un valor (como en la propiedad width).
        q = self._factor()
        if self._peek() is not None:
            raise LengthSyntaxError(f"Sobran tokens en {self.text!r}")
        return q

    def parse_expression(self) -> _Quantity:
        q = self._expr()
        if self._peek() is not None:
            raise LengthSyntaxError(f"Sobran tokens en {self.text!r}")
        return q

    def _expr(self) -> _Quantity:
        left = self._term()
        while self._at_op("+", "-"):
            op = self._next().text
            right = self._term()
            if left.is_length != right.is_length:
                raise LengthSyntaxError(f"Suma de tipos incompatibles en {self.text!r}")
            v = left.value + right.value if op == "+" else left.value - right.value
            left = _Quantity(v, left.is_length)
        return left

    def _term(self) -> _Quantity:
        left = self._factor()
        while self._at_op("*", "/"):
            op = self._next().text
            right = self._factor()
            if op == "*":
                if left.is_length and right.is_length:
                    raise LengthSyntaxError(f"Producto de longitudes en {self.text!r}")
                left = _Quantity(left.value * right.value, left.is_length or right.is_length)
            else:
                if right.is_length:
                    raise LengthSyntaxError(f"División por longitud en {self.text!r}")
                if right.value == 0:
                    # CSS: división por cero -> infinito (luego se descarta como no finito).
                    left = _Quantity(math.copysign(math.inf, left.value or 1.0), left.is_length)
                else:
                    left = _Quantity(left.value / right.value, left.is_length)
        return left

    def _factor(self) -> _Quantity:
        tok = self._next()
        if tok.kind == "op":
            if tok.text in ("+", "-"):
                q = self._factor()
                return q if tok.text == "+" else _Quantity(-q.value, q.is_length)
            if tok.text == "(":
                q = self._expr()
                self._expect(")")
                return q
            raise LengthSyntaxError(f"Token inesperado {tok.text!r} en {self.text!r}")
        if tok.kind == "num":
            v = float(tok.text)
            if not tok.unit:
                return _Quantity(v, False)
            return _Quantity(v * self.ctx.unit_px(tok.unit), True)
        if tok.kind == "func":
            return self._function(tok.text)
        raise LengthSyntaxError(f"Token inesperado {tok.text!r} en {self.text!r}")

    def _args(self) -> list[_Quantity]:
        args = [self._expr()]
        while self._at_op(","):
            self._next()
            args.append(self._expr())
        self._expect(")")
        return args

    def _function(self, name: str) -> _Quantity:
        if name not in _FUNCTIONS:
            raise LengthSyntaxError(f"Función no soportada: {name}()")
        if name == "var":
            return self._var()
        if name == "calc":
            q = self._expr()
            self._expect(")")
            return q

        args = self._args()
        kinds = {a.is_length for a in args}
        if len(kinds) != 1:
            raise LengthSyntaxError(f"{name}() mezcla longitudes y números en {self.text!r}")
        is_length = kinds.pop()
        values = [a.value for a in args]
        if name == "min":
            return _Quantity(min(values), is_length)
        if name == "max":
            return _Quantity(max(values), is_length)
        if len(values) != 3:
            raise LengthSyntaxError(f"clamp() requiere 3 argumentos en {self.text!r}")
        lo, val, hi = values
        # clamp(MIN, VAL, MAX) = max(MIN, min(VAL, MAX)): MIN gana si MIN > MAX.
        return _Quantity(max(lo, min(val, hi)), is_length)

    def _var(self) -> _Quantity:
        tok = self._next()
        if tok.kind != "ident":
            raise LengthSyntaxError(f"var() requiere un --nombre en {self.text!r}")
        fallback: Optional[_Quantity] = None
        if self._at_op(","):
            self._next()
            fallback = self._expr()
        self._expect(")")

        raw = self.ctx.custom_properties.get(tok.text)
        if raw is None or not str(raw).strip():
            if fallback is not None:
                return fallback
            # Sin valor ni fallback: inválido en tiempo de cómputo.
            return _Quantity(math.nan, True)
        if self.depth >= _MAX_VAR_DEPTH:
            raise LengthSyntaxError(f"Referencia cíclica en {tok.text}")
        return _Parser(str(raw), self.ctx, self.depth + 1).parse_expression()


def parse_length(text: str, ctx: LengthContext | None = None) -> float:
    """Evalúa una expresión de longitud y devuelve px (puede ser no finito).

    Lanza LengthSyntaxError si la expresión está mal formada.
    """
    ctx = ctx or LengthContext()
    s = str(text).strip()
    if not s:
        return math.nan
    return float(_Parser(s, ctx).parse_value().value)


class LengthResolver:
    """Sonda de medición: una por forma, creada bajo demanda y liberada con dispose().

    - `measure()` es estricto: valor (posiblemente no finito) o LengthSyntaxError.
    - `resolve()` nunca falla hacia el render: devuelve el fallback del llamador.
    """

    def __init__(self, context: LengthContext | None = None) -> None:
        self._context = context or LengthContext()
        self._disposed = False

    @property
    def context(self) -> LengthContext:
        return self._context

    @property
    def disposed(self) -> bool:
        return self._disposed

    def update_context(self, **changes: Any) -> LengthContext:
        self._ensure_alive()
        self._context = replace(self._context, **changes)
        return self._context

    def measure(self, raw: Any) -> float:
        self._ensure_alive()
        if isinstance(raw, bool):
            raise LengthSyntaxError(f"Longitud inválida: {raw!r}")
        if isinstance(raw, (int, float)):
            try:
                return float(raw)
            except OverflowError:
                # Entero fuera de rango de float: se trata como no finito.
                return math.inf if raw > 0 else -math.inf
        return parse_length(str(raw), self._context)

    def resolve(self, raw: Any, fallback: float) -> float:
        if raw is None:
            return fallback
        try:
            v = self.measure(raw)
        except LengthSyntaxError as e:
            log.warning("No se pudo resolver %r: %s", raw, e)
            return fallback
        if not math.isfinite(v):
            log.debug("Longitud no finita %r -> fallback %s", raw, fallback)
            return fallback
        return v

    def dispose(self) -> None:
        self._disposed = True

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise CutShapeStateError("LengthResolver ya fue liberado")
