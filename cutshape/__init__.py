"""cutshape - contorno SVG de panel con esquinas redondeadas y una esquina cortada."""

from cutshape.core.models import (  # noqa: F401
    Corner,
    GeometryParams,
    RawLengths,
    ShapeAttributes,
    ShapeConfig,
    Variant,
)
from cutshape.core.pipeline import ManualDebouncer, OutlineResult, ShapeController  # noqa: F401
from cutshape.core.version import APP_VERSION as __version__  # noqa: F401
from cutshape.geom.lengths import LengthContext, LengthResolver, parse_length  # noqa: F401
from cutshape.geom.params import compute_params  # noqa: F401
from cutshape.svg.path import build_outline, generate_path, is_valid_path_data  # noqa: F401
