"""Stack builder output into ordered rendering layers.

Layers are painted in list order, so a later layer draws over an earlier
one.  The canvas frame always comes first; each :class:`LayerRequest` then
contributes one layer per primitive kind it produced, shapes before labels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd
from natsort import natsorted

from .frame import CanvasFrame
from .geometry import (
    BUILDERS,
    CATEGORICAL_LAYERS,
    LAYER_DEFAULTS,
    Label,
    LayerConfig,
    Point,
    Primitive,
    Rect,
)
from .tracks import TrackLayout

_KINDS = {Rect: "rect", Point: "point", Label: "label"}


@dataclass(frozen=True)
class LayerRequest:
    builder: str
    config: LayerConfig = field(default_factory=LayerConfig)


@dataclass(frozen=True)
class LayerStyle:
    fill_color: Optional[str] = None
    outline_color: Optional[str] = None
    stroke_width: Optional[float] = None
    point_size: Optional[float] = None
    categorical: bool = False


@dataclass(frozen=True)
class Layer:
    name: str
    kind: str
    primitives: tuple
    style: LayerStyle


@dataclass(frozen=True)
class Scene:
    frame: CanvasFrame
    layers: tuple

    def category_keys(self) -> list:
        """Distinct description keys of color-by-description layers."""
        keys = {
            p.fill_key
            for layer in self.layers
            if layer.kind == "rect" and layer.style.categorical
            for p in layer.primitives
        }
        return natsorted(keys)


def _split_by_kind(name: str, primitives: tuple, style: LayerStyle) -> list[Layer]:
    """Group primitives into homogeneous layers, keeping first-appearance order.

    A builder with nothing to draw still gets one (empty) layer.
    """
    if not primitives:
        kind = "point" if name == "phospho" else "rect"
        return [Layer(name, kind, (), style)]
    groups: dict[str, list[Primitive]] = {}
    for p in primitives:
        groups.setdefault(_KINDS[type(p)], []).append(p)
    return [Layer(name, kind, tuple(items), style) for kind, items in groups.items()]


def compose(
    frame: CanvasFrame, requests: list[LayerRequest], features: pd.DataFrame
) -> Scene:
    """Run each request's builder, in order, and collect the layers.

    All builders run before the scene is returned, so an invalid row aborts
    the whole diagram instead of producing part of it.

    Raises:
        ValueError: a request names an unknown builder.
        FeatureTableError: raised by a builder for an invalid row.
    """
    tracks = TrackLayout.from_features(features)
    layers: list[Layer] = []
    for request in requests:
        try:
            builder = BUILDERS[request.builder]
        except KeyError:
            raise ValueError(
                f"Unknown layer '{request.builder}'; expected one of {', '.join(BUILDERS)}"
            ) from None
        cfg = request.config.resolve(LAYER_DEFAULTS[request.builder])
        style = LayerStyle(
            fill_color=cfg.fill_color,
            outline_color=cfg.outline_color,
            stroke_width=cfg.stroke_width,
            point_size=cfg.point_size,
            categorical=request.builder in CATEGORICAL_LAYERS,
        )
        primitives = builder(features, tracks, request.config)
        layers.extend(_split_by_kind(request.builder, primitives, style))
    return Scene(frame, tuple(layers))
