"""Altair rendering of a composed protein diagram.

Every scene layer becomes one Altair layer and the layers are stacked in
scene order, so later layers paint over earlier ones.  All layers share a
quantitative x-scale (amino acid position) and y-scale (track index) whose
domains are fixed to the canvas frame; only the frame layer draws the axis.

Rectangles from color-by-description layers (domains, regions, motifs,
receptor segments) share a single color scale.  Its domain is the
natural-sorted set of descriptions in the scene and its range is
``PALETTE`` in order, so the same descriptions always get the same colors.

Public functions
----------------
render    – Scene -> layered Altair chart.
make_plot – feature table -> chart, running validation, framing and
            composition with a default or caller-supplied layer list.
"""

from __future__ import annotations

from dataclasses import asdict

import altair as alt
import pandas as pd

from ..compositor import Layer, LayerRequest, Scene, compose
from ..features import validate_features
from ..frame import compute_frame
from .base import category_colors

# ggplot2 sizes are in mm; 72.27 pt per inch / 25.4 mm per inch.
_PT = 72.27 / 25.4

_X_TITLE = "Amino acid number"

# Vega-Lite cannot measure text, so label boxes assume an average glyph
# width of this fraction of the font size.
_CHAR_W = 0.6

DEFAULT_LAYERS = ["chains", "domains", "regions", "motifs", "repeats", "phospho"]

_COLUMNS = {
    "rect": ["xmin", "xmax", "ymin", "ymax", "fill_key", "outline_key"],
    "point": ["x", "y", "fill_key"],
    "label": ["x", "y", "text", "size", "align", "boxed"],
}


def _layer_df(layer: Layer) -> pd.DataFrame:
    return pd.DataFrame([asdict(p) for p in layer.primitives], columns=_COLUMNS[layer.kind])


# ── Layer builders ────────────────────────────────────────────────────────────

def _frame_layer(scene: Scene, x_scale: alt.Scale, y_scale: alt.Scale) -> alt.Chart:
    """Invisible corner points that carry the x-axis and pin the scales."""
    f = scene.frame
    corners = pd.DataFrame({"x": [f.x_min, f.x_max], "y": [f.y_min, f.y_max]})
    return (
        alt.Chart(corners)
        .mark_point(opacity=0)
        .encode(
            x=alt.X("x:Q", scale=x_scale, title=_X_TITLE),
            y=alt.Y("y:Q", scale=y_scale, axis=None),
        )
    )


def _rect_layer(
    layer: Layer, x_scale: alt.Scale, y_scale: alt.Scale, color_scale: alt.Scale
) -> alt.Chart:
    style = layer.style
    mark = {}
    if style.outline_color is not None:
        mark["stroke"] = style.outline_color
        mark["strokeWidth"] = (style.stroke_width or 0.5) * _PT / 2
    encoding = {
        "x": alt.X("xmin:Q", scale=x_scale, axis=None),
        "x2": "xmax:Q",
        "y": alt.Y("ymin:Q", scale=y_scale, axis=None),
        "y2": "ymax:Q",
    }
    if style.categorical:
        encoding["color"] = alt.Color(
            "fill_key:N", scale=color_scale, legend=alt.Legend(title=None, orient="right")
        )
    else:
        mark["fill"] = style.fill_color
    return alt.Chart(_layer_df(layer)).mark_rect(opacity=1, **mark).encode(**encoding)


def _point_layer(layer: Layer, x_scale: alt.Scale, y_scale: alt.Scale) -> alt.Chart:
    style = layer.style
    diameter = (style.point_size or 2) * _PT
    return (
        alt.Chart(_layer_df(layer))
        .mark_point(
            shape="circle",
            filled=True,
            fill=style.fill_color,
            stroke=style.outline_color or "black",
            strokeWidth=(style.stroke_width or 0.5) * _PT / 2,
            size=diameter ** 2,
            opacity=1,
        )
        .encode(
            x=alt.X("x:Q", scale=x_scale, axis=None),
            y=alt.Y("y:Q", scale=y_scale, axis=None),
        )
    )


def _box_layer(
    df: pd.DataFrame,
    x_scale: alt.Scale,
    y_scale: alt.Scale,
    px_per_x: float,
    px_per_y: float,
) -> alt.Chart:
    """White outlined boxes centred on *df*'s labels, sized from the text."""
    pad = df["font_size"] * 0.25
    half_w = (df["text"].astype(str).str.len() * df["font_size"] * _CHAR_W / 2 + pad) / px_per_x
    half_h = (df["font_size"] / 2 + pad) / px_per_y
    boxes = pd.DataFrame({
        "xmin": df["x"] - half_w,
        "xmax": df["x"] + half_w,
        "ymin": df["y"] - half_h,
        "ymax": df["y"] + half_h,
    })
    return (
        alt.Chart(boxes)
        .mark_rect(fill="white", stroke="black", strokeWidth=0.25 * _PT, cornerRadius=2, opacity=1)
        .encode(
            x=alt.X("xmin:Q", scale=x_scale, axis=None),
            x2="xmax:Q",
            y=alt.Y("ymin:Q", scale=y_scale, axis=None),
            y2="ymax:Q",
        )
    )


def _label_layers(
    layer: Layer,
    x_scale: alt.Scale,
    y_scale: alt.Scale,
    px_per_x: float,
    px_per_y: float,
) -> list[alt.Chart]:
    """One text layer per alignment, since ``align`` is a mark property.

    Boxed labels get a box layer underneath their text.
    """
    df = _layer_df(layer)
    df["font_size"] = df["size"].astype(float) * _PT
    boxed = df.loc[df["boxed"].astype(bool)]
    charts = []
    if not boxed.empty:
        charts.append(_box_layer(boxed, x_scale, y_scale, px_per_x, px_per_y))
    for align, group in df.groupby("align", sort=False):
        charts.append(
            alt.Chart(group)
            .mark_text(align=align, baseline="middle")
            .encode(
                x=alt.X("x:Q", scale=x_scale, axis=None),
                y=alt.Y("y:Q", scale=y_scale, axis=None),
                text="text:N",
                size=alt.Size("font_size:Q", scale=None, legend=None),
            )
        )
    return charts


# ── Public functions ──────────────────────────────────────────────────────────

def render(
    scene: Scene,
    width: int = 800,
    track_height: int = 50,
    title: str = "",
) -> alt.LayerChart:
    """Draw *scene* as a layered Altair chart.

    Args:
        scene: output of :func:`protviz.compositor.compose`.
        width: width of the plotting area in pixels.
        track_height: pixels per protein track.
        title: optional chart title.
    """
    alt.data_transformers.disable_max_rows()

    f = scene.frame
    x_scale = alt.Scale(domain=[f.x_min, f.x_max], nice=False, zero=False)
    y_scale = alt.Scale(domain=[f.y_min, f.y_max], nice=False, zero=False)
    colors = category_colors(scene.category_keys())
    color_scale = alt.Scale(domain=list(colors), range=list(colors.values()))
    height = max(int(round(f.tracks * track_height)), track_height)
    px_per_x = width / (f.x_max - f.x_min)
    px_per_y = height / f.tracks

    charts: list[alt.Chart] = [_frame_layer(scene, x_scale, y_scale)]
    for layer in scene.layers:
        if not layer.primitives:
            continue
        if layer.kind == "rect":
            charts.append(_rect_layer(layer, x_scale, y_scale, color_scale))
        elif layer.kind == "point":
            charts.append(_point_layer(layer, x_scale, y_scale))
        else:
            charts.extend(_label_layers(layer, x_scale, y_scale, px_per_x, px_per_y))

    chart = alt.layer(*charts).properties(width=width, height=height)
    if title:
        chart = chart.properties(title=alt.TitleParams(text=title, fontSize=18))
    return chart.configure_axis(grid=False).configure_view(stroke=None)


def make_plot(
    df: pd.DataFrame,
    layers: list | None = None,
    width: int = 800,
    track_height: int = 50,
    title: str = "",
) -> alt.LayerChart:
    """Validate a feature table and draw it with the requested layers.

    Args:
        df: feature table (see :mod:`protviz.features`).
        layers: builder names or :class:`LayerRequest` objects, painted in
            order; defaults to ``DEFAULT_LAYERS``.
        width / track_height / title: passed to :func:`render`.
    """
    features = validate_features(df)
    frame = compute_frame(features)
    requests = [
        layer if isinstance(layer, LayerRequest) else LayerRequest(layer)
        for layer in (layers if layers is not None else DEFAULT_LAYERS)
    ]
    scene = compose(frame, requests, features)
    return render(scene, width=width, track_height=track_height, title=title)
