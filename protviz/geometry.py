"""Feature rows -> drawable primitives.

Each ``build_*`` function takes a feature table (full or pre-filtered), the
track layout and a :class:`LayerConfig`, selects the rows of its own feature
type(s), and returns a tuple of primitives: shapes first, then labels.  No
builder keeps state, so calling one twice on the same table gives equal
output.  A table without rows of the builder's type yields ``()``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Callable, Optional, Union

import numpy as np
import pandas as pd

from .errors import InvalidCoordinateError
from .features import (
    CHAIN,
    DOMAIN,
    MOTIF,
    REGION,
    REPEAT,
    TOPO_DOM,
    TRANSMEM,
    features_of_type,
    phospho_sites,
    strip_digits,
)
from .tracks import TrackLayout

CHAIN_LABEL_X = -10
TRANSMEM_LABEL = "TM"

# Sizes are in ggplot-style millimetre units; the renderer converts to px.
LAYER_DEFAULTS = {
    "chains": {
        "outline_color": "black",
        "fill_color": "grey",
        "show_labels": True,
        "label_size": 4,
        "stroke_width": 0.5,
    },
    "domains": {"show_labels": True, "label_size": 4},
    "regions": {"show_labels": False, "label_size": 4},
    "motifs": {"show_labels": False, "label_size": 4},
    "repeats": {
        "outline_color": "dimgrey",
        "fill_color": "dimgrey",
        "show_labels": True,
        "label_size": 2,
        "stroke_width": 0.5,
    },
    "receptors": {"show_labels": False, "label_size": 4},
    "phospho": {
        "outline_color": "black",
        "fill_color": "yellow",
        "point_size": 2,
        "stroke_width": 0.5,
    },
}

# Builders whose rectangles are colored by description rather than a fixed fill.
CATEGORICAL_LAYERS = {"domains", "regions", "motifs", "receptors"}


# ── Primitives ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Rect:
    xmin: float
    xmax: float
    ymin: float
    ymax: float
    fill_key: Optional[str] = None
    outline_key: Optional[str] = None


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    fill_key: Optional[str] = None


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    text: str
    size: float
    align: str = "center"   # "right": text ends at x
    boxed: bool = False     # drawn on a white outlined box


Primitive = Union[Rect, Point, Label]


# ── Configuration ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LayerConfig:
    """Per-layer drawing options.  ``None`` means "use the builder default"."""

    outline_color: Optional[str] = None
    fill_color: Optional[str] = None
    show_labels: Optional[bool] = None
    label_size: Optional[float] = None
    point_size: Optional[float] = None
    stroke_width: Optional[float] = None
    label_text_source: Optional[Callable[[pd.Series], str]] = None

    def resolve(self, defaults: dict) -> "LayerConfig":
        """Fill unset options from *defaults*; explicit values always win."""
        updates = {
            f.name: defaults[f.name]
            for f in fields(self)
            if getattr(self, f.name) is None and f.name in defaults
        }
        return replace(self, **updates)


def _description(row: pd.Series) -> str:
    return str(row["description"])


def _entry_name(row: pd.Series) -> str:
    return str(row["entryName"])


# ── Shared helpers ────────────────────────────────────────────────────────────

def _span(row: pd.Series) -> tuple[float, float]:
    try:
        begin, end = float(row["begin"]), float(row["end"])
    except (TypeError, ValueError):
        begin = end = np.nan
    if not (np.isfinite(begin) and np.isfinite(end)):
        raise InvalidCoordinateError(
            f"{row['type']} '{row['description']}' has a missing begin/end coordinate"
        )
    if begin < 0 or end < 0 or begin > end:
        raise InvalidCoordinateError(
            f"{row['type']} '{row['description']}' has invalid coordinates ({begin:g}-{end:g})"
        )
    return begin, end


def _rects(
    rows: pd.DataFrame,
    tracks: TrackLayout,
    fill: Callable[[pd.Series], Optional[str]],
    outline: Optional[str] = None,
) -> list[Rect]:
    rects = []
    for _, row in rows.iterrows():
        begin, end = _span(row)
        band = tracks.band_for(row["type"], row["order"])
        rects.append(Rect(begin, end, band.ymin, band.ymax, fill(row), outline))
    return rects


def _centred_labels(
    rows: pd.DataFrame,
    tracks: TrackLayout,
    text: Callable[[pd.Series], str],
    size: float,
    boxed: bool = False,
) -> list[Label]:
    labels = []
    for _, row in rows.iterrows():
        begin, end = _span(row)
        labels.append(Label(
            begin + (end - begin) / 2, tracks.centre(row["order"]), text(row), size, boxed=boxed,
        ))
    return labels


def _overlay(
    df: pd.DataFrame,
    tracks: TrackLayout,
    config: LayerConfig,
    feature_type: str,
    defaults: dict,
) -> tuple[Primitive, ...]:
    """Rectangles colored by description, optionally labelled with it."""
    cfg = config.resolve(defaults)
    rows = features_of_type(df, feature_type)
    primitives: list[Primitive] = _rects(rows, tracks, _description, cfg.outline_color)
    if cfg.show_labels:
        text = cfg.label_text_source or _description
        primitives += _centred_labels(rows, tracks, text, cfg.label_size, boxed=True)
    return tuple(primitives)


# ── Builders ──────────────────────────────────────────────────────────────────

def build_chains(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    """Full-length protein backbones, labelled to the left of residue 1."""
    cfg = config.resolve(LAYER_DEFAULTS["chains"])
    rows = features_of_type(df, CHAIN)
    primitives: list[Primitive] = _rects(
        rows, tracks, lambda row: cfg.fill_color, cfg.outline_color
    )
    if cfg.show_labels:
        text = cfg.label_text_source or _entry_name
        for _, row in rows.iterrows():
            primitives.append(Label(
                CHAIN_LABEL_X, tracks.centre(row["order"]), text(row), cfg.label_size,
                align="right",
            ))
    return tuple(primitives)


def build_domains(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    """Domains colored by description, labelled at their midpoint by default."""
    return _overlay(df, tracks, config, DOMAIN, LAYER_DEFAULTS["domains"])


def build_regions(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    return _overlay(df, tracks, config, REGION, LAYER_DEFAULTS["regions"])


def build_motifs(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    return _overlay(df, tracks, config, MOTIF, LAYER_DEFAULTS["motifs"])


def build_repeats(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    """Repeats share one fixed color; labels drop repeat numbering digits.

    ``ANK 1``, ``ANK 2`` ... all read ``ANK``.  Digits are removed anywhere in
    the text, including text produced by a custom label source.
    """
    cfg = config.resolve(LAYER_DEFAULTS["repeats"])
    rows = features_of_type(df, REPEAT)
    primitives: list[Primitive] = _rects(
        rows, tracks, lambda row: cfg.fill_color, cfg.outline_color
    )
    if cfg.show_labels:
        source = cfg.label_text_source or _description
        primitives += _centred_labels(
            rows, tracks, lambda row: strip_digits(source(row)), cfg.label_size
        )
    return tuple(primitives)


def build_receptor_domains(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    """Topological (TOPO_DOM) and transmembrane (TRANSMEM) segments.

    Both are colored by description.  Transmembrane labels always read
    ``TM``; topological domains use the label source (description by
    default).
    """
    cfg = config.resolve(LAYER_DEFAULTS["receptors"])
    topo = features_of_type(df, TOPO_DOM)
    transmem = features_of_type(df, TRANSMEM)
    primitives: list[Primitive] = _rects(topo, tracks, _description, cfg.outline_color)
    primitives += _rects(transmem, tracks, _description, cfg.outline_color)
    if cfg.show_labels:
        text = cfg.label_text_source or _description
        primitives += _centred_labels(topo, tracks, text, cfg.label_size, boxed=True)
        primitives += _centred_labels(
            transmem, tracks, lambda row: TRANSMEM_LABEL, cfg.label_size, boxed=True
        )
    return tuple(primitives)


def build_phospho(
    df: pd.DataFrame, tracks: TrackLayout, config: LayerConfig = LayerConfig()
) -> tuple[Primitive, ...]:
    """One marker per phosphorylated residue, just above the track centre."""
    cfg = config.resolve(LAYER_DEFAULTS["phospho"])
    points = []
    for _, row in phospho_sites(df).iterrows():
        begin, _ = _span(row)
        points.append(Point(begin, tracks.point_offset_for(row["order"]), cfg.fill_color))
    return tuple(points)


BUILDERS = {
    "chains": build_chains,
    "domains": build_domains,
    "regions": build_regions,
    "motifs": build_motifs,
    "repeats": build_repeats,
    "receptors": build_receptor_domains,
    "phospho": build_phospho,
}
