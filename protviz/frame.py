"""Plot bounds shared by every track of a protein diagram."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from .errors import EmptyInputError, InvalidCoordinateError

_LEFT_MARGIN = 0.2    # fraction of the longest protein reserved for chain labels
_RIGHT_MARGIN = 0.1
_TRACK_PAD = 0.5


@dataclass(frozen=True)
class CanvasFrame:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def tracks(self) -> float:
        return self.y_max - self.y_min


def compute_frame(df: pd.DataFrame) -> CanvasFrame:
    """Size the canvas so proteins of different lengths share one x-scale.

    The x-range runs from a left margin of 20% of the longest ``end`` (room
    for chain labels left of residue 0) to that ``end`` plus 10%.  The
    y-range pads the outermost tracks by half a unit on each side, so the
    frame height always equals the highest ``order``.

    Raises:
        EmptyInputError: no rows, or no CHAIN row.
        InvalidCoordinateError: an ``end`` is negative or infinite, or no
            ``end`` is known at all.
    """
    if df.empty or not (df["type"] == "CHAIN").any():
        raise EmptyInputError("Cannot size a canvas without a CHAIN row")

    ends = pd.to_numeric(df["end"], errors="coerce").to_numpy(dtype=float)
    known = ends[~np.isnan(ends)]
    if np.isinf(known).any() or (known < 0).any():
        raise InvalidCoordinateError("Feature 'end' values must be finite and non-negative")
    if known.size == 0:
        raise InvalidCoordinateError("No feature has a known 'end' coordinate")

    end_max = float(known.max())
    max_order = float(pd.to_numeric(df["order"], errors="coerce").max())
    return CanvasFrame(
        x_min=-end_max * _LEFT_MARGIN,
        x_max=end_max + end_max * _RIGHT_MARGIN,
        y_min=_TRACK_PAD,
        y_max=max_order + _TRACK_PAD,
    )
