"""Vertical placement of features within their protein's track."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import pandas as pd

from .errors import UnknownTrackError
from .features import CHAIN, DOMAIN, MOTIF, REGION, REPEAT, TOPO_DOM, TRANSMEM

# Chains are slimmer than overlays so a domain sits on top of the backbone
# without hiding it.
HALF_HEIGHTS = {
    CHAIN: 0.2,
    DOMAIN: 0.25,
    REGION: 0.25,
    MOTIF: 0.25,
    REPEAT: 0.25,
    TOPO_DOM: 0.25,
    TRANSMEM: 0.25,
}

POINT_OFFSET = 0.25


class Band(NamedTuple):
    ymin: float
    ymax: float


@dataclass(frozen=True)
class TrackLayout:
    orders: frozenset

    @classmethod
    def from_features(cls, df: pd.DataFrame) -> "TrackLayout":
        chains = df.loc[df["type"] == CHAIN, "order"]
        return cls(frozenset(int(o) for o in chains))

    def _check(self, order) -> int:
        if order not in self.orders:
            raise UnknownTrackError(f"Track {order} has no CHAIN row")
        return int(order)

    def band_for(self, feature_type: str, order) -> Band:
        """Vertical extent of a *feature_type* rectangle on track *order*."""
        try:
            half = HALF_HEIGHTS[feature_type]
        except KeyError:
            raise ValueError(f"No band defined for feature type '{feature_type}'") from None
        order = self._check(order)
        return Band(order - half, order + half)

    def centre(self, order) -> float:
        return float(self._check(order))

    def point_offset_for(self, order) -> float:
        """y of a single-residue marker, drawn just above the track centre."""
        return self._check(order) + POINT_OFFSET
