# taxiprofiles/types.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd


@dataclass(frozen=True)
class Observation:
    zone: str
    date: date
    hour: int
    pickups: float


@dataclass(frozen=True)
class ClusterTrial:
    k: int
    wss: float


@dataclass(frozen=True)
class ZoneClusterAssignment:
    """
    labels: Series (index=zone, values=cluster label in 1..k)
    centroids: DataFrame (index=cluster label, columns=0..23) float
    wss: within-cluster sum of squares of this partition
    """
    k: int
    labels: pd.Series
    centroids: pd.DataFrame
    wss: float

    def members(self, label: int) -> list:
        return self.labels.index[self.labels == label].tolist()
