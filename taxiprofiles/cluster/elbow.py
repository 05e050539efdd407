# taxiprofiles/cluster/elbow.py

from __future__ import annotations

import numpy as np
import pandas as pd

from taxiprofiles.errors import InvalidInput
from taxiprofiles.types import ClusterTrial


def trials_to_frame(trials: list[ClusterTrial]) -> pd.DataFrame:
    """
    Elbow curve as a table: k, wss, wss_drop, wss_drop_pct

    wss_drop is the reduction from the previous k (NaN for the first row).
    """
    df = pd.DataFrame(
        {"k": [t.k for t in trials], "wss": [t.wss for t in trials]},
        columns=["k", "wss"],
    )
    df["wss_drop"] = -df["wss"].diff()

    prev = df["wss"].shift(1)
    df["wss_drop_pct"] = np.where(prev > 0, 100.0 * df["wss_drop"] / prev, 0.0)
    df.loc[prev.isna(), "wss_drop_pct"] = np.nan
    return df


def suggest_k_second_difference(trials: list[ClusterTrial]) -> int:
    """
    Opt-in knee heuristic. Picks the k where the WSS curve bends hardest,
    i.e. the largest second difference  wss[k-1] - 2*wss[k] + wss[k+1].

    Only the interior points of the scanned range can be chosen. Ties go to
    the smaller k. Nothing in the pipeline calls this on its own.
    """
    if len(trials) < 3:
        raise InvalidInput("Need at least 3 trials to estimate a knee")

    trials = sorted(trials, key=lambda t: t.k)
    ks = [t.k for t in trials]
    if any(b - a != 1 for a, b in zip(ks, ks[1:])):
        raise InvalidInput("Knee heuristic needs consecutive k values")

    wss = np.array([t.wss for t in trials], dtype=np.float64)
    second = wss[:-2] - 2.0 * wss[1:-1] + wss[2:]

    return int(ks[1 + int(np.argmax(second))])
