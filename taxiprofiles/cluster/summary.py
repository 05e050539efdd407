# taxiprofiles/cluster/summary.py

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from taxiprofiles.cluster.elbow import trials_to_frame
from taxiprofiles.types import ClusterTrial, ZoneClusterAssignment


NIGHT_HOURS = [22, 23, 0, 1, 2, 3]
AM_PEAK_HOURS = list(range(6, 10))
PM_PEAK_HOURS = list(range(16, 20))


def summarize_clusters(
    profiles: pd.DataFrame,
    assignment: ZoneClusterAssignment,
) -> pd.DataFrame:
    """
    Returns per-cluster summary features to help you interpret clusters.
    """
    hour_cols = list(profiles.columns)
    df = profiles.copy()
    df["cluster"] = assignment.labels.loc[df.index].values

    total = df[hour_cols].sum(axis=1)

    def _share(hours):
        cols = [h for h in hours if h in hour_cols]
        mass = df[cols].sum(axis=1)
        return np.where(total > 0, mass / total.where(total > 0, 1.0), 0.0)

    tmp = pd.DataFrame(
        {
            "cluster": df["cluster"].values,
            "daily_pickups": total.values,
            "night_share": _share(NIGHT_HOURS),
            "am_share": _share(AM_PEAK_HOURS),
            "pm_share": _share(PM_PEAK_HOURS),
        },
        index=df.index,
    )

    summary = (
        tmp.groupby("cluster")
        .agg(
            n_zones=("cluster", "size"),
            daily_pickups_mean=("daily_pickups", "mean"),
            night_share_mean=("night_share", "mean"),
            am_share_mean=("am_share", "mean"),
            pm_share_mean=("pm_share", "mean"),
        )
        .reset_index()
    )

    # peak hour of each centroid
    peak = assignment.centroids.idxmax(axis=1).astype(int)
    summary["peak_hour"] = summary["cluster"].map(peak)

    return summary.sort_values("cluster").reset_index(drop=True)


def label_observations(
    obs_df: pd.DataFrame,
    assignment: ZoneClusterAssignment,
) -> pd.DataFrame:
    """
    Joins each observation row onto its zone's cluster label.
    Rows whose zone was not clustered get cluster -1.
    """
    labels = assignment.labels.rename("cluster").rename_axis("zone")

    out = obs_df.merge(
        labels.reset_index(),
        on="zone",
        how="left",
    )
    out["cluster"] = out["cluster"].fillna(-1).astype(int)
    return out


def write_assignment_csv(
    assignment: ZoneClusterAssignment,
    out_csv: str | Path,
) -> Path:
    out_csv = Path(out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)

    df = assignment.labels.rename("cluster").rename_axis("zone").reset_index()
    df.to_csv(out_csv, index=False)
    return out_csv


def write_trials_csv(
    trials: list[ClusterTrial],
    out_csv: str | Path,
) -> Path:
    out_csv = Path(out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)

    trials_to_frame(trials).to_csv(out_csv, index=False)
    return out_csv
