# taxiprofiles/profiles/zone_hourly.py

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

import numpy as np
import pandas as pd

from taxiprofiles.config import HOURS_PER_DAY
from taxiprofiles.errors import InvalidInput
from taxiprofiles.types import Observation


OBSERVATION_COLUMNS = ["zone", "date", "hour", "pickups"]


def _ensure_hour_columns(df: pd.DataFrame, hours: int = HOURS_PER_DAY) -> pd.DataFrame:
    """
    Ensure DataFrame has all hour columns [0..hours-1], filling missing with 0,
    and ordered correctly.
    """
    df = df.reindex(columns=list(range(hours)), fill_value=0.0)
    df.columns.name = "hour"
    return df


def observations_to_frame(observations: Iterable[Observation]) -> pd.DataFrame:
    rows = [asdict(o) for o in observations]
    return pd.DataFrame(rows, columns=OBSERVATION_COLUMNS)


def validate_observations(
    obs_df: pd.DataFrame,
    hours: int = HOURS_PER_DAY,
) -> pd.DataFrame:
    """
    Checks every observation row and returns a cleaned copy with:
      - zone    (as given, no nulls)
      - date    (datetime64, normalized to midnight)
      - hour    (int, 0..hours-1)
      - pickups (float, >= 0)

    Nothing is dropped or corrected: the first problem found raises InvalidInput.
    """
    missing = [c for c in OBSERVATION_COLUMNS if c not in obs_df.columns]
    if missing:
        raise InvalidInput(f"Observations missing columns: {missing}")

    out = obs_df[OBSERVATION_COLUMNS].copy()

    if out["zone"].isna().any():
        raise InvalidInput("Observation with empty zone identifier")

    dates = pd.to_datetime(out["date"], errors="coerce")
    if dates.isna().any():
        bad = out.loc[dates.isna(), "date"].iloc[0]
        raise InvalidInput(f"Observation with unparseable date: {bad!r}")
    out["date"] = dates.dt.normalize()

    hour = pd.to_numeric(out["hour"], errors="coerce")
    if hour.isna().any():
        raise InvalidInput("Observation with non-numeric hour")
    if (hour != np.floor(hour)).any():
        raise InvalidInput("Observation with fractional hour")
    out_of_range = (hour < 0) | (hour > hours - 1)
    if out_of_range.any():
        bad = hour[out_of_range].iloc[0]
        raise InvalidInput(f"Observation hour {bad:g} outside [0, {hours - 1}]")
    out["hour"] = hour.astype(int)

    pickups = pd.to_numeric(out["pickups"], errors="coerce")
    if pickups.isna().any():
        raise InvalidInput("Observation with non-numeric pickup count")
    pickups = pickups.astype(np.float64)
    if not np.isfinite(pickups).all():
        raise InvalidInput("Observation with infinite pickup count")
    if (pickups < 0).any():
        bad = pickups[pickups < 0].iloc[0]
        raise InvalidInput(f"Observation with negative pickup count: {bad:g}")
    out["pickups"] = pickups

    return out


def compute_zone_hourly_profiles(
    obs_df: pd.DataFrame,
    hours: int = HOURS_PER_DAY,
) -> pd.DataFrame:
    """
    Mean pickups per (zone, hour), averaged directly over the matching rows.

    Returns DataFrame (index=zone, columns=0..hours-1) float, one row per zone
    present in obs_df. Hours a zone never reports are 0.0, not NaN.
    """
    obs = validate_observations(obs_df, hours=hours)

    if obs.empty:
        empty = pd.DataFrame(columns=list(range(hours)), dtype=np.float64)
        empty.index.name = "zone"
        empty.columns.name = "hour"
        return empty

    prof = (
        obs.groupby(["zone", "hour"])["pickups"]
        .mean()
        .unstack(fill_value=0.0)
    )
    prof = _ensure_hour_columns(prof, hours).astype(np.float64)
    prof.index.name = "zone"

    return prof


def compute_zone_daily_demand(
    obs_df: pd.DataFrame,
    hours: int = HOURS_PER_DAY,
) -> pd.Series:
    """
    Demand-map aggregation: sum pickups per (zone, date), then average those
    daily totals across dates.

    Note this is not the same reduction as compute_zone_hourly_profiles, which
    averages the hourly rows directly.
    """
    obs = validate_observations(obs_df, hours=hours)

    daily = obs.groupby(["zone", "date"])["pickups"].sum()
    demand = daily.groupby(level="zone").mean()
    demand.name = "mean_daily_pickups"
    return demand


def profiles_to_long(profiles: pd.DataFrame) -> pd.DataFrame:
    """
    Long form for plotting: zone, hour, mean_pickups
    """
    long = profiles.stack().rename("mean_pickups").reset_index()
    long.columns = ["zone", "hour", "mean_pickups"]
    long["hour"] = long["hour"].astype(int)
    return long
