# taxiprofiles/util/load_pickups.py

from __future__ import annotations

from pathlib import Path

import pandas as pd

from taxiprofiles.errors import InvalidInput
from taxiprofiles.profiles.zone_hourly import OBSERVATION_COLUMNS


def load_pickups_csv(
    pickups_csv: str | Path,
    *,
    zone_col: str = "zone",
    date_col: str = "date",
    hour_col: str = "hour",
    pickups_col: str = "pickups",
    time_col: str = "pickup_datetime",
) -> pd.DataFrame:
    """
    Loads pickup observations from CSV. Two layouts are accepted:

      pre-aggregated:  zone, date, hour, pickups
      raw trips:       zone, pickup_datetime   (one row per trip)

    Raw trips are counted into (zone, date, hour) rows.

    Returns DataFrame with columns: zone, date, hour, pickups
    (values are not range-checked here; the aggregator does that).
    """
    pickups_csv = Path(pickups_csv)

    df = pd.read_csv(pickups_csv)

    # tolerate stray spaces in headers
    colmap = {c.strip(): c for c in df.columns}

    if zone_col not in colmap:
        raise InvalidInput(f"{pickups_csv.name}: missing zone column '{zone_col}'")

    if pickups_col in colmap:
        needed = [date_col, hour_col]
        missing = [c for c in needed if c not in colmap]
        if missing:
            raise InvalidInput(f"{pickups_csv.name}: missing columns {missing}")

        out = pd.DataFrame()
        out["zone"] = df[colmap[zone_col]]
        out["date"] = df[colmap[date_col]]
        out["hour"] = df[colmap[hour_col]]
        out["pickups"] = df[colmap[pickups_col]]
        return out[OBSERVATION_COLUMNS]

    if time_col not in colmap:
        raise InvalidInput(
            f"{pickups_csv.name}: need either a '{pickups_col}' column "
            f"or a '{time_col}' timestamp column"
        )

    times = pd.to_datetime(df[colmap[time_col]], errors="coerce")
    if times.isna().any():
        raise InvalidInput(f"{pickups_csv.name}: unparseable values in '{time_col}'")

    trips = pd.DataFrame(
        {
            "zone": df[colmap[zone_col]],
            "date": times.dt.normalize(),
            "hour": times.dt.hour.astype(int),
        }
    )

    out = (
        trips.groupby(["zone", "date", "hour"])
        .size()
        .rename("pickups")
        .reset_index()
    )
    return out[OBSERVATION_COLUMNS]


def load_zone_lookup_csv(zones_csv: str | Path) -> pd.DataFrame:
    """
    Zone metadata for the map: zone, lat, lon (+ name / borough if present).
    """
    zones_csv = Path(zones_csv)

    zones = pd.read_csv(zones_csv)
    zones.columns = [c.strip() for c in zones.columns]

    missing = [c for c in ["zone", "lat", "lon"] if c not in zones.columns]
    if missing:
        raise InvalidInput(f"{zones_csv.name}: missing columns {missing}")

    return zones
