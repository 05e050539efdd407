import pandas as pd
import pytest

from taxiprofiles.errors import InvalidInput
from taxiprofiles.profiles.zone_hourly import compute_zone_hourly_profiles
from taxiprofiles.util.load_pickups import load_pickups_csv, load_zone_lookup_csv


def test_load_aggregated_csv(tmp_path):
    path = tmp_path / "pickups.csv"
    path.write_text(
        "zone, date, hour, pickups\n"
        "161,2024-09-01,8,12\n"
        "161,2024-09-02,8,18\n"
        "236,2024-09-01,22,5\n"
    )

    obs = load_pickups_csv(path)

    assert list(obs.columns) == ["zone", "date", "hour", "pickups"]
    assert len(obs) == 3

    prof = compute_zone_hourly_profiles(obs)
    assert prof.loc[161, 8] == pytest.approx(15.0)


def test_load_raw_trips_counts_per_hour(tmp_path):
    path = tmp_path / "trips.csv"
    path.write_text(
        "PULocationID,tpep_pickup_datetime\n"
        "161,2024-09-01 08:05:00\n"
        "161,2024-09-01 08:40:00\n"
        "161,2024-09-02 08:10:00\n"
        "236,2024-09-01 23:59:00\n"
    )

    obs = load_pickups_csv(
        path,
        zone_col="PULocationID",
        time_col="tpep_pickup_datetime",
    )

    row = obs[(obs["zone"] == 161) & (obs["date"] == pd.Timestamp("2024-09-01"))]
    assert row["hour"].tolist() == [8]
    assert row["pickups"].tolist() == [2]
    assert obs["pickups"].sum() == 4


def test_missing_zone_column(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("date,hour,pickups\n2024-09-01,1,1\n")
    with pytest.raises(InvalidInput):
        load_pickups_csv(path)


def test_missing_pickups_and_time_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("zone,date,hour\n1,2024-09-01,1\n")
    with pytest.raises(InvalidInput):
        load_pickups_csv(path)


def test_unparseable_trip_time(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("zone,pickup_datetime\n1,yesterday-ish\n")
    with pytest.raises(InvalidInput):
        load_pickups_csv(path)


def test_zone_lookup(tmp_path):
    path = tmp_path / "zones.csv"
    path.write_text("zone,name,lat,lon\n161,Midtown Center,40.758,-73.978\n")
    zones = load_zone_lookup_csv(path)
    assert zones.loc[0, "name"] == "Midtown Center"


def test_zone_lookup_requires_coordinates(tmp_path):
    path = tmp_path / "zones.csv"
    path.write_text("zone,name\n161,Midtown Center\n")
    with pytest.raises(InvalidInput):
        load_zone_lookup_csv(path)
