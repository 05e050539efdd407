import numpy as np
import pandas as pd
import pytest


HOURS = np.arange(24)


def _bump(center, width=2.0):
    # circular distance so a 1am peak wraps around midnight
    d = np.minimum(np.abs(HOURS - center), 24 - np.abs(HOURS - center))
    return np.exp(-0.5 * (d / width) ** 2)


SHAPES = {
    "morning": 2.0 + 40.0 * _bump(8),
    "evening": 2.0 + 40.0 * _bump(18),
    "night": 2.0 + 40.0 * _bump(1),
}


def make_observations(zones_by_shape, dates=("2024-09-02", "2024-09-03", "2024-09-04")):
    """
    One row per (zone, date, hour). Each zone is a scaled copy of its shape;
    the per-date values average back to exactly that copy.
    """
    rows = []
    for shape, zones in zones_by_shape.items():
        base = SHAPES[shape]
        for i, zone in enumerate(zones):
            scale = 1.0 + 0.05 * i
            offsets = np.linspace(-1.0, 1.0, len(dates)) if len(dates) > 1 else [0.0]
            for d, off in zip(dates, offsets):
                for h in HOURS:
                    rows.append(
                        {
                            "zone": zone,
                            "date": d,
                            "hour": int(h),
                            "pickups": float(base[h] * scale + off),
                        }
                    )
    return pd.DataFrame(rows, columns=["zone", "date", "hour", "pickups"])


@pytest.fixture
def grouped_obs():
    # 4 morning, 3 evening, 2 night zones
    return make_observations(
        {
            "morning": ["M1", "M2", "M3", "M4"],
            "evening": ["E1", "E2", "E3"],
            "night": ["N1", "N2"],
        }
    )


@pytest.fixture
def grouped_profiles(grouped_obs):
    from taxiprofiles.profiles.zone_hourly import compute_zone_hourly_profiles

    return compute_zone_hourly_profiles(grouped_obs)
