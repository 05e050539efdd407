import pytest

from main import main
from taxiprofiles.errors import InvalidInput

from conftest import make_observations


ELBOW_OUTPUTS = ["elbow_trials.csv", "report.html", "zone_hourly_profiles.csv"]


@pytest.fixture
def pickups_csv(tmp_path):
    obs = make_observations(
        {
            "morning": ["M1", "M2", "M3"],
            "evening": ["E1", "E2"],
            "night": ["N1", "N2"],
        },
        dates=("2024-09-02", "2024-09-03"),
    )
    path = tmp_path / "pickups.csv"
    obs.to_csv(path, index=False)
    return path


def _run(pickups_csv, out_dir, *extra):
    main(
        [
            "--input", str(pickups_csv),
            "--out-dir", str(out_dir),
            "--k-min", "1",
            "--k-max", "5",
            "--n-init", "2",
            *extra,
        ]
    )


def test_main_with_final_k_writes_everything(tmp_path, pickups_csv):
    out_dir = tmp_path / "out"
    _run(pickups_csv, out_dir, "--k", "3")

    assert sorted(p.name for p in out_dir.iterdir()) == sorted(
        ELBOW_OUTPUTS
        + ["cluster_summary.csv", "observations_labeled.csv", "zone_clusters.csv"]
    )
    assert "profile_chart" in (out_dir / "report.html").read_text(encoding="utf-8")


def test_main_without_final_k_writes_elbow_only(tmp_path, pickups_csv):
    out_dir = tmp_path / "out"
    _run(pickups_csv, out_dir)

    assert sorted(p.name for p in out_dir.iterdir()) == ELBOW_OUTPUTS
    assert "profile_chart" not in (out_dir / "report.html").read_text(encoding="utf-8")


def test_main_with_zone_lookup_draws_map(tmp_path, pickups_csv):
    zones = tmp_path / "zones.csv"
    zones.write_text(
        "zone,lat,lon\n"
        "M1,40.75,-73.98\n"
        "E1,40.72,-73.99\n"
        "N1,40.73,-74.00\n"
    )
    out_dir = tmp_path / "out"
    _run(pickups_csv, out_dir, "--k", "3", "--zones", str(zones))

    assert "Cluster 1" in (out_dir / "report.html").read_text(encoding="utf-8")


def test_main_bad_zone_lookup_reports_invalid_input(tmp_path, pickups_csv, capsys):
    zones = tmp_path / "zones.csv"
    zones.write_text("zone,name\nM1,Midtown\n")
    out_dir = tmp_path / "out"

    with pytest.raises(InvalidInput):
        _run(pickups_csv, out_dir, "--k", "3", "--zones", str(zones))

    assert "Invalid input" in capsys.readouterr().out
    assert not out_dir.exists()
