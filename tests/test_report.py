import pandas as pd
import pytest

from taxiprofiles.config import KMeansConfig, PipelineConfig
from taxiprofiles.pipeline import run_pipeline
from taxiprofiles.viz.app.report import build_report_app, build_report_html
from taxiprofiles.viz.charts.graphs import build_elbow_chart, build_profile_chart
from taxiprofiles.viz.maps.render import build_zone_map
from taxiprofiles.viz.theme import ReportTheme


@pytest.fixture
def result(grouped_obs):
    config = PipelineConfig(k_min=1, k_max=4, final_k=3, kmeans=KMeansConfig(), progress=False)
    return run_pipeline(grouped_obs, config, verbose=False)


@pytest.fixture
def zones():
    names = ["M1", "M2", "M3", "M4", "E1", "E2", "E3", "N1", "N2", "Z0"]
    return pd.DataFrame(
        {
            "zone": names,
            "lat": [40.70 + 0.01 * i for i in range(len(names))],
            "lon": [-74.00 + 0.01 * i for i in range(len(names))],
        }
    )


def test_elbow_chart_embeds_curve(result):
    html = build_elbow_chart(result.trials).render()
    assert 'id="elbow_chart"' in html
    assert "[1, 2, 3, 4]" in html


def test_profile_chart_has_every_cluster(result):
    html = build_profile_chart(result.assignment).render()
    assert 'id="profile_chart"' in html
    for label in (1, 2, 3):
        assert f"Cluster {label} (" in html
    assert "08:00" in html


def test_theme_colors_cycle():
    theme = ReportTheme(map_colors=["red", "blue"])
    assert theme.map_color(1) == "red"
    assert theme.map_color(2) == "blue"
    assert theme.map_color(3) == "red"


def test_zone_map_layers(result, zones):
    html = build_zone_map(zones, result.assignment, daily_demand=result.daily_demand).get_root().render()
    assert "Cluster 1" in html
    assert "Unclustered" in html
    assert "pickups/day" in html


def test_report_html_without_map(result):
    html = build_report_html(result)
    assert "elbow_chart" in html
    assert "profile_chart" in html
    assert "Cluster Summary" in html


def test_report_html_elbow_only(grouped_obs):
    config = PipelineConfig(k_min=1, k_max=3, progress=False)
    elbow_only = run_pipeline(grouped_obs, config, verbose=False)

    html = build_report_html(elbow_only)
    assert "elbow_chart" in html
    assert "profile_chart" not in html


def test_report_app_routes(result, zones):
    app = build_report_app(result, zones_df=zones, theme=ReportTheme(title="Test Report"))
    client = app.test_client()

    page = client.get("/")
    assert page.status_code == 200
    assert b"Test Report" in page.data

    trials = client.get("/trials.json").get_json()
    assert [t["k"] for t in trials] == [1, 2, 3, 4]
    assert trials[0]["wss"] >= trials[-1]["wss"]
