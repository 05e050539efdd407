# taxiprofiles/viz/app/report.py
from __future__ import annotations

import folium
import pandas as pd
from flask import Flask, jsonify

from taxiprofiles.pipeline import PipelineResult
from taxiprofiles.viz.charts.graphs import (
    build_chart_head,
    build_elbow_chart,
    build_profile_chart,
)
from taxiprofiles.viz.maps.render import build_zone_map
from taxiprofiles.viz.theme import ReportTheme


def build_report_html(
    result: PipelineResult,
    zones_df: pd.DataFrame | None = None,
    theme: ReportTheme | None = None,
) -> str:
    """
    Standalone HTML: optional zone map, elbow curve, cluster profiles + summary.
    """
    theme = theme or ReportTheme()

    if zones_df is not None and result.assignment is not None:
        m = build_zone_map(
            zones_df,
            result.assignment,
            theme=theme,
            daily_demand=result.daily_demand,
        )
        root = m.get_root()
    else:
        root = folium.Figure()

    root.header.add_child(folium.Element(f"<title>{theme.title}</title>"))

    root.html.add_child(
        folium.Element(
            f"""
<div style="
    max-width: 1600px;
    margin: 16px auto 0 auto;
    padding: 0 24px;
    font-family: {theme.font_family};
    font-size: 20px;
    font-weight: 700;">
    {theme.title}
</div>
"""
        )
    )

    root.html.add_child(build_chart_head(theme))
    root.html.add_child(build_elbow_chart(result.trials, theme))

    if result.assignment is not None:
        root.html.add_child(build_profile_chart(result.assignment, theme))

        summary_html = result.summary.to_html(index=False, float_format=lambda x: f"{x:.3f}")
        root.html.add_child(
            folium.Element(
                f"""
<div class="tp-section">
  <h2 style="margin: 8px 0;">Cluster Summary</h2>
  {summary_html}
</div>
"""
            )
        )

    return root.render()


def build_report_app(
    result: PipelineResult,
    zones_df: pd.DataFrame | None = None,
    theme: ReportTheme | None = None,
) -> Flask:
    theme = theme or ReportTheme()

    app = Flask(__name__)

    @app.get("/")
    def index():
        return build_report_html(result, zones_df=zones_df, theme=theme)

    @app.get("/trials.json")
    def trials_json():
        return jsonify([{"k": int(t.k), "wss": float(t.wss)} for t in result.trials])

    return app


def serve_report(
    result: PipelineResult,
    zones_df: pd.DataFrame | None = None,
    theme: ReportTheme | None = None,
    host: str = "127.0.0.1",
    port: int = 8090,
    debug: bool = False,
):
    """
    Library entry point: start a small web server that displays the report.
    """
    app = build_report_app(result, zones_df=zones_df, theme=theme)
    app.run(host=host, port=int(port), debug=bool(debug))
