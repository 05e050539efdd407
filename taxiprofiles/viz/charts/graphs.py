# taxiprofiles/viz/charts/graphs.py
import json

import folium

from taxiprofiles.types import ClusterTrial, ZoneClusterAssignment
from taxiprofiles.viz.theme import ReportTheme


CHART_JS_CDN = "https://cdn.jsdelivr.net/npm/chart.js"


def _hour_labels(hours):
    return [f"{int(h):02d}:00" for h in hours]


def build_chart_head(theme: ReportTheme | None = None):
    """
    Chart.js + shared chart CSS. Add once per page, before any chart.
    """
    theme = theme or ReportTheme()

    return folium.Element(
        f"""
<style>
.chart-box {{
  height: {theme.chart_height_px}px;
  position: relative;
}}
.chart-box canvas {{
  width: 100% !important;
  height: 100% !important;
}}
.tp-section {{
  max-width: 1600px;
  margin: 32px auto 24px auto;
  padding: 0 24px;
  font-family: {theme.font_family};
}}
.tp-note {{
  font-size: 12px;
  color: #444;
  margin: 4px 0 12px 0;
}}
</style>

<script src="{CHART_JS_CDN}"></script>
"""
    )


def build_elbow_chart(trials: list[ClusterTrial], theme: ReportTheme | None = None):
    """
    Line chart of WSS against k. Just the curve: choosing k is up to the reader.
    """
    theme = theme or ReportTheme()

    ks = [int(t.k) for t in trials]
    wss = [round(float(t.wss), 4) for t in trials]
    color = theme.chart_color(1)

    return folium.Element(
        f"""
<div class="tp-section">
  <h2 style="margin-bottom:4px;">Elbow curve</h2>
  <div class="tp-note">Within-cluster sum of squares by cluster count k</div>
  <div class="chart-box"><canvas id="elbow_chart"></canvas></div>
</div>

<script>
(function() {{
  const el = document.getElementById("elbow_chart");
  if (!el) return;
  new Chart(el, {{
    type: "line",
    data: {{
      labels: {json.dumps(ks)},
      datasets: [{{
        label: "WSS",
        data: {json.dumps(wss)},
        borderColor: "{color}",
        backgroundColor: "{color}",
        fill: false,
        tension: 0,
        pointRadius: 4
      }}]
    }},
    options: {{
      responsive: true,
      maintainAspectRatio: false,
      plugins: {{ legend: {{ display: false }} }},
      scales: {{
        y: {{ beginAtZero: true, title: {{ display: true, text: "WSS" }} }},
        x: {{ title: {{ display: true, text: "k" }} }}
      }}
    }}
  }});
}})();
</script>
"""
    )


def build_profile_chart(
    assignment: ZoneClusterAssignment,
    theme: ReportTheme | None = None,
):
    """
    One line per cluster: centroid mean pickups by hour.
    """
    theme = theme or ReportTheme()

    centroids = assignment.centroids
    sizes = assignment.labels.value_counts()

    datasets = []
    for label, row in centroids.iterrows():
        label = int(label)
        datasets.append(
            {
                "label": f"Cluster {label} ({int(sizes.get(label, 0))} zones)",
                "data": [round(float(v), 4) for v in row.values],
                "borderColor": theme.chart_color(label),
                "backgroundColor": theme.chart_color(label),
                "fill": False,
                "tension": 0.25,
                "pointRadius": 0,
            }
        )

    return folium.Element(
        f"""
<div class="tp-section">
  <h2 style="margin-bottom:4px;">Cluster demand profiles (k={assignment.k})</h2>
  <div class="tp-note">Mean pickups per hour at each cluster centroid</div>
  <div class="chart-box"><canvas id="profile_chart"></canvas></div>
</div>

<script>
(function() {{
  const el = document.getElementById("profile_chart");
  if (!el) return;
  new Chart(el, {{
    type: "line",
    data: {{
      labels: {json.dumps(_hour_labels(centroids.columns))},
      datasets: {json.dumps(datasets)}
    }},
    options: {{
      responsive: true,
      maintainAspectRatio: false,
      scales: {{
        y: {{ beginAtZero: true, title: {{ display: true, text: "Mean pickups" }} }},
        x: {{ title: {{ display: true, text: "Hour" }} }}
      }}
    }}
  }});
}})();
</script>
"""
    )
