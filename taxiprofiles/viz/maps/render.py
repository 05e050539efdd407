# taxiprofiles/viz/maps/render.py
from __future__ import annotations

import math

import folium
import pandas as pd

from taxiprofiles.types import ZoneClusterAssignment
from taxiprofiles.viz.theme import ReportTheme


MIN_RADIUS = 3.0
MAX_RADIUS = 14.0


def _radius(demand: float | None, max_demand: float) -> float:
    if demand is None or pd.isna(demand) or max_demand <= 0:
        return 5.0
    # sqrt so marker area tracks demand
    return MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * math.sqrt(demand / max_demand)


def build_zone_map(
    zones_df: pd.DataFrame,
    assignment: ZoneClusterAssignment,
    theme: ReportTheme | None = None,
    daily_demand: pd.Series | None = None,
) -> folium.Map:
    """
    zones_df: zone, lat, lon (+ optional name / borough)

    One toggleable layer per cluster. Zones without a label go in "Unclustered".
    Marker size follows mean daily pickups when daily_demand is given.
    """
    theme = theme or ReportTheme()

    m = folium.Map(
        location=list(theme.center),
        zoom_start=theme.zoom_start,
        tiles=theme.tiles,
    )

    zones = zones_df.copy()
    zones["cluster"] = zones["zone"].map(assignment.labels).fillna(-1).astype(int)

    max_demand = 0.0
    if daily_demand is not None and len(daily_demand):
        max_demand = float(daily_demand.max())

    layers: dict[int, folium.FeatureGroup] = {}
    for cid in sorted(zones["cluster"].unique().tolist()):
        name = f"Cluster {cid}" if cid > 0 else "Unclustered"
        layers[cid] = folium.FeatureGroup(name=name, show=True)

    for _, row in zones.iterrows():
        cid = int(row["cluster"])
        color = theme.map_color(cid) if cid > 0 else "gray"

        demand = None
        if daily_demand is not None:
            demand = daily_demand.get(row["zone"])

        label = str(row.get("name", row["zone"]))
        popup = f"{row['zone']} — {label} (cluster {cid})"
        if demand is not None and not pd.isna(demand):
            popup += f", {float(demand):.1f} pickups/day"

        folium.CircleMarker(
            location=[float(row["lat"]), float(row["lon"])],
            radius=_radius(demand, max_demand),
            color=color,
            fill=True,
            fill_opacity=0.85,
            weight=1,
            popup=popup,
        ).add_to(layers[cid])

    for layer in layers.values():
        layer.add_to(m)

    folium.LayerControl(collapsed=False).add_to(m)

    return m
