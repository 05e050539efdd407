# taxiprofiles/viz/theme.py
from __future__ import annotations

from dataclasses import dataclass, field


# Works well visually up to ~10 clusters (cycles if k > len(colors))
CLUSTER_COLORS = [
    "red",
    "blue",
    "green",
    "purple",
    "orange",
    "darkred",
    "cadetblue",
    "darkgreen",
    "black",
    "darkblue",
]

# Same palette as hex, for Chart.js
CLUSTER_HEX = [
    "#d73027",
    "#4575b4",
    "#1a9850",
    "#762a83",
    "#f46d43",
    "#a50026",
    "#5f9ea0",
    "#006837",
    "#222222",
    "#313695",
]


@dataclass
class ReportTheme:
    """
    Everything the report needs to know about how to look.
    Passed explicitly to every builder; nothing is set globally.
    """
    title: str = "Taxi Zone Demand Profiles"
    map_colors: list[str] = field(default_factory=lambda: list(CLUSTER_COLORS))
    chart_colors: list[str] = field(default_factory=lambda: list(CLUSTER_HEX))
    font_family: str = "system-ui, -apple-system, Segoe UI, Roboto, Arial"
    chart_height_px: int = 320
    tiles: str = "CartoDB positron"
    center: tuple[float, float] = (40.7128, -74.0060)
    zoom_start: int = 11

    def map_color(self, label: int) -> str:
        # labels are 1-based
        return self.map_colors[(label - 1) % len(self.map_colors)]

    def chart_color(self, label: int) -> str:
        return self.chart_colors[(label - 1) % len(self.chart_colors)]
