# taxiprofiles/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from taxiprofiles.viz.theme import ReportTheme


HOURS_PER_DAY = 24

K_MIN = 1
K_MAX = 10

SEED = 0
N_INIT = 10
MAX_ITER = 300
TOL = 1e-4

DEFAULT_INPUT = Path("data/zone_hour_pickups.csv")
DEFAULT_OUT_DIR = Path("data/profiles")


@dataclass(frozen=True)
class KMeansConfig:
    """
    Seed + bounded restarts/iterations for every k-means fit.
    Two runs with the same config on the same profiles give the same result.
    """
    seed: int = SEED
    n_init: int = N_INIT
    max_iter: int = MAX_ITER
    tol: float = TOL


@dataclass
class PipelineConfig:
    k_min: int = K_MIN
    k_max: int = K_MAX

    # None = stop after the elbow scan and let a human pick k
    final_k: int | None = None

    hours: int = HOURS_PER_DAY
    kmeans: KMeansConfig = field(default_factory=KMeansConfig)
    theme: ReportTheme = field(default_factory=ReportTheme)

    input_path: Path = DEFAULT_INPUT
    out_dir: Path = DEFAULT_OUT_DIR
    zones_path: Path | None = None

    progress: bool = True
