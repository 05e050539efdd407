# taxiprofiles/pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd
from colorama import Fore, Style

from taxiprofiles.cluster.kmeans import (
    assign_clusters,
    check_cluster_count,
    select_cluster_counts,
)
from taxiprofiles.cluster.summary import (
    label_observations,
    summarize_clusters,
    write_assignment_csv,
    write_trials_csv,
)
from taxiprofiles.config import PipelineConfig
from taxiprofiles.profiles.zone_hourly import (
    compute_zone_daily_demand,
    compute_zone_hourly_profiles,
)
from taxiprofiles.types import ClusterTrial, ZoneClusterAssignment


@dataclass
class PipelineResult:
    profiles: pd.DataFrame
    trials: list[ClusterTrial]
    daily_demand: pd.Series
    assignment: ZoneClusterAssignment | None = None
    summary: pd.DataFrame | None = None


def _status(msg: str, color: str, verbose: bool) -> None:
    if verbose:
        print(f"{color}{msg}{Style.RESET_ALL}")


def run_pipeline(
    obs_df: pd.DataFrame,
    config: PipelineConfig | None = None,
    verbose: bool = True,
) -> PipelineResult:
    """
    Aggregator -> Cluster Selector -> (optional) Cluster Assigner.

    With config.final_k=None the run stops after the elbow scan; pick k from
    result.trials and call again (or call assign_clusters directly).
    """
    config = config or PipelineConfig()

    _status("Aggregating zone hourly profiles…", Fore.CYAN, verbose)
    profiles = compute_zone_hourly_profiles(obs_df, hours=config.hours)
    daily_demand = compute_zone_daily_demand(obs_df, hours=config.hours)
    _status(f"  {len(profiles)} zones x {profiles.shape[1]} hours", Fore.CYAN, verbose)

    if config.final_k is not None:
        check_cluster_count(config.final_k, len(profiles), name="final_k")

    _status(
        f"Scanning k={config.k_min}..{config.k_max} "
        f"(seed={config.kmeans.seed}, n_init={config.kmeans.n_init})…",
        Fore.CYAN,
        verbose,
    )
    trials = select_cluster_counts(
        profiles,
        config.k_min,
        config.k_max,
        config=config.kmeans,
        progress=config.progress and verbose,
    )

    result = PipelineResult(profiles=profiles, trials=trials, daily_demand=daily_demand)

    if config.final_k is None:
        _status("No final k set; stopping at the elbow curve.", Fore.YELLOW, verbose)
        return result

    _status(f"Assigning zones to k={config.final_k} clusters…", Fore.CYAN, verbose)
    result.assignment = assign_clusters(profiles, config.final_k, config=config.kmeans)
    result.summary = summarize_clusters(profiles, result.assignment)

    _status("Clustering complete.", Fore.GREEN, verbose)
    return result


def write_outputs(
    result: PipelineResult,
    obs_df: pd.DataFrame,
    out_dir: str | Path,
) -> list[Path]:
    """
    Writes:
      zone_hourly_profiles.csv
      elbow_trials.csv
      zone_clusters.csv, cluster_summary.csv, observations_labeled.csv  (if assigned)
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []

    profiles_path = out_dir / "zone_hourly_profiles.csv"
    result.profiles.to_csv(profiles_path, index=True)
    written.append(profiles_path)

    written.append(write_trials_csv(result.trials, out_dir / "elbow_trials.csv"))

    if result.assignment is not None:
        written.append(write_assignment_csv(result.assignment, out_dir / "zone_clusters.csv"))

        summary_path = out_dir / "cluster_summary.csv"
        result.summary.to_csv(summary_path, index=False)
        written.append(summary_path)

        labeled_path = out_dir / "observations_labeled.csv"
        label_observations(obs_df, result.assignment).to_csv(labeled_path, index=False)
        written.append(labeled_path)

    return written
