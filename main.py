# main.py

from __future__ import annotations

import argparse
from pathlib import Path

from colorama import Fore, Style, just_fix_windows_console

from taxiprofiles.config import (
    DEFAULT_INPUT,
    DEFAULT_OUT_DIR,
    K_MAX,
    K_MIN,
    MAX_ITER,
    N_INIT,
    SEED,
    KMeansConfig,
    PipelineConfig,
)
from taxiprofiles.errors import InvalidInput
from taxiprofiles.pipeline import run_pipeline, write_outputs
from taxiprofiles.util.load_pickups import load_pickups_csv, load_zone_lookup_csv
from taxiprofiles.viz.app.report import build_report_html, serve_report


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Cluster taxi zones by their mean hourly pickup profile."
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=DEFAULT_INPUT,
        help="Pickups CSV (zone, date, hour, pickups) or raw trips (zone, pickup_datetime).",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=DEFAULT_OUT_DIR,
        help="Directory for output CSVs and report.html.",
    )
    parser.add_argument("--k-min", type=int, default=K_MIN, help="Smallest k to scan.")
    parser.add_argument("--k-max", type=int, default=K_MAX, help="Largest k to scan.")
    parser.add_argument(
        "--k",
        type=int,
        default=None,
        help="Final cluster count. Omit to only produce the elbow curve.",
    )
    parser.add_argument("--seed", type=int, default=SEED, help="k-means random seed.")
    parser.add_argument("--n-init", type=int, default=N_INIT, help="k-means restarts per k.")
    parser.add_argument("--max-iter", type=int, default=MAX_ITER, help="Lloyd iterations per restart.")
    parser.add_argument(
        "--zones",
        type=Path,
        default=None,
        help="Optional zone lookup CSV (zone, lat, lon) for the map.",
    )
    parser.add_argument("--serve", action="store_true", help="Serve the report after running.")
    parser.add_argument("--port", type=int, default=8090)
    return parser.parse_args(argv)


def main(argv=None):
    just_fix_windows_console()
    args = parse_args(argv)

    config = PipelineConfig(
        k_min=args.k_min,
        k_max=args.k_max,
        final_k=args.k,
        kmeans=KMeansConfig(seed=args.seed, n_init=args.n_init, max_iter=args.max_iter),
        input_path=args.input,
        out_dir=args.out_dir,
        zones_path=args.zones,
    )

    print(f"{Fore.CYAN}Loading {config.input_path}…{Style.RESET_ALL}")
    try:
        obs = load_pickups_csv(config.input_path)
        zones = load_zone_lookup_csv(config.zones_path) if config.zones_path else None
        result = run_pipeline(obs, config)
    except InvalidInput as e:
        print(f"{Fore.RED}Invalid input: {e}{Style.RESET_ALL}")
        raise

    print("\nElbow curve:")
    for t in result.trials:
        print(f"  k={t.k:2d}  wss={t.wss:12.3f}")

    if result.summary is not None:
        print("\nCluster summary:")
        print(result.summary.to_string(index=False))

    for path in write_outputs(result, obs, config.out_dir):
        print(f"Wrote: {path}")

    report_path = Path(config.out_dir) / "report.html"
    report_path.write_text(
        build_report_html(result, zones_df=zones, theme=config.theme),
        encoding="utf-8",
    )
    print(f"Wrote: {report_path}")

    if args.serve:
        serve_report(result, zones_df=zones, theme=config.theme, port=args.port)


if __name__ == "__main__":
    main()
