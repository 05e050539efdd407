# taxiprofiles/cluster/kmeans.py

from __future__ import annotations

import warnings

import numpy as np
import pandas as pd
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning
from threadpoolctl import threadpool_limits
from tqdm import tqdm

from taxiprofiles.config import KMeansConfig
from taxiprofiles.errors import InvalidInput
from taxiprofiles.types import ClusterTrial, ZoneClusterAssignment


def _profile_matrix(profiles: pd.DataFrame) -> np.ndarray:
    if profiles is None or len(profiles) == 0:
        raise InvalidInput("No zone profiles to cluster")

    X = profiles.to_numpy(dtype=np.float64)
    if not np.isfinite(X).all():
        raise InvalidInput("Zone profiles contain NaN or infinite values")
    return X


def check_cluster_count(k: int, n_zones: int, name: str = "k") -> None:
    if int(k) != k:
        raise InvalidInput(f"{name} must be an integer, got {k!r}")
    if k < 1:
        raise InvalidInput(f"{name} must be >= 1, got {k}")
    if k > n_zones:
        raise InvalidInput(
            f"{name}={k} exceeds number of zones ({n_zones}); "
            "cannot form more clusters than points"
        )


def _fit(X: np.ndarray, k: int, config: KMeansConfig, init=None) -> KMeans:
    """
    init=None    -> k-means++ with config.n_init seeded restarts
    init=ndarray -> single Lloyd run from the given centers
    """
    if init is None:
        km = KMeans(
            n_clusters=k,
            init="k-means++",
            n_init=config.n_init,
            max_iter=config.max_iter,
            tol=config.tol,
            random_state=config.seed,
        )
    else:
        km = KMeans(
            n_clusters=k,
            init=init,
            n_init=1,
            max_iter=config.max_iter,
            tol=config.tol,
            random_state=config.seed,
        )

    # one OpenMP thread: multi-threaded reductions are not bit-reproducible.
    # duplicate profiles make sklearn warn when k > distinct points
    with threadpool_limits(limits=1, user_api="openmp"), warnings.catch_warnings():
        warnings.simplefilter("ignore", ConvergenceWarning)
        km.fit(X)

    return km


def _grow_centers(X: np.ndarray, prev: KMeans) -> np.ndarray:
    """
    Previous centers plus the point that sits farthest from its own center.
    Starting Lloyd from here can only lower the previous WSS.
    """
    centers = prev.cluster_centers_
    d2 = ((X - centers[prev.labels_]) ** 2).sum(axis=1)
    worst = int(np.argmax(d2))
    return np.vstack([centers, X[worst]])


def _kmeans_path(
    X: np.ndarray,
    k_max: int,
    config: KMeansConfig,
    progress: bool = False,
) -> list[KMeans]:
    """
    Fits k = 1..k_max in order. Each k keeps the better of:
      - the seeded k-means++ fit
      - a Lloyd run started from the (k-1) solution plus its worst-fit point

    so WSS never goes up as k grows. Returns fits indexed by k-1.
    """
    fits: list[KMeans] = []

    ks = range(1, k_max + 1)
    for k in tqdm(ks, desc="Scanning cluster counts", disable=not progress):
        best = _fit(X, k, config)

        if fits:
            grown = _fit(X, k, config, init=_grow_centers(X, fits[-1]))
            if grown.inertia_ < best.inertia_:
                best = grown

        fits.append(best)

    return fits


def _relabel_by_size(labels: np.ndarray, k: int) -> np.ndarray:
    """
    Maps raw sklearn labels 0..k-1 to 1..k, largest cluster first
    (ties broken by the first zone seen in each cluster).
    """
    sizes = np.bincount(labels, minlength=k)
    first_seen = np.full(k, len(labels))
    for i, c in enumerate(labels):
        if first_seen[c] == len(labels):
            first_seen[c] = i

    order = sorted(range(k), key=lambda c: (-sizes[c], first_seen[c]))
    remap = np.empty(k, dtype=int)
    for new, old in enumerate(order, start=1):
        remap[old] = new
    return remap


def select_cluster_counts(
    profiles: pd.DataFrame,
    k_min: int,
    k_max: int,
    config: KMeansConfig | None = None,
    progress: bool = False,
) -> list[ClusterTrial]:
    """
    Elbow scan: one ClusterTrial(k, wss) per k in [k_min, k_max], ordered by k.

    profiles: index=zone, columns=hour buckets (float)

    Does not pick a k. Look at the curve (or use cluster.elbow explicitly).
    """
    config = config or KMeansConfig()

    X = _profile_matrix(profiles)
    check_cluster_count(k_min, len(X), name="k_min")
    check_cluster_count(k_max, len(X), name="k_max")
    if k_max < k_min:
        raise InvalidInput(f"k_max ({k_max}) must be >= k_min ({k_min})")

    fits = _kmeans_path(X, int(k_max), config, progress=progress)

    return [
        ClusterTrial(k=k, wss=float(fits[k - 1].inertia_))
        for k in range(int(k_min), int(k_max) + 1)
    ]


def assign_clusters(
    profiles: pd.DataFrame,
    k: int,
    config: KMeansConfig | None = None,
) -> ZoneClusterAssignment:
    """
    Final fit at the chosen k. Uses the same path as select_cluster_counts, so
    the assignment's WSS equals the trial WSS reported for this k.

    Label numbers carry no meaning beyond partition membership.
    """
    config = config or KMeansConfig()

    X = _profile_matrix(profiles)
    check_cluster_count(k, len(X))
    k = int(k)

    km = _kmeans_path(X, k, config)[-1]

    remap = _relabel_by_size(km.labels_, k)
    labels = pd.Series(
        remap[km.labels_],
        index=profiles.index.copy(),
        name="cluster",
    )

    centroids = pd.DataFrame(
        km.cluster_centers_,
        columns=profiles.columns.copy(),
    )
    centroids.index = remap[np.arange(k)]
    centroids = centroids.sort_index()
    centroids.index.name = "cluster"

    return ZoneClusterAssignment(
        k=k,
        labels=labels,
        centroids=centroids,
        wss=float(km.inertia_),
    )
