"""
K-means clustering of RGB samples into a weighted palette.

Lloyd's algorithm with random-sample initialization, squared Euclidean RGB
distance and reinitialization of starved clusters. Randomness comes from an
injected ``rand_index`` callable so tests can replay a fixed sequence.
"""

from typing import Callable, List, NamedTuple, Optional, Sequence

import numpy as np
from loguru import logger

from .palette import PaletteEntry
from .sampler import NoSamplesError

DEFAULT_MAX_ITER = 12

# rand_index(n) -> uniform int in [0, n)
RandomIndex = Callable[[int], int]


class ClusteringResult(NamedTuple):
    """Palette plus convergence diagnostics."""
    entries: List[PaletteEntry]
    iterations: int
    converged: bool


def default_random_index(seed: Optional[int] = None) -> RandomIndex:
    """Random index source backed by numpy's default generator."""
    rng = np.random.default_rng(seed)

    def rand_index(n: int) -> int:
        return int(rng.integers(n))

    return rand_index


def _draw(rand_index: RandomIndex, n: int) -> int:
    idx = rand_index(n)
    if not 0 <= idx < n:
        raise ValueError(f"Random index {idx} out of range [0, {n})")
    return idx


def init_centroids(samples: np.ndarray, k: int, rand_index: RandomIndex) -> np.ndarray:
    """
    Pick ``k`` starting centroids from the samples.

    Distinct sample positions are drawn until ``min(k, n)`` are taken; any
    remaining slots are filled with draws that may repeat a position.
    """
    n = samples.shape[0]
    picked: List[int] = []
    used = set()

    while len(picked) < min(k, n):
        idx = _draw(rand_index, n)
        if idx in used:
            continue
        used.add(idx)
        picked.append(idx)

    while len(picked) < k:
        picked.append(_draw(rand_index, n))

    return samples[picked].astype(np.int64)


def assign_nearest(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid for every sample.

    Distance is squared Euclidean over R, G, B. On ties the lowest centroid
    index wins.
    """
    diffs = samples[:, None, :].astype(np.int64) - centroids[None, :, :].astype(np.int64)
    dist2 = np.einsum("nkc,nkc->nk", diffs, diffs)
    # argmin returns the first minimum
    return np.argmin(dist2, axis=1)


def update_centroids(samples: np.ndarray, assignments: np.ndarray,
                     centroids: np.ndarray, rand_index: RandomIndex) -> np.ndarray:
    """
    Move every centroid to the rounded mean of its members, in place.

    Starved centroids are reset to a random sample, visiting them in index
    order.

    Returns:
        Member count per centroid before the update
    """
    n = samples.shape[0]
    k = centroids.shape[0]
    counts = np.bincount(assignments, minlength=k)

    for c in range(k):
        count = int(counts[c])
        if count == 0:
            centroids[c] = samples[_draw(rand_index, n)]
            logger.debug(f"Reinitialized starved centroid {c} to {centroids[c].tolist()}")
        else:
            sums = samples[assignments == c].sum(axis=0, dtype=np.int64)
            # Round half up in integer arithmetic
            centroids[c] = (2 * sums + count) // (2 * count)

    return counts


def cluster_palette(samples: Sequence, k: int, max_iter: int = DEFAULT_MAX_ITER,
                    rand_index: Optional[RandomIndex] = None) -> ClusteringResult:
    """
    Cluster samples into ``k`` colors.

    Args:
        samples: RGB samples, (N, 3) array or sequence of triples
        k: Number of clusters (>= 1)
        max_iter: Iteration budget (>= 1)
        rand_index: Source of uniform indices; numpy-backed when omitted

    Returns:
        ClusteringResult whose entries are sorted by count, descending, with
        ties in centroid index order

    Raises:
        NoSamplesError: If ``samples`` is empty
        ValueError: If ``k`` or ``max_iter`` is below 1, or ``samples`` is not
            (N, 3) or a flat run of RGB triples
    """
    data = np.asarray(samples, dtype=np.int64)
    if data.ndim == 1:
        # Flat buffer of packed RGB triples
        if data.size % 3:
            raise ValueError(f"Flat samples must hold whole RGB triples, got {data.size} values")
        data = data.reshape(-1, 3)
    if data.ndim != 2 or data.shape[1] != 3:
        raise ValueError(f"samples must have shape (N, 3), got {data.shape}")
    n = data.shape[0]

    if n == 0:
        raise NoSamplesError("Cannot cluster an empty sample set")
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")

    if rand_index is None:
        rand_index = default_random_index()

    logger.debug(f"Starting k-means with k={k}, {n} samples, max_iter={max_iter}")

    centroids = init_centroids(data, k, rand_index)
    assignments = np.full(n, -1, dtype=np.int64)
    converged = False
    iterations = 0

    for iterations in range(1, max_iter + 1):
        labels = assign_nearest(data, centroids)
        changed = bool(np.any(labels != assignments))
        assignments = labels

        if not changed:
            converged = True
            break

        update_centroids(data, assignments, centroids, rand_index)

    counts = np.bincount(assignments, minlength=k)
    order = sorted(range(k), key=lambda i: -counts[i])

    entries = [
        PaletteEntry(color=tuple(int(v) for v in centroids[i]), count=int(counts[i]))
        for i in order
    ]

    if converged:
        logger.debug(f"k-means converged after {iterations} iterations")
    else:
        logger.debug(f"k-means stopped at iteration budget ({max_iter}) without converging")

    return ClusteringResult(entries=entries, iterations=iterations, converged=converged)


def kmeans(samples: Sequence, k: int, max_iter: int = DEFAULT_MAX_ITER,
           rand_index: Optional[RandomIndex] = None) -> List[PaletteEntry]:
    """Cluster samples and return only the ordered palette."""
    return cluster_palette(samples, k, max_iter=max_iter, rand_index=rand_index).entries
