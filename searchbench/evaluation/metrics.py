"""Evaluation metrics: latency percentiles, QPS, memory usage."""

import numpy as np
import psutil


def latency_stats(elapsed_us: list[int]) -> dict:
    """Summarize a list of per-query latencies.

    Args:
        elapsed_us: Elapsed times in microseconds.

    Returns:
        Dict with keys: n, mean_us, p50_us, p95_us, qps.
    """
    if not elapsed_us:
        return {"n": 0, "mean_us": 0.0, "p50_us": 0.0, "p95_us": 0.0, "qps": 0.0}
    arr = np.asarray(elapsed_us, dtype=np.float64)
    return {
        "n": int(arr.size),
        "mean_us": float(np.mean(arr)),
        "p50_us": float(np.percentile(arr, 50)),
        "p95_us": float(np.percentile(arr, 95)),
        "qps": queries_per_second(int(arr.size), float(np.sum(arr)) / 1_000_000),
    }


def queries_per_second(n_queries: int, elapsed_seconds: float) -> float:
    """Compute queries per second.

    Args:
        n_queries: Number of queries processed.
        elapsed_seconds: Wall-clock time in seconds.

    Returns:
        QPS value.
    """
    if elapsed_seconds <= 0:
        return float("inf")
    return n_queries / elapsed_seconds


def memory_usage_bytes() -> int:
    """Return current process RSS memory in bytes."""
    return psutil.Process().memory_info().rss
