"""Request latency instrumentation.

Timing context manager per operation (translate, translate_image, sync_pull,
sync_push) and a percentile snapshot used by the verbose health check.
"""
import time
from collections import defaultdict, deque
from contextlib import contextmanager

_MAX_SAMPLES = 1000

_timings_ms: dict[str, deque] = defaultdict(lambda: deque(maxlen=_MAX_SAMPLES))


@contextmanager
def record_latency(operation: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        _timings_ms[operation].append(elapsed_ms)


def _stats(samples) -> dict:
    if not samples:
        return {"count": 0, "p95_ms": None, "p99_ms": None}
    sorted_vals = sorted(samples)
    count = len(sorted_vals)

    def _percentile(p: float) -> float:
        idx = int(round(p * (count - 1)))
        return sorted_vals[idx]
    return {
        "count": count,
        "p95_ms": _percentile(0.95),
        "p99_ms": _percentile(0.99),
    }


def snapshot_latency_stats() -> dict:
    return {operation: _stats(samples) for operation, samples in sorted(_timings_ms.items())}


def reset_latency_stats() -> None:
    _timings_ms.clear()
