from __future__ import annotations

import statistics
import threading
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


def latency_stats(durations: Iterable[float]) -> Dict[str, float]:
    """Count, min, median, 95th percentile and max of ``durations`` (seconds)."""
    vals = sorted(durations)
    if not vals:
        nan = float("nan")
        return {"count": 0, "min": nan, "median": nan, "p95": nan, "max": nan}
    if len(vals) == 1:
        p95 = vals[0]
    else:
        # 19 cut points split the range into twentieths; the last one is p95
        p95 = statistics.quantiles(vals, n=20, method="inclusive")[-1]
    return {
        "count": len(vals),
        "min": vals[0],
        "median": statistics.median(vals),
        "p95": p95,
        "max": vals[-1],
    }


@dataclass
class Metrics:
    lock: threading.Lock = field(default_factory=threading.Lock)

    requests_total: int = 0
    requests_succeeded: int = 0
    requests_failed: int = 0
    requests_cancelled: int = 0
    bytes_received: int = 0

    # stage -> list of durations
    stage_durations: Dict[str, List[float]] = field(
        default_factory=lambda: defaultdict(list))

    # exception class name -> count
    errors_by_type: Counter[str] = field(default_factory=Counter)

    def inc(self, attr: str, value: int = 1) -> None:
        with self.lock:
            setattr(self, attr, getattr(self, attr) + value)

    def add_bytes(self, n: int) -> None:
        with self.lock:
            self.bytes_received += n

    def observe_stage(self, stage: str, duration: float) -> None:
        with self.lock:
            self.stage_durations[stage].append(duration)

    def record_error(self, exc: BaseException) -> None:
        with self.lock:
            self.errors_by_type[type(exc).__name__] += 1

    def summary(self) -> Tuple[str, Dict]:
        with self.lock:
            res = {
                "requests_total": self.requests_total,
                "requests_succeeded": self.requests_succeeded,
                "requests_failed": self.requests_failed,
                "requests_cancelled": self.requests_cancelled,
                "bytes_received": self.bytes_received,
                "stage_stats": {
                    stage: latency_stats(durations)
                    for stage, durations in self.stage_durations.items()
                },
                "errors_by_type": dict(self.errors_by_type),
            }

        lines = ["===== FETCH SUMMARY ====="]
        lines.append(
            f"Requests : total={res['requests_total']}  ok={res['requests_succeeded']}  "
            f"fail={res['requests_failed']}  cancelled={res['requests_cancelled']}")
        lines.append(f"Received : {res['bytes_received'] / 1024:.1f} KiB")
        for stage, stats in res["stage_stats"].items():
            lines.append(
                f"  {stage:10s} count={stats['count']:5d}  "
                f"min={stats['min']:.4f}  median={stats['median']:.4f}  "
                f"p95={stats['p95']:.4f}  max={stats['max']:.4f}"
            )
        if res["errors_by_type"]:
            lines.append("Errors by type:")
            for name, count in sorted(res["errors_by_type"].items(), key=lambda kv: kv[1], reverse=True):
                lines.append(f"  {name}: {count}")

        return "\n".join(lines), res
