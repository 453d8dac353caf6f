from __future__ import annotations
from dataclasses import dataclass
from typing import List
import math

from .telemetry import Trajectory


@dataclass(frozen=True)
class TrajectoryStats:
    total_positions: int = 0
    duration_ms: float = 0.0
    avg_velocity: float = 0.0  # px/s
    max_velocity: float = 0.0  # px/s
    total_distance: float = 0.0  # px
    click_count: int = 0


def _sample_speeds(trajectory: Trajectory) -> List[float]:
    """Per-step speed in px/s, with a 1 ms floor on dt for duplicate timestamps."""
    samples = trajectory.samples
    speeds: List[float] = []
    for i in range(1, len(samples)):
        prev, cur = samples[i - 1], samples[i]
        dt_ms = max(1.0, cur.t - prev.t)
        speeds.append(math.hypot(cur.x - prev.x, cur.y - prev.y) / dt_ms * 1000.0)
    return speeds


def analyze_trajectory(trajectory: Trajectory) -> TrajectoryStats:
    """Aggregate movement statistics for a captured trajectory."""
    samples = trajectory.samples
    if not samples:
        return TrajectoryStats(click_count=len(trajectory.clicks))

    total_distance = sum(
        math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(samples, samples[1:])
    )
    speeds = _sample_speeds(trajectory)
    return TrajectoryStats(
        total_positions=len(samples),
        duration_ms=samples[-1].t - samples[0].t,
        avg_velocity=sum(speeds) / len(speeds) if speeds else 0.0,
        max_velocity=max(speeds) if speeds else 0.0,
        total_distance=total_distance,
        click_count=len(trajectory.clicks),
    )


def summarize_speeds(trajectory: Trajectory) -> str:
    """Summarize instantaneous movement speeds between recorded samples.

    Reports average, p95, max and sample count in px/s.
    """
    speeds = _sample_speeds(trajectory)
    if not speeds:
        return "No move data"
    speeds_sorted = sorted(speeds)
    n = len(speeds_sorted)
    average = sum(speeds) / n
    p95 = speeds_sorted[max(0, int(math.ceil(0.95 * n)) - 1)]
    return (
        f"speed px/s: avg={average:.1f}, p95={p95:.1f}, "
        f"max={speeds_sorted[-1]:.1f}, samples={n}"
    )
