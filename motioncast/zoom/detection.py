from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence
import math

from ..cursor.telemetry import TemporalSample, Trajectory
from .config import zcfg
from .timeline import FocusPoint


@dataclass(frozen=True)
class HoverPause:
    """Stretch of time where the cursor lingered inside a small radius."""

    x: float
    y: float
    time: float  # ms, start of the pause
    duration: float  # ms


def detect_hover_pauses(
    samples: Sequence[TemporalSample],
    min_duration_ms: float = zcfg.HOVER_MIN_DURATION_MS,
    max_radius_px: float = zcfg.HOVER_MAX_RADIUS_PX,
) -> List[HoverPause]:
    """Find runs of samples that stay within max_radius_px of the run's first
    sample for at least min_duration_ms. Each run becomes one pause at its
    centroid; scanning resumes after the run."""
    pauses: List[HoverPause] = []
    n = len(samples)
    i = 0
    while i < n:
        anchor = samples[i]
        j = i
        while (
            j + 1 < n
            and math.hypot(samples[j + 1].x - anchor.x, samples[j + 1].y - anchor.y)
            <= max_radius_px
        ):
            j += 1
        duration = samples[j].t - anchor.t
        if j > i and duration >= min_duration_ms:
            run = samples[i : j + 1]
            pauses.append(
                HoverPause(
                    x=sum(s.x for s in run) / len(run),
                    y=sum(s.y for s in run) / len(run),
                    time=anchor.t,
                    duration=duration,
                )
            )
            i = j + 1
        else:
            i += 1
    return pauses


def detect_focus_points(trajectory: Trajectory) -> List[FocusPoint]:
    """Clicks (high importance) and hover pauses (medium), ordered by time.

    Hover detection needs at least two samples; clicks are always kept.
    """
    points = [
        FocusPoint(x=c.x, y=c.y, time=c.t, importance="high", reason="click")
        for c in trajectory.clicks
    ]
    if len(trajectory.samples) >= 2:
        points.extend(
            FocusPoint(
                x=p.x,
                y=p.y,
                time=p.time,
                importance="medium",
                duration=p.duration,
                reason="hover",
            )
            for p in detect_hover_pauses(trajectory.samples)
        )
    points.sort(key=lambda p: p.time)
    return points
