from __future__ import annotations
from bisect import bisect_right
from typing import Sequence, Tuple, Union
import math

from ..easing import EasingKind, ease
from ..utils import clamp
from .config import cfg
from .telemetry import TemporalSample, Trajectory

SEGMENT_EPSILON_MS: float = getattr(cfg, "SEGMENT_EPSILON_MS", 1e-3)

TrajectoryLike = Union[Trajectory, Sequence[TemporalSample]]


def clamp_point_to_frame(
    x: float, y: float, frame_width: float, frame_height: float
) -> Tuple[float, float]:
    """Clamp a point (x,y) into [0,frame_width]×[0,frame_height]."""
    return clamp(x, 0.0, frame_width), clamp(y, 0.0, frame_height)


def catmull_rom(p0: float, p1: float, p2: float, p3: float, u: float) -> float:
    """Uniform Catmull-Rom basis; passes through p1 at u=0 and p2 at u=1."""
    u2 = u * u
    u3 = u2 * u
    return 0.5 * (
        2.0 * p1
        + (-p0 + p2) * u
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * u2
        + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * u3
    )


class CatmullRomPath:
    """Continuous position function over a recorded trajectory.

    Each segment between two consecutive samples is a Catmull-Rom cubic whose
    local parameter is run through easeInOutCubic, so the cursor accelerates
    out of and decelerates into every recorded sample instead of moving at a
    constant mechanical speed between bursty pointer events.

    The sample times are indexed once; position_at() is then O(log n).
    """

    def __init__(self, trajectory: TrajectoryLike):
        samples = getattr(trajectory, "samples", trajectory)
        self.samples: Tuple[TemporalSample, ...] = tuple(samples)
        self._times = [s.t for s in self.samples]

    def __len__(self) -> int:
        return len(self.samples)

    def _segment_index(self, t: float) -> int:
        """Index i of p1 such that samples[i].t <= t < samples[i+1].t."""
        i = bisect_right(self._times, t) - 1
        return int(clamp(i, 0, len(self.samples) - 2))

    def position_at(self, t: float) -> Tuple[float, float]:
        """Return the interpolated (x, y) at t milliseconds.

        Never raises: queries before the first or after the last sample
        degrade to the boundary positions, and a non-finite t is treated as
        the nearest boundary (NaN as the start).
        """
        samples = self.samples
        if not samples:
            return 0.0, 0.0
        if len(samples) == 1:
            return samples[0].x, samples[0].y

        if not math.isfinite(t):
            t = self._times[-1] if t > 0 else self._times[0]

        i = self._segment_index(t)
        last = len(samples) - 1
        p0 = samples[max(0, i - 1)]
        p1 = samples[i]
        p2 = samples[min(last, i + 1)]
        p3 = samples[min(last, i + 2)]

        span = max(p2.t - p1.t, SEGMENT_EPSILON_MS)
        u = clamp((t - p1.t) / span, 0.0, 1.0)
        u = ease(EasingKind.EASE_IN_OUT_CUBIC, u)

        return (
            catmull_rom(p0.x, p1.x, p2.x, p3.x, u),
            catmull_rom(p0.y, p1.y, p2.y, p3.y, u),
        )


def position_at(trajectory: TrajectoryLike, t: float) -> Tuple[float, float]:
    """One-off position lookup; build a CatmullRomPath for repeated queries."""
    return CatmullRomPath(trajectory).position_at(t)
