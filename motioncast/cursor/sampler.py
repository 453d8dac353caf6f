from __future__ import annotations
from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import math

from ..utils import require_positive
from .config import cfg
from .geometry import CatmullRomPath
from .telemetry import ClickEvent, Trajectory

CLICK_TOLERANCE_MS: float = getattr(cfg, "CLICK_TOLERANCE_MS", 100.0)


@dataclass(frozen=True)
class Frame:
    """Cursor state at one output frame.

    Attributes:
        index (int): Frame number, starting at 0.
        time_ms (float): Render time of the frame in milliseconds.
        x (float): Interpolated X coordinate.
        y (float): Interpolated Y coordinate.
        is_click_nearby (bool): A click lies within the click tolerance window.
        velocity_px_per_sec (float): Distance from the previous frame per second.
    """

    index: int
    time_ms: float
    x: float
    y: float
    is_click_nearby: bool
    velocity_px_per_sec: float


def _click_near(click_times: List[float], t: float, tolerance_ms: float) -> bool:
    """True if some click time lies strictly within tolerance_ms of t."""
    i = bisect_left(click_times, t)
    for j in (i - 1, i):
        if 0 <= j < len(click_times) and abs(click_times[j] - t) < tolerance_ms:
            return True
    return False


def frame_count_for(duration_ms: float, fps: float) -> int:
    """Number of frame intervals needed to cover duration_ms at fps."""
    # tolerance keeps 0.1 s * 30 fps from rounding up to 4 intervals
    return max(0, int(math.ceil(duration_ms * fps / 1000.0 - 1e-9)))


def sample_frames(
    trajectory: Trajectory,
    fps: float,
    clicks: Optional[Sequence[ClickEvent]] = None,
) -> List[Frame]:
    """Discretize the interpolated trajectory at the target frame rate.

    Frames are placed every 1000/fps ms starting at 0. The last frame is
    clamped onto the recorded end time, so the sampled motion always ends at
    the final captured position instead of one frame short of it.

    Args:
        trajectory (Trajectory): Validated capture log.
        fps (float): Output frame rate; must be positive.
        clicks (Sequence[ClickEvent] | None): Clicks to test proximity against;
            defaults to the trajectory's own clicks.

    Returns:
        List[Frame]: One frame per output time; empty for an empty trajectory.
    """
    fps = require_positive(fps, "fps")
    if not trajectory.samples:
        return []
    if clicks is None:
        clicks = trajectory.clicks

    path = CatmullRomPath(trajectory)
    click_times = sorted(float(c.t) for c in clicks)
    duration_ms = trajectory.duration_ms
    frame_interval_ms = 1000.0 / fps
    count = frame_count_for(duration_ms, fps)

    frames: List[Frame] = []
    for i in range(count + 1):
        time_ms = min(i * frame_interval_ms, duration_ms)
        x, y = path.position_at(time_ms)
        velocity = 0.0
        if frames:
            prev = frames[-1]
            dt_s = (time_ms - prev.time_ms) / 1000.0
            if dt_s > 0:
                velocity = math.hypot(x - prev.x, y - prev.y) / dt_s
        frames.append(
            Frame(
                index=i,
                time_ms=time_ms,
                x=x,
                y=y,
                is_click_nearby=_click_near(click_times, time_ms, CLICK_TOLERANCE_MS),
                velocity_px_per_sec=velocity,
            )
        )

    logging.getLogger(__name__).debug(
        "Sampled %d frames at %.2f fps over %.0f ms", len(frames), fps, duration_ms
    )
    return frames
