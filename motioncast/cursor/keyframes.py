from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import math

from ..easing import EasingKind
from ..utils import require_positive
from .config import cfg
from .sampler import Frame


@dataclass(frozen=True)
class Keyframe:
    """Sparse anchor of a piecewise animation curve.

    Cursor keyframes leave zoom unset; zoom timelines fill it in.
    """

    time: float  # ms
    x: float
    y: float
    easing: EasingKind = EasingKind.LINEAR
    zoom: Optional[float] = None


def keyframe_stride(fps: float, target_density_per_second: float) -> int:
    """Frames to skip between keyframes for the requested density."""
    return max(1, int(math.floor(fps / target_density_per_second)))


def reduce_frames(
    frames: Sequence[Frame],
    fps: float,
    target_density_per_second: float = cfg.KEYFRAME_DENSITY_PER_S,
) -> List[Keyframe]:
    """Downsample dense frames into a bounded keyframe set.

    Every N-th frame is kept, N = max(1, floor(fps / density)), and the true
    final frame is always appended even when it falls off-stride, so compiled
    motion lands on the recorded endpoint. The result grows with duration and
    density only, not with fps.

    Fewer than two keyframes means the caller should emit a static position.
    """
    fps = require_positive(fps, "fps")
    density = require_positive(target_density_per_second, "target_density_per_second")
    if not frames:
        return []

    stride = keyframe_stride(fps, density)
    picked = list(frames[::stride])
    if picked[-1] is not frames[-1]:
        picked.append(frames[-1])

    keyframes = [Keyframe(time=f.time_ms, x=f.x, y=f.y) for f in picked]
    logging.getLogger(__name__).debug(
        "Reduced %d frames to %d keyframes (stride %d)",
        len(frames),
        len(keyframes),
        stride,
    )
    return keyframes
