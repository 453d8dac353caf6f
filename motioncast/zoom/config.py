from __future__ import annotations
from typing import Dict


class zcfg:
    # Zoom levels (1.0 = full frame)
    MIN_ZOOM = 1.0
    MAX_ZOOM = 2.0
    DEFAULT_ZOOM = 1.3

    # Pulse timing
    ZOOM_DURATION_MS = 800  # transition in / out
    HOLD_DURATION_MS = 1500
    ZOOM_SPEED_MS: Dict[str, int] = {
        "slow": 1200,
        "medium": 800,
        "fast": 400,
    }
    EASING = "easeInOutCubic"

    # Follow camera
    FOLLOW_INTENSITY = 0.5  # 0 = centred camera, 1 = full tracking
    FOLLOW_INTERVAL_MS = 250  # one keyframe per interval
    DEADZONE = 0.2  # fraction of the frame around the camera that never pans
    MAX_PAN_SPEED_PX_S = 1200.0
    ANTICIPATION_MS = 200.0  # look ahead on the cursor path
    FOLLOW_SMOOTHING = 0.3

    # Hover-pause detection ("smart" zoom)
    HOVER_MIN_DURATION_MS = 500.0
    HOVER_MAX_RADIUS_PX = 50.0
