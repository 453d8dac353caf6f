from __future__ import annotations


class cfg:
    """Cursor pipeline tuning (sampling, keyframing, expression output)"""

    # --- Sampling ---
    DEFAULT_FPS = 60
    CLICK_TOLERANCE_MS = 100.0  # click counts as "nearby" inside this window
    SEGMENT_EPSILON_MS = 1e-3  # floor for zero-length spline segments

    # --- Keyframe reduction ---
    KEYFRAME_DENSITY_PER_S = 2.0  # keyframes per second of recording

    # --- Expression output ---
    TIME_DECIMALS = 3  # seconds, millisecond resolution
    COORD_DECIMALS = 2  # pixels
    MAX_EXPRESSION_CHARS = 60000  # warn past this length

    # -------------------------------------------------------------------
    # Cursor appearance (icon geometry + hotspot)
    # -------------------------------------------------------------------
    CURSOR_SIZE = 32
    CURSOR_COLOR = "#000000"
    CURSOR_OUTLINE_COLOR = "#FFFFFF"
    CURSOR_OUTLINE_WIDTH = 2
    SHADOW_BLUR = 6
    SHADOW_OPACITY = 0.4
    CLICK_SCALE = 0.85
    GLOW_EXTRA_PX = 10

    # --- Preview render (velocity colouring) ---
    MIN_SPEED_PX_PER_S = 70.0
    MAX_SPEED_PX_PER_S = 750.0
