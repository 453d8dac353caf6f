from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from ..errors import InvalidInputError
from ..utils import require_finite


@dataclass(frozen=True)
class TemporalSample:
    """One captured pointer position.

    Attributes:
        x (float): X pixel coordinate in the recorded viewport.
        y (float): Y pixel coordinate in the recorded viewport.
        t (float): Milliseconds since the capture session started.
    """

    x: float
    y: float
    t: float  # ms since start


@dataclass(frozen=True)
class ClickEvent:
    """A click marker; its time need not coincide with any sample."""

    x: float
    y: float
    t: float  # ms since start


def _sample_from_mapping(raw: Mapping[str, Any], index: int, kind: str):
    try:
        x, y, t = raw["x"], raw["y"], raw["t"]
    except (KeyError, TypeError) as exc:
        raise InvalidInputError(
            f"{kind}[{index}] must have x, y and t (time) fields"
        ) from exc
    return x, y, t


def _coerce_event(raw: Any, index: int, kind: str) -> Tuple[Any, Any, Any]:
    """x, y, t from an event dataclass, a mapping, or an (x, y, t) sequence."""
    if isinstance(raw, (TemporalSample, ClickEvent)):
        return raw.x, raw.y, raw.t
    if isinstance(raw, Mapping):
        return _sample_from_mapping(raw, index, kind)
    try:
        x, y, t = raw
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"{kind}[{index}] must be a sample, a mapping or an (x, y, t) triple, "
            f"got {raw!r}"
        ) from exc
    return x, y, t


@dataclass(frozen=True)
class Trajectory:
    """Immutable, time-ordered capture log: pointer samples plus clicks.

    Validation happens once, here, so downstream stages can trust the data:
      - every coordinate and timestamp is finite,
      - samples are non-decreasing in time (duplicate timestamps are fine).

    Clicks are a companion sequence and may come in any order.
    """

    samples: Tuple[TemporalSample, ...] = ()
    clicks: Tuple[ClickEvent, ...] = ()

    def __post_init__(self) -> None:
        samples: List[TemporalSample] = []
        last_t: Optional[float] = None
        for i, raw in enumerate(self.samples):
            x, y, t = _coerce_event(raw, i, "samples")
            t = require_finite(t, f"samples[{i}].t")
            if last_t is not None and t < last_t:
                raise InvalidInputError(
                    f"samples must be time-ordered: samples[{i}].t={t} < {last_t}"
                )
            last_t = t
            samples.append(
                TemporalSample(
                    require_finite(x, f"samples[{i}].x"),
                    require_finite(y, f"samples[{i}].y"),
                    t,
                )
            )
        clicks: List[ClickEvent] = []
        for i, raw in enumerate(self.clicks):
            x, y, t = _coerce_event(raw, i, "clicks")
            clicks.append(
                ClickEvent(
                    require_finite(x, f"clicks[{i}].x"),
                    require_finite(y, f"clicks[{i}].y"),
                    require_finite(t, f"clicks[{i}].t"),
                )
            )
        object.__setattr__(self, "samples", tuple(samples))
        object.__setattr__(self, "clicks", tuple(clicks))

    @property
    def duration_ms(self) -> float:
        """Time of the last sample (0 for an empty trajectory)."""
        if not self.samples:
            return 0.0
        return max(0.0, float(self.samples[-1].t))

    def __len__(self) -> int:
        return len(self.samples)

    @classmethod
    def from_points(
        cls,
        positions: Iterable[Tuple[float, float, float]],
        clicks: Iterable[Tuple[float, float, float]] = (),
    ) -> "Trajectory":
        """Build from plain (x, y, t_ms) tuples."""
        return cls(
            samples=tuple(TemporalSample(*p) for p in positions),
            clicks=tuple(ClickEvent(*c) for c in clicks),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Trajectory":
        """Build from the capture JSON shape {"positions": [...], "clicks": [...]}."""
        if not isinstance(data, Mapping):
            raise InvalidInputError("cursor data must be a mapping")
        raw_positions = data.get("positions") or []
        raw_clicks = data.get("clicks") or []
        samples = [
            TemporalSample(*_sample_from_mapping(p, i, "positions"))
            for i, p in enumerate(raw_positions)
        ]
        clicks = [
            ClickEvent(*_sample_from_mapping(c, i, "clicks"))
            for i, c in enumerate(raw_clicks)
        ]
        return cls(samples=tuple(samples), clicks=tuple(clicks))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration": self.duration_ms,
            "positions": [{"x": s.x, "y": s.y, "t": s.t} for s in self.samples],
            "clicks": [{"x": c.x, "y": c.y, "t": c.t} for c in self.clicks],
        }


@dataclass
class TrajectoryRecorder:
    """Collects pointer events handed over by the capture layer.

    Responsibilities:
      - Rebases absolute timestamps so the first event of a session is t=0.
      - Keeps moves and clicks in separate lists.
      - Freezes the session into a validated, immutable Trajectory.

    Typical flow:
      recorder = TrajectoryRecorder()
      recorder.log_move(x, y, timestamp_ms)
      recorder.log_click(x, y, timestamp_ms)
      trajectory = recorder.freeze()
    """

    samples: List[TemporalSample] = field(default_factory=list)
    clicks: List[ClickEvent] = field(default_factory=list)
    start_ts: Optional[float] = None

    def _rebase(self, timestamp_ms: float) -> float:
        """Return the timestamp relative to the session's first event."""
        timestamp_ms = require_finite(timestamp_ms, "timestamp_ms")
        if self.start_ts is None:
            self.start_ts = timestamp_ms
        return timestamp_ms - self.start_ts

    def log_move(self, x: float, y: float, timestamp_ms: float) -> None:
        """Append a pointer position."""
        self.samples.append(TemporalSample(x, y, self._rebase(timestamp_ms)))

    def log_click(self, x: float, y: float, timestamp_ms: float) -> None:
        """Append a click marker."""
        self.clicks.append(ClickEvent(x, y, self._rebase(timestamp_ms)))

    def freeze(self) -> Trajectory:
        """Snapshot the session as an immutable Trajectory."""
        trajectory = Trajectory(tuple(self.samples), tuple(self.clicks))
        logging.getLogger(__name__).debug(
            "Froze trajectory: %d samples, %d clicks, %.0f ms",
            len(trajectory.samples),
            len(trajectory.clicks),
            trajectory.duration_ms,
        )
        return trajectory

    def reset(self) -> None:
        """Clear all recorded events and forget the time origin."""
        self.samples.clear()
        self.clicks.clear()
        self.start_ts = None
