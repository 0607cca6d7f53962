from dataclasses import dataclass, asdict
from typing import Any

@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @classmethod
    def from_any(cls, value: Any) -> "Point":
        """Accepts a Point, an (x, y) pair or a {"x": .., "y": ..} mapping."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value["x"]), float(value["y"]))
        x, y = value
        return cls(float(x), float(y))

    @property
    def norm(self) -> float:
        return (self.x ** 2 + self.y ** 2) ** 0.5

ORIGIN = Point(0.0, 0.0)

@dataclass(frozen=True)
class MotionSample:
    """
    One tracked observation.
    position/velocity come from the filter, acceleration from raw finite differences.
    """
    position: Point
    velocity: Point
    acceleration: Point
    timestamp: float  # milliseconds

@dataclass(frozen=True)
class MotionAnalysis:
    """Aggregate motion summary over the history window."""
    average_speed: float
    max_speed: float
    is_moving: bool
    dominant_direction: str
    motion_pattern: str

    def to_dict(self) -> dict:
        """camelCase keys, as consumed by the overlay/report UI."""
        d = asdict(self)
        return {
            "averageSpeed": d["average_speed"],
            "maxSpeed": d["max_speed"],
            "isMoving": d["is_moving"],
            "dominantDirection": d["dominant_direction"],
            "motionPattern": d["motion_pattern"],
        }

INSUFFICIENT_DATA = MotionAnalysis(
    average_speed=0.0,
    max_speed=0.0,
    is_moving=False,
    dominant_direction="none",
    motion_pattern="insufficient data",
)
