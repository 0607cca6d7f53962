import math
from collections import Counter

from ...state_estimator import KalmanFilter
from ...state_buffer import MotionHistory
from ...logger import get_logger, log_sample
from ..models import Point, MotionSample, MotionAnalysis, ORIGIN, INSUFFICIENT_DATA

# Counter-clockwise from angle 0, one label per pi/4 sector
DIRECTIONS = ["east", "northeast", "north", "northwest",
              "west", "southwest", "south", "southeast"]

LINEAR_ACCEL_LIMIT = 0.1
OSCILLATION_MIN_CHANGES = 2
CIRCULAR_MIN_TURN = 1.5 * math.pi

def direction_label(angle):
    """Quantize an atan2 angle (radians) to one of 8 compass labels."""
    # floor(v + 0.5) rounds half-sectors up, as Math.round does
    index = math.floor(angle * 4 / math.pi + 0.5) % 8
    return DIRECTIONS[index]

def dominant_direction(labels):
    """Most frequent label; ties go to the label seen first."""
    if not labels:
        return "none"
    return Counter(labels).most_common(1)[0][0]

def _sign(v):
    return (v > 0) - (v < 0)

def count_sign_changes(velocities):
    changes = 0
    for prev, curr in zip(velocities, velocities[1:]):
        if _sign(curr.x) != _sign(prev.x) or _sign(curr.y) != _sign(prev.y):
            changes += 1
    return changes

def turning_angle_sum(velocities):
    """Sum of atan2 headings of successive velocity differences."""
    total = 0.0
    for prev, curr in zip(velocities, velocities[1:]):
        total += math.atan2(curr.y - prev.y, curr.x - prev.x)
    return total

def _resolve(explicit, section, key, default):
    if explicit is not None:
        return explicit
    return section.get(key, default)

class MotionAnalyzer:
    """
    Single-target motion tracking and pattern classification.
    Inputs: Raw (x, y) positions in pixels, timestamps in milliseconds.
    Outputs: Filtered MotionSamples and a MotionAnalysis over the recent window.

    Settings resolve in order: explicit keyword argument, then the matching
    `config` section ("kalman", "history", "analysis"), then the built-in default.
    `config` may be a raw tuning dict or a loaded Config.
    """
    def __init__(self, history_size=None, process_noise=None, measurement_noise=None,
                 moving_threshold=None, config=None):
        self.config = getattr(config, "tuning", config) or {}

        kf_cfg = self.config.get("kalman", {})
        self.process_noise = float(_resolve(process_noise, kf_cfg, "process_noise", 0.1))
        self.measurement_noise = float(_resolve(measurement_noise, kf_cfg, "measurement_noise", 1.0))
        # JSON may carry 10.0; deque needs an int
        self.history_size = int(_resolve(history_size, self.config.get("history", {}), "size", 10))
        self.moving_threshold = float(_resolve(
            moving_threshold, self.config.get("analysis", {}), "moving_threshold", 0.5
        ))

        self.logger = get_logger(self.__class__.__name__)

        # Components
        self.kf = KalmanFilter(
            process_noise=self.process_noise,
            measurement_noise=self.measurement_noise
        )
        self._history = MotionHistory(maxlen=self.history_size)

        # State
        self.last_timestamp = None
        self.last_position = None
        self.last_velocity = None
        self.rejected_samples = 0

    @property
    def estimator(self):
        return self.kf

    @property
    def history(self):
        return self._history.snapshot()

    @property
    def latest(self):
        return self._history.latest()

    def reset(self):
        """Reset all internal state to start fresh."""
        self.kf.reset()
        self._history.clear()
        self.last_timestamp = None
        self.last_position = None
        self.last_velocity = None
        self.rejected_samples = 0
        self.logger.info("TrackerReset")

    def track(self, position, timestamp):
        """
        Feed one observed position.

        Args:
            position: Point, (x, y) pair or {"x", "y"} mapping, in pixels.
            timestamp: Capture time in milliseconds, non-decreasing across calls.

        Returns:
            MotionSample: The recorded sample. A rejected sample (non-finite
            input or non-increasing timestamp) returns the latest recorded one.
        """
        position = Point.from_any(position)
        timestamp = float(timestamp)

        if not (math.isfinite(position.x) and math.isfinite(position.y) and math.isfinite(timestamp)):
            return self._reject("NonFiniteSample", {
                "x": position.x, "y": position.y, "timestamp": timestamp
            })

        # 1. Bootstrap: first sample seeds the filter, no predict/update
        if self.last_timestamp is None:
            self.kf.reset(position.x, position.y)
            sample = MotionSample(
                position=position,
                velocity=ORIGIN,
                acceleration=ORIGIN,
                timestamp=timestamp
            )
            self._history.append(sample)
            self.last_timestamp = timestamp
            self.last_position = position
            log_sample(self.logger, "TrackingStarted", sample)
            return sample

        dt = (timestamp - self.last_timestamp) / 1000.0
        if dt <= 0:
            return self._reject("NonIncreasingTimestamp", {
                "timestamp": timestamp, "last_timestamp": self.last_timestamp
            })

        # 2. State Estimation
        # The sample carries the prediction; the measurement then corrects the filter
        est = self.kf.predict(dt)
        self.kf.update(position)

        # 3. Raw kinematics (finite differences)
        velocity = Point(
            (position.x - self.last_position.x) / dt,
            (position.y - self.last_position.y) / dt
        )
        if self.last_velocity is None:
            # No measured velocity before this one
            acceleration = ORIGIN
        else:
            acceleration = Point(
                (velocity.x - self.last_velocity.x) / dt,
                (velocity.y - self.last_velocity.y) / dt
            )

        sample = MotionSample(
            position=Point(est["x"], est["y"]),
            velocity=Point(est["dx"], est["dy"]),
            acceleration=acceleration,
            timestamp=timestamp
        )
        self._history.append(sample)

        self.last_timestamp = timestamp
        self.last_position = position
        self.last_velocity = velocity

        log_sample(self.logger, "MotionTracked", sample, dt=dt, raw_velocity=velocity)
        return sample

    def _reject(self, event, data):
        self.rejected_samples += 1
        self.logger.warning(event, data)
        return self._history.latest()

    def analyze_motion(self):
        """Summarize speed, heading and motion pattern over the history window."""
        if len(self._history) < 2:
            return INSUFFICIENT_DATA

        velocities = self._history.velocities()
        speeds = [v.norm for v in velocities]
        average_speed = sum(speeds) / len(speeds)

        labels = [direction_label(math.atan2(v.y, v.x)) for v in velocities]

        return MotionAnalysis(
            average_speed=average_speed,
            max_speed=max(speeds),
            is_moving=average_speed > self.moving_threshold,
            dominant_direction=dominant_direction(labels),
            motion_pattern=self.detect_motion_pattern()
        )

    def detect_motion_pattern(self):
        if len(self._history) < 3:
            return "insufficient data"

        accelerations = self._history.accelerations()
        if all(abs(a.x) < LINEAR_ACCEL_LIMIT and abs(a.y) < LINEAR_ACCEL_LIMIT for a in accelerations):
            return "linear"

        velocities = self._history.velocities()
        if count_sign_changes(velocities) >= OSCILLATION_MIN_CHANGES:
            return "oscillating"

        if abs(turning_angle_sum(velocities)) > CIRCULAR_MIN_TURN:
            return "circular"

        return "complex"
