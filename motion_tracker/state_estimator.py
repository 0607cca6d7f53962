import math
import numpy as np

from .core.linalg import (
    vec2, vec4, identity4, diag4, diag2,
    mat4_vec4, mat4_mul, mat4_add, mat4_sub, mat4_symmetrize,
    mat2x4_vec4, mat4_mat4x2, mat2x4_mat4x2, mat4x2_mat2, mat4x2_vec2, mat4x2_mat2x4,
    mat2_add, mat2_det, mat2_inverse,
)
from .core.models import Point
from .logger import get_logger

INITIAL_UNCERTAINTY = 100.0
SINGULAR_DET = 1e-12

class KalmanFilter:
    """
    Constant Velocity Kalman Filter for 2D tracking.
    State: [x, y, dx, dy]
    Measurement: [x, y]
    """
    # Measurement Matrix (We observe x, y)
    H = np.array([
        [1, 0, 0, 0],
        [0, 1, 0, 0]
    ], dtype=np.float64)

    def __init__(self, initial_x=0.0, initial_y=0.0, process_noise=0.1, measurement_noise=1.0):
        if process_noise < 0 or measurement_noise < 0:
            raise ValueError(
                f"noise must be non-negative (process={process_noise}, measurement={measurement_noise})"
            )
        self.process_noise = float(process_noise)
        self.measurement_noise = float(measurement_noise)

        # Measurement Noise Covariance (R)
        self.R = diag2(self.measurement_noise)

        self.logger = get_logger(self.__class__.__name__)
        self.reset(initial_x, initial_y)

    def reset(self, initial_x=0.0, initial_y=0.0):
        """Start over at (initial_x, initial_y), at rest, with high uncertainty."""
        self.x = vec4(initial_x, initial_y, 0.0, 0.0)
        self.P = diag4(INITIAL_UNCERTAINTY)

    @property
    def state(self):
        return self.x.copy()

    @property
    def covariance(self):
        return self.P.copy()

    def estimate(self):
        return {
            "x": float(self.x[0]),
            "y": float(self.x[1]),
            "dx": float(self.x[2]),
            "dy": float(self.x[3]),
        }

    def process_noise_matrix(self, dt):
        """
        Discretized white-noise-acceleration Q for one axis pair.
        """
        q = self.process_noise
        dt2 = dt * dt
        dt3 = dt2 * dt
        dt4 = dt3 * dt
        return np.array([
            [dt4 / 4 * q, 0, dt3 / 2 * q, 0],
            [0, dt4 / 4 * q, 0, dt3 / 2 * q],
            [dt3 / 2 * q, 0, dt2 * q, 0],
            [0, dt3 / 2 * q, 0, dt2 * q]
        ], dtype=np.float64)

    def predict(self, dt):
        """
        Predict state forward by dt seconds.
        """
        if not dt > 0 or not math.isfinite(dt):
            raise ValueError(f"dt must be a positive finite number of seconds, got {dt}")

        # State Transition Matrix (F)
        # x = x + dx*dt
        F = np.array([
            [1, 0, dt, 0],
            [0, 1, 0, dt],
            [0, 0, 1, 0],
            [0, 0, 0, 1]
        ], dtype=np.float64)

        self.x = mat4_vec4(F, self.x)
        self.P = mat4_add(mat4_mul(mat4_mul(F, self.P), F.T), self.process_noise_matrix(dt))

        return self.estimate()

    def update(self, measurement):
        """
        Update with new measurement (x, y).

        Returns False (and leaves the predicted state untouched) when the
        innovation covariance cannot be inverted.
        """
        point = Point.from_any(measurement)
        z = vec2(point.x, point.y)
        Ht = self.H.T

        # Residual Covariance
        PHt = mat4_mat4x2(self.P, Ht)
        S = mat2_add(mat2x4_mat4x2(self.H, PHt), self.R)

        det = mat2_det(S)
        if not math.isfinite(det) or abs(det) <= SINGULAR_DET:
            self.logger.warning("SingularInnovation", {"det": det})
            return False

        # Optimal Kalman Gain
        K = mat4x2_mat2(PHt, mat2_inverse(S, det))

        # Measurement Residual
        y = z - mat2x4_vec4(self.H, self.x)

        self.x = self.x + mat4x2_vec2(K, y)
        self.P = mat4_symmetrize(mat4_mul(mat4_sub(identity4(), mat4x2_mat2x4(K, self.H)), self.P))

        return True
