"""
Fixed-shape linear algebra for the 2D constant-velocity filter.

Every operation names the shapes it accepts and checks them on entry, so a
transposed gain or a column vector passed where a flat vector is expected
fails loudly instead of broadcasting into a wrong answer.

Shapes:
    Vec2   (2,)     Vec4   (4,)
    Mat2   (2, 2)   Mat4   (4, 4)
    Mat2x4 (2, 4)   Mat4x2 (4, 2)
"""
import numpy as np
from numpy.typing import NDArray

Vec2 = NDArray[np.float64]
Vec4 = NDArray[np.float64]
Mat2 = NDArray[np.float64]
Mat4 = NDArray[np.float64]
Mat2x4 = NDArray[np.float64]
Mat4x2 = NDArray[np.float64]

def _expect(arr, shape, name):
    if arr.shape != shape:
        raise ValueError(f"{name}: expected shape {shape}, got {arr.shape}")
    return arr

# Constructors

def vec2(x, y) -> Vec2:
    return np.array([x, y], dtype=np.float64)

def vec4(x, y, vx, vy) -> Vec4:
    return np.array([x, y, vx, vy], dtype=np.float64)

def identity4() -> Mat4:
    return np.eye(4, dtype=np.float64)

def diag4(value) -> Mat4:
    return np.eye(4, dtype=np.float64) * value

def diag2(value) -> Mat2:
    return np.eye(2, dtype=np.float64) * value

# 4x4

def mat4_vec4(a: Mat4, v: Vec4) -> Vec4:
    _expect(a, (4, 4), "mat4_vec4 a")
    _expect(v, (4,), "mat4_vec4 v")
    return a @ v

def mat4_mul(a: Mat4, b: Mat4) -> Mat4:
    _expect(a, (4, 4), "mat4_mul a")
    _expect(b, (4, 4), "mat4_mul b")
    return a @ b

def mat4_add(a: Mat4, b: Mat4) -> Mat4:
    _expect(a, (4, 4), "mat4_add a")
    _expect(b, (4, 4), "mat4_add b")
    return a + b

def mat4_sub(a: Mat4, b: Mat4) -> Mat4:
    _expect(a, (4, 4), "mat4_sub a")
    _expect(b, (4, 4), "mat4_sub b")
    return a - b

def mat4_symmetrize(a: Mat4) -> Mat4:
    _expect(a, (4, 4), "mat4_symmetrize a")
    return (a + a.T) / 2.0

# Mixed shapes (measurement model)

def mat2x4_vec4(h: Mat2x4, v: Vec4) -> Vec2:
    _expect(h, (2, 4), "mat2x4_vec4 h")
    _expect(v, (4,), "mat2x4_vec4 v")
    return h @ v

def mat4_mat4x2(a: Mat4, b: Mat4x2) -> Mat4x2:
    _expect(a, (4, 4), "mat4_mat4x2 a")
    _expect(b, (4, 2), "mat4_mat4x2 b")
    return a @ b

def mat2x4_mat4x2(a: Mat2x4, b: Mat4x2) -> Mat2:
    _expect(a, (2, 4), "mat2x4_mat4x2 a")
    _expect(b, (4, 2), "mat2x4_mat4x2 b")
    return a @ b

def mat4x2_mat2(a: Mat4x2, b: Mat2) -> Mat4x2:
    _expect(a, (4, 2), "mat4x2_mat2 a")
    _expect(b, (2, 2), "mat4x2_mat2 b")
    return a @ b

def mat4x2_vec2(a: Mat4x2, v: Vec2) -> Vec4:
    _expect(a, (4, 2), "mat4x2_vec2 a")
    _expect(v, (2,), "mat4x2_vec2 v")
    return a @ v

def mat4x2_mat2x4(a: Mat4x2, b: Mat2x4) -> Mat4:
    _expect(a, (4, 2), "mat4x2_mat2x4 a")
    _expect(b, (2, 4), "mat4x2_mat2x4 b")
    return a @ b

# 2x2

def mat2_add(a: Mat2, b: Mat2) -> Mat2:
    _expect(a, (2, 2), "mat2_add a")
    _expect(b, (2, 2), "mat2_add b")
    return a + b

def mat2_det(m: Mat2) -> float:
    _expect(m, (2, 2), "mat2_det m")
    return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])

def mat2_inverse(m: Mat2, det: float) -> Mat2:
    """Closed-form inverse. Caller checks det first."""
    _expect(m, (2, 2), "mat2_inverse m")
    return np.array([
        [m[1, 1], -m[0, 1]],
        [-m[1, 0], m[0, 0]]
    ], dtype=np.float64) / det
