"""Vector, quaternion and matrix helpers plus small 2D geometry types."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Sequence

import numpy as np

_EPSILON = float(np.finfo(np.float32).eps)
_UINT32_LIMIT = 2**32


def _vec3(value: Sequence[float]) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {arr.shape}")
    return arr


def _normalize(value: np.ndarray) -> np.ndarray:
    return value / np.linalg.norm(value)


@dataclass(frozen=True)
class Quat:
    """A rotation quaternion stored as (w, x, y, z)."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def angle_axis(cls, angle: float, axis: Sequence[float]) -> Quat:
        """Rotation of ``angle`` radians about ``axis`` (assumed to be unit length)."""
        ax = _vec3(axis)
        s = math.sin(angle * 0.5)
        return cls(math.cos(angle * 0.5), float(ax[0]) * s, float(ax[1]) * s, float(ax[2]) * s)

    @classmethod
    def look_at(cls, direction: Sequence[float], up: Sequence[float]) -> Quat:
        """Orientation whose -Z axis points along ``direction`` (right-handed)."""
        back = -_vec3(direction)
        right = np.cross(_vec3(up), back)
        right = right / math.sqrt(max(_EPSILON, float(right @ right)))
        new_up = np.cross(back, right)
        return cls.from_matrix(np.column_stack((right, new_up, back)))

    @classmethod
    def from_matrix(cls, matrix) -> Quat:
        """Quaternion for the rotation in a 3x3 or the upper-left of a 4x4 matrix."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape not in ((3, 3), (4, 4)):
            raise ValueError(f"expected a 3x3 or 4x4 matrix, got shape {m.shape}")
        c = m[:3, :3].T  # c[column][row]
        candidates = (
            c[0][0] + c[1][1] + c[2][2],
            c[0][0] - c[1][1] - c[2][2],
            c[1][1] - c[0][0] - c[2][2],
            c[2][2] - c[0][0] - c[1][1],
        )
        biggest = max(range(4), key=candidates.__getitem__)
        val = math.sqrt(candidates[biggest] + 1.0) * 0.5
        mult = 0.25 / val
        if biggest == 0:
            return cls(val, (c[1][2] - c[2][1]) * mult, (c[2][0] - c[0][2]) * mult,
                       (c[0][1] - c[1][0]) * mult)
        if biggest == 1:
            return cls((c[1][2] - c[2][1]) * mult, val, (c[0][1] + c[1][0]) * mult,
                       (c[2][0] + c[0][2]) * mult)
        if biggest == 2:
            return cls((c[2][0] - c[0][2]) * mult, (c[0][1] + c[1][0]) * mult, val,
                       (c[1][2] + c[2][1]) * mult)
        return cls((c[0][1] - c[1][0]) * mult, (c[2][0] + c[0][2]) * mult,
                   (c[1][2] + c[2][1]) * mult, val)

    def __mul__(self, other):
        if isinstance(other, Quat):
            return Quat(
                self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
                self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
                self.w * other.y + self.y * other.w + self.z * other.x - self.x * other.z,
                self.w * other.z + self.z * other.w + self.x * other.y - self.y * other.x,
            )
        return self.rotate(other)

    def rotate(self, point: Sequence[float]) -> np.ndarray:
        """Rotate a 3D point by this quaternion."""
        v = _vec3(point)
        q = np.array([self.x, self.y, self.z])
        uv = np.cross(q, v)
        uuv = np.cross(q, uv)
        return v + (uv * self.w + uuv) * 2.0

    def to_mat3(self) -> np.ndarray:
        """The 3x3 rotation matrix (row-major, acting on column vectors)."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ])

    def to_mat4(self) -> np.ndarray:
        """The rotation as a 4x4 homogeneous matrix."""
        result = np.identity(4)
        result[:3, :3] = self.to_mat3()
        return result


def rotate_point(q: Quat, point: Sequence[float]) -> np.ndarray:
    """Rotate ``point`` by quaternion ``q``."""
    return q.rotate(point)


def translation_matrix(offset: Sequence[float]) -> np.ndarray:
    """4x4 matrix translating by ``offset``."""
    result = np.identity(4)
    result[:3, 3] = _vec3(offset)
    return result


def scale_matrix(factors: Sequence[float]) -> np.ndarray:
    """4x4 matrix scaling each axis by ``factors``."""
    return np.diag(np.append(_vec3(factors), 1.0))


def look_at(eye: Sequence[float], center: Sequence[float], up: Sequence[float]) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = _vec3(eye)
    f = _normalize(_vec3(center) - eye_v)
    s = _normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    result = np.identity(4)
    result[0, :3] = s
    result[1, :3] = u
    result[2, :3] = -f
    result[:3, 3] = (-(s @ eye_v), -(u @ eye_v), f @ eye_v)
    return result


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with depth mapped to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must be non-zero")
    tan_half = math.tan(fovy / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = -(far + near) / (far - near)
    result[3, 2] = -1.0
    result[2, 3] = -(2.0 * far * near) / (far - near)
    return result


def _columns(source, size: int) -> tuple[np.ndarray, ...]:
    m = np.asarray(source, dtype=np.float64)
    if m.shape != (size, size):
        raise ValueError(f"expected a {size}x{size} matrix, got shape {m.shape}")
    return tuple(np.array(m.T))


class GlslMat3:
    """A 3x3 matrix laid out as three 16-byte aligned columns."""

    def __init__(self, source) -> None:
        self.columns = _columns(source, 3)

    def pack(self) -> bytes:
        """Little-endian float32 bytes, each column padded to 16 bytes."""
        return b"".join(struct.pack("<3f4x", *column) for column in self.columns)


class GlslMat4:
    """A 4x4 matrix laid out as four 16-byte columns."""

    def __init__(self, source) -> None:
        self.columns = _columns(source, 4)

    def pack(self) -> bytes:
        """Little-endian float32 bytes in column-major order."""
        return b"".join(struct.pack("<4f", *column) for column in self.columns)


def _check_uint32(**values: int) -> None:
    for name, value in values.items():
        if not 0 <= value < _UINT32_LIMIT:
            raise ValueError(f"{name} must fit in an unsigned 32-bit integer, got {value}")


@dataclass(frozen=True)
class Point2d:
    """An unsigned 2D point."""

    x: int
    y: int

    def __post_init__(self) -> None:
        _check_uint32(x=self.x, y=self.y)


@dataclass(frozen=True)
class Dimensions2d:
    """An unsigned 2D size."""

    width: int
    height: int

    def __post_init__(self) -> None:
        _check_uint32(width=self.width, height=self.height)

    def min(self, other: Dimensions2d) -> Dimensions2d:
        """Component-wise minimum of two sizes."""
        return Dimensions2d(min(self.width, other.width), min(self.height, other.height))

    def reduce_size(self, factor: int) -> Dimensions2d:
        """Halve both dimensions ``factor`` times (as for a mip level)."""
        if factor < 0:
            raise ValueError("factor must be non-negative")
        return Dimensions2d(self.width >> factor, self.height >> factor)


@dataclass(frozen=True)
class Rect2d:
    """A rectangle given by its origin and size."""

    origin: Point2d
    size: Dimensions2d

    @classmethod
    def from_origin(cls, width: int, height: int) -> Rect2d:
        """Rectangle of the given size anchored at (0, 0)."""
        return cls(Point2d(0, 0), Dimensions2d(width, height))