"""First-person camera driven by keyboard and mouse input."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Callable, Protocol

import numpy as np

from glpipegen.util import (
    Dimensions2d,
    Quat,
    look_at,
    perspective,
    rotate_point,
    translation_matrix,
)


class Key(IntEnum):
    """Key codes the camera responds to."""

    A = 65
    D = 68
    S = 83
    W = 87


class _Window(Protocol):
    def is_key_down(self, key: int) -> bool: ...

    def is_mouse_cursor_grabbed(self) -> bool: ...

    def set_cursor_pos_callback(self, callback: Callable[[float, float], None]) -> None: ...

    def add_resize_callback(self, callback: Callable[[Dimensions2d], None]) -> None: ...


_RIGHT = (1.0, 0.0, 0.0)
_UP = (0.0, 1.0, 0.0)


class Camera:
    """A free-flying camera that registers itself with a window for input."""

    def __init__(self, window: _Window, mouse_sensitivity: float, movement_speed: float) -> None:
        self._window = window
        self._first_mouse_pos = True
        self._last_x = 0.0
        self._last_y = 0.0
        self.pitch = 0.0
        self.mouse_sensitivity = mouse_sensitivity
        self.movement_speed = movement_speed
        self.offset_x = 0.0
        self.offset_y = 0.0
        self._orientation = Quat.from_matrix(look_at((0, 0, -1), (0, 0, 0), _UP))
        self._position = np.array([0.0, 0.0, -2.0])
        self._projection = np.identity(4)

        window.set_cursor_pos_callback(self.on_cursor_pos)
        window.add_resize_callback(self.on_resize)

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def orientation(self) -> Quat:
        return self._orientation

    def on_cursor_pos(self, x: float, y: float) -> None:
        """Turn the camera by the cursor movement while the cursor is grabbed."""
        if not self._window.is_mouse_cursor_grabbed():
            return
        if self._first_mouse_pos:
            self._last_x = x
            self._last_y = y
            self._first_mouse_pos = False
        self.offset_x = x - self._last_x
        self.offset_y = y - self._last_y
        self._last_x = x
        self._last_y = y

        self.pitch += self.offset_y * self.mouse_sensitivity

        # Pitch about the fixed local X axis, yaw about the world Y axis,
        # multiplied on opposite sides so the camera never rolls.
        pitch = Quat.angle_axis(-self.offset_y * self.mouse_sensitivity, _RIGHT)
        self._orientation = self._orientation * pitch
        yaw = Quat.angle_axis(-self.offset_x * self.mouse_sensitivity, _UP)
        self._orientation = yaw * self._orientation

    def on_resize(self, new_size: Dimensions2d) -> None:
        """Rebuild the projection for the new window size."""
        self._projection = perspective(
            math.radians(45.0), new_size.width / new_size.height, 0.01, 100.0
        )

    def process_input(self) -> None:
        """Move the camera according to the WASD keys held down."""
        rotation = self._orientation.to_mat3()
        speed = self.movement_speed
        if self._window.is_key_down(Key.D):
            self._position = self._position + rotation @ np.array([speed, 0.0, 0.0])
        if self._window.is_key_down(Key.A):
            self._position = self._position + rotation @ np.array([-speed, 0.0, 0.0])
        if self._window.is_key_down(Key.W):
            self._position = self._position + rotate_point(self._orientation, (0.0, 0.0, -speed))
        if self._window.is_key_down(Key.S):
            self._position = self._position + rotation @ np.array([0.0, 0.0, speed])

    def view_matrix(self) -> np.ndarray:
        """World-to-camera matrix."""
        return np.linalg.inv(translation_matrix(self._position) @ self._orientation.to_mat4())

    def projection_matrix(self) -> np.ndarray:
        return self._projection.copy()