"""Position, scale and orientation of an object in the scene."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from glpipegen.util import Quat, scale_matrix, translation_matrix


class Transform:
    """An object transform producing model and normal matrices."""

    def __init__(self) -> None:
        self._position = np.zeros(3)
        self._scale = np.ones(3)
        self._rotation = Quat.look_at((0, 0, 1), (0, 1, 0))
        self._dirty = True

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def scale(self) -> np.ndarray:
        return self._scale.copy()

    @property
    def orientation(self) -> Quat:
        return self._rotation

    def set_position(self, amount: Sequence[float]) -> None:
        """Move the position by ``amount`` and mark the transform dirty."""
        self._position = self._position + np.asarray(amount, dtype=np.float64)
        self._dirty = True

    def set_scale(self, new_scale: Sequence[float]) -> None:
        self._scale = np.asarray(new_scale, dtype=np.float64).copy()

    def set_orientation(self, new_orientation: Quat) -> None:
        self._rotation = new_orientation

    def take_dirty(self) -> bool:
        """Return whether the transform changed since the last call, and clear the flag."""
        dirty, self._dirty = self._dirty, False
        return dirty

    def model_matrix(self) -> np.ndarray:
        """Scale, then rotate, then translate."""
        return translation_matrix(self._position) @ self._rotation.to_mat4() @ scale_matrix(self._scale)

    def normal_matrix(self) -> np.ndarray:
        """Upper-left 3x3 of the inverse transpose of the model matrix."""
        return np.linalg.inv(self.model_matrix()).T[:3, :3]