import math

import numpy as np
import pytest

from glpipegen.camera import Camera, Key
from glpipegen.util import Dimensions2d, perspective, translation_matrix

SENSITIVITY = 0.01
SPEED = 0.1


class FakeWindow:
    def __init__(self, size=Dimensions2d(800, 600)):
        self.size = size
        self.keys = set()
        self.grabbed = True
        self.cursor_callback = None
        self.resize_callbacks = []

    def is_key_down(self, key):
        return key in self.keys

    def is_mouse_cursor_grabbed(self):
        return self.grabbed

    def set_cursor_pos_callback(self, callback):
        self.cursor_callback = callback

    def add_resize_callback(self, callback):
        callback(self.size)
        self.resize_callbacks.append(callback)

    def resize(self, size):
        self.size = size
        for callback in self.resize_callbacks:
            callback(size)

    def move_cursor(self, x, y):
        self.cursor_callback(x, y)


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def camera(window):
    return Camera(window, SENSITIVITY, SPEED)


def test_projection_from_initial_size(camera):
    expected = perspective(math.radians(45.0), 800 / 600, 0.01, 100.0)
    np.testing.assert_allclose(camera.projection_matrix(), expected)


def test_resize_updates_projection(window, camera):
    window.resize(Dimensions2d(1000, 500))
    expected = perspective(math.radians(45.0), 1000 / 500, 0.01, 100.0)
    np.testing.assert_allclose(camera.projection_matrix(), expected)


def test_initial_position(camera):
    np.testing.assert_allclose(camera.position, (0.0, 0.0, -2.0))


def test_view_matrix_inverts_camera_transform(camera):
    world = translation_matrix(camera.position) @ camera.orientation.to_mat4()
    np.testing.assert_allclose(camera.view_matrix() @ world, np.identity(4), atol=1e-12)
    np.testing.assert_allclose(
        camera.view_matrix() @ np.append(camera.position, 1.0), (0, 0, 0, 1), atol=1e-12
    )


def test_ungrabbed_cursor_is_ignored(window, camera):
    window.grabbed = False
    before = camera.orientation
    window.move_cursor(10, 10)
    window.move_cursor(50, 70)
    assert camera.orientation == before
    assert (camera.offset_x, camera.offset_y) == (0.0, 0.0)


def test_first_move_only_sets_reference(window, camera):
    before = camera.orientation.to_mat3()
    window.move_cursor(100, 100)
    assert (camera.offset_x, camera.offset_y) == (0, 0)
    np.testing.assert_allclose(camera.orientation.to_mat3(), before, atol=1e-12)


def test_offsets_follow_cursor(window, camera):
    window.move_cursor(100, 100)
    window.move_cursor(110, 95)
    assert camera.offset_x == 110 - 100
    assert camera.offset_y == 95 - 100
    assert camera.pitch == pytest.approx((95 - 100) * SENSITIVITY)


def test_yaw_keeps_world_up(window, camera):
    window.move_cursor(0, 0)
    window.move_cursor(40, 0)
    rotation = camera.orientation.to_mat3()
    np.testing.assert_allclose(rotation @ (0, 1, 0), (0, 1, 0), atol=1e-12)
    assert not np.allclose(rotation @ (0, 0, 1), (0, 0, -1))


def test_pitch_tilts_forward_vector(window, camera):
    window.move_cursor(0, 0)
    window.move_cursor(0, 30)
    forward = camera.orientation.rotate((0, 0, -1))
    assert abs(forward[1]) > 0.1
    assert np.linalg.norm(forward) == pytest.approx(1.0)


def test_w_moves_towards_origin_by_speed(window, camera):
    start = camera.position
    window.keys = {Key.W}
    camera.process_input()
    assert np.linalg.norm(camera.position - start) == pytest.approx(SPEED)
    assert camera.position[2] > start[2]


def test_w_then_s_returns(window, camera):
    start = camera.position
    window.keys = {Key.W}
    camera.process_input()
    window.keys = {Key.S}
    camera.process_input()
    np.testing.assert_allclose(camera.position, start, atol=1e-12)


def test_d_then_a_returns_and_is_sideways(window, camera):
    start = camera.position
    window.keys = {Key.D}
    camera.process_input()
    strafe = camera.position - start
    window.keys = {Key.A}
    camera.process_input()
    np.testing.assert_allclose(camera.position, start, atol=1e-12)
    forward = camera.orientation.rotate((0, 0, -1))
    assert strafe @ forward == pytest.approx(0.0, abs=1e-12)
    assert np.linalg.norm(strafe) == pytest.approx(SPEED)


def test_no_keys_no_movement(window, camera):
    start = camera.position
    camera.process_input()
    np.testing.assert_allclose(camera.position, start)