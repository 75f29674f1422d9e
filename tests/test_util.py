import math
import struct

import numpy as np
import pytest

from glpipegen.util import (
    Dimensions2d,
    GlslMat3,
    GlslMat4,
    Point2d,
    Quat,
    Rect2d,
    look_at,
    perspective,
    rotate_point,
    scale_matrix,
    translation_matrix,
)


def unit(v):
    arr = np.asarray(v, dtype=float)
    return arr / np.linalg.norm(arr)


ROTATIONS = [
    (0.0, (0.0, 0.0, 1.0)),
    (0.3, (0.0, 1.0, 0.0)),
    (-1.2, tuple(unit((1, 1, 0)))),
    (2.5, tuple(unit((1, 2, 3)))),
    (3.1, tuple(unit((-2, 0.5, 1)))),
]
POINT = np.array([0.5, -1.5, 2.0])


def test_identity_leaves_point_unchanged():
    np.testing.assert_allclose(Quat().rotate(POINT), POINT, atol=1e-12)


def test_quarter_turn_about_z():
    q = Quat.angle_axis(math.pi / 2, (0, 0, 1))
    np.testing.assert_allclose(q.rotate((1, 0, 0)), (0, 1, 0), atol=1e-12)


@pytest.mark.parametrize("angle, axis", ROTATIONS)
def test_rotate_matches_matrix(angle, axis):
    q = Quat.angle_axis(angle, axis)
    np.testing.assert_allclose(q.rotate(POINT), q.to_mat3() @ POINT, atol=1e-12)


@pytest.mark.parametrize("angle, axis", ROTATIONS)
def test_mul_vector_and_rotate_point_agree(angle, axis):
    q = Quat.angle_axis(angle, axis)
    np.testing.assert_allclose(q * POINT, rotate_point(q, POINT), atol=1e-12)


def test_product_composes_rotations():
    a = Quat.angle_axis(*ROTATIONS[2])
    b = Quat.angle_axis(*ROTATIONS[3])
    np.testing.assert_allclose((a * b).rotate(POINT), a.rotate(b.rotate(POINT)), atol=1e-12)


def test_angles_about_same_axis_add():
    axis = unit((1, 2, 3))
    combined = Quat.angle_axis(0.4, axis) * Quat.angle_axis(0.7, axis)
    np.testing.assert_allclose(
        combined.to_mat3(), Quat.angle_axis(0.4 + 0.7, axis).to_mat3(), atol=1e-12
    )


@pytest.mark.parametrize("angle, axis", ROTATIONS)
def test_to_mat3_is_rotation(angle, axis):
    r = Quat.angle_axis(angle, axis).to_mat3()
    np.testing.assert_allclose(r.T @ r, np.identity(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)


@pytest.mark.parametrize("angle, axis", ROTATIONS)
def test_to_mat4_embeds_mat3(angle, axis):
    q = Quat.angle_axis(angle, axis)
    m = q.to_mat4()
    np.testing.assert_allclose(m[:3, :3], q.to_mat3())
    np.testing.assert_allclose(m[3], (0, 0, 0, 1))
    np.testing.assert_allclose(m[:3, 3], (0, 0, 0))


@pytest.mark.parametrize("angle, axis", ROTATIONS)
def test_from_matrix_round_trip(angle, axis):
    q = Quat.angle_axis(angle, axis)
    np.testing.assert_allclose(Quat.from_matrix(q.to_mat3()).to_mat3(), q.to_mat3(), atol=1e-12)
    np.testing.assert_allclose(Quat.from_matrix(q.to_mat4()).to_mat3(), q.to_mat3(), atol=1e-12)


def test_from_matrix_rejects_bad_shape():
    with pytest.raises(ValueError):
        Quat.from_matrix(np.identity(2))


@pytest.mark.parametrize("direction", [unit((1, 0, 0)), unit((1, 2, -3)), unit((0, 0, 1))])
def test_look_at_quat_points_minus_z_along_direction(direction):
    q = Quat.look_at(direction, (0, 1, 0))
    np.testing.assert_allclose(q.rotate((0, 0, -1)), direction, atol=1e-12)


def test_rotate_rejects_wrong_length():
    with pytest.raises(ValueError):
        Quat().rotate((1, 2))


def test_translation_matrix_moves_point():
    offset = np.array([1.0, -2.0, 3.5])
    moved = translation_matrix(offset) @ np.append(POINT, 1.0)
    np.testing.assert_allclose(moved[:3], POINT + offset)
    assert moved[3] == 1.0


def test_scale_matrix_diagonal():
    np.testing.assert_allclose(np.diag(scale_matrix((2, 3, 4))), (2, 3, 4, 1))


def test_look_at_matrix_maps_eye_and_center():
    eye = np.array([1.0, 2.0, 3.0])
    center = np.array([-1.0, 0.5, 0.0])
    view = look_at(eye, center, (0, 1, 0))
    np.testing.assert_allclose(view @ np.append(eye, 1.0), (0, 0, 0, 1), atol=1e-12)
    mapped = view @ np.append(center, 1.0)
    np.testing.assert_allclose(mapped[:2], (0, 0), atol=1e-12)
    assert mapped[2] == pytest.approx(-np.linalg.norm(center - eye))


def test_perspective_depth_range():
    near, far = 0.01, 100.0
    proj = perspective(math.radians(45), 4 / 3, near, far)
    near_clip = proj @ np.array([0, 0, -near, 1.0])
    far_clip = proj @ np.array([0, 0, -far, 1.0])
    assert near_clip[2] / near_clip[3] == pytest.approx(-1.0)
    assert far_clip[2] / far_clip[3] == pytest.approx(1.0)


def test_perspective_rejects_zero_aspect():
    with pytest.raises(ValueError):
        perspective(1.0, 0, 0.1, 10.0)


def test_glsl_mat3_pack_layout():
    m = np.arange(9, dtype=float).reshape(3, 3)
    packed = GlslMat3(m).pack()
    assert len(packed) == 48
    for index, column in enumerate(m.T):
        chunk = packed[index * 16:(index + 1) * 16]
        assert struct.unpack("<3f", chunk[:12]) == tuple(column)
        assert chunk[12:] == bytes(4)


def test_glsl_mat4_pack_is_column_major():
    m = np.arange(16, dtype=float).reshape(4, 4)
    packed = GlslMat4(m).pack()
    assert len(packed) == 64
    assert packed == m.T.astype("<f4").tobytes()


def test_glsl_matrix_rejects_wrong_shape():
    with pytest.raises(ValueError):
        GlslMat3(np.identity(4))
    with pytest.raises(ValueError):
        GlslMat4(np.identity(3))


def test_dimensions_min():
    assert Dimensions2d(800, 300).min(Dimensions2d(640, 600)) == Dimensions2d(640, 300)


def test_dimensions_reduce_size():
    assert Dimensions2d(800, 600).reduce_size(1) == Dimensions2d(400, 300)
    assert Dimensions2d(800, 600).reduce_size(0) == Dimensions2d(800, 600)


def test_dimensions_reduce_size_negative_factor():
    with pytest.raises(ValueError):
        Dimensions2d(8, 8).reduce_size(-1)


def test_dimensions_reject_negative():
    with pytest.raises(ValueError):
        Dimensions2d(-1, 0)
    with pytest.raises(ValueError):
        Point2d(0, 2**32)


def test_rect_from_origin():
    rect = Rect2d.from_origin(10, 20)
    assert rect.origin == Point2d(0, 0)
    assert rect.size == Dimensions2d(10, 20)