"""エッジ経路（`radial_branch.core.curves`）のテスト群。"""

from __future__ import annotations

import math

import numpy as np

from radial_branch.core.curves import edge_geometry, edge_path, straight_path
from radial_branch.core.rng import LehmerRng


def test_straight_when_curves_disabled() -> None:
    path = edge_path((0.0, 0.0), (10.0, 0.0), edge_id=0, use_curves=False, tension=0.5, randomness=0.3)
    assert path.is_straight
    np.testing.assert_array_equal(path.vertices, [[0.0, 0.0], [10.0, 0.0]])
    np.testing.assert_array_equal(path.sample(16), [[0.0, 0.0], [10.0, 0.0]])


def test_straight_when_tension_is_zero_or_points_coincide() -> None:
    assert edge_path((0.0, 0.0), (5.0, 5.0), edge_id=1, use_curves=True, tension=0.0, randomness=0.0).is_straight
    assert edge_path((3.0, 3.0), (3.0, 3.0), edge_id=1, use_curves=True, tension=0.5, randomness=0.0).is_straight


def test_curved_path_bends_by_tension_without_randomness() -> None:
    p, c = (0.0, 0.0), (30.0, 40.0)
    path = edge_path(p, c, edge_id=4, use_curves=True, tension=0.4, randomness=0.0)

    assert not path.is_straight
    assert path.vertices.shape == (3, 2)
    dist = math.hypot(30.0, 40.0)
    mid_offset = path.vertices[1] - np.asarray([15.0, 20.0])
    assert math.isclose(float(np.hypot(*mid_offset)), dist * 0.4 * 0.5, rel_tol=1e-12)
    # 中点のずれは弦に垂直。
    assert abs(float(np.dot(mid_offset, [30.0, 40.0]))) < 1e-9


def test_curve_side_follows_edge_seeded_rng() -> None:
    p, c = (0.0, 0.0), (10.0, 0.0)
    for edge_id in range(6):
        path = edge_path(p, c, edge_id=edge_id, use_curves=True, tension=0.5, randomness=0.0)
        sign = -1.0 if LehmerRng(edge_id + 101).next() < 0.5 else 1.0
        # 弦が +X 方向なら垂直方向は +Y。
        assert math.copysign(1.0, float(path.vertices[1][1])) == sign


def test_curved_sample_starts_and_ends_at_endpoints() -> None:
    p, c = (1.0, 2.0), (-7.0, 11.0)
    path = edge_path(p, c, edge_id=9, use_curves=True, tension=0.6, randomness=0.35)
    pts = path.sample(8)
    assert pts.shape == (1 + 2 * 8, 2)
    np.testing.assert_allclose(pts[0], p, rtol=0.0, atol=1e-9)
    np.testing.assert_allclose(pts[-1], c, rtol=0.0, atol=1e-9)
    np.testing.assert_allclose(pts[8], path.vertices[1], rtol=0.0, atol=1e-9)


def test_edge_path_is_deterministic_per_edge_id() -> None:
    a = edge_path((0.0, 0.0), (5.0, 9.0), edge_id=3, use_curves=True, tension=0.45, randomness=0.35)
    b = edge_path((0.0, 0.0), (5.0, 9.0), edge_id=3, use_curves=True, tension=0.45, randomness=0.35)
    np.testing.assert_array_equal(a.vertices, b.vertices)
    np.testing.assert_array_equal(a.out_tangents, b.out_tangents)


def test_edge_geometry_packs_polylines() -> None:
    paths = [
        straight_path((0.0, 0.0), (1.0, 0.0)),
        edge_path((0.0, 0.0), (0.0, 4.0), edge_id=0, use_curves=True, tension=0.5, randomness=0.0),
    ]
    geom = edge_geometry(paths, segments=4)
    assert geom.offsets.tolist() == [0, 2, 2 + 9]
    np.testing.assert_array_equal(geom.line(0), [[0.0, 0.0], [1.0, 0.0]])
