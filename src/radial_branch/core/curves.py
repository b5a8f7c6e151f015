"""
どこで: `src/radial_branch/core/curves.py`。エッジ経路（直線 / 有機的カーブ）の生成。
何を: 親→子の 2 点から、頂点 + 相対タンジェントで表すベジェ経路を作り、ポリラインへ平坦化する。
なぜ: 枝を直線だけでなく、エッジごとに決定的な「しなり」を持つ曲線でも描けるようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from radial_branch.core.realized_geometry import RealizedGeometry, geometry_from_polylines
from radial_branch.core.rng import LehmerRng

# エッジごとの曲げ方向/強さの乱数系列を、エッジ id からずらすための定数。
_CURVE_SEED_OFFSET = 101
_DEFAULT_SEGMENTS = 16


@dataclass(frozen=True, slots=True)
class EdgePath:
    """頂点と相対タンジェントで表すベジェ経路。

    Attributes
    ----------
    vertices:
        shape (K,2) の頂点。
    in_tangents, out_tangents:
        shape (K,2)。各頂点からの相対ベクトル（0 なら直線的につながる）。

    Notes
    -----
    区間 i の制御点は
    `vertices[i]`, `vertices[i] + out_tangents[i]`,
    `vertices[i+1] + in_tangents[i+1]`, `vertices[i+1]` になる。
    """

    vertices: np.ndarray
    in_tangents: np.ndarray
    out_tangents: np.ndarray

    @property
    def is_straight(self) -> bool:
        return not (np.any(self.in_tangents) or np.any(self.out_tangents))

    def sample(self, segments: int = _DEFAULT_SEGMENTS) -> np.ndarray:
        """経路を shape (M,2) のポリラインに平坦化して返す。

        直線の区間は端点だけを出す。曲線の区間は `segments` 分割する。
        """
        seg = max(1, int(segments))
        v = self.vertices
        if v.shape[0] < 2:
            return np.asarray(v, dtype=np.float64).copy()

        points: list[np.ndarray] = [v[0][None, :]]
        t = np.linspace(0.0, 1.0, seg + 1)[1:, None]
        for i in range(int(v.shape[0]) - 1):
            p0 = v[i]
            p3 = v[i + 1]
            h0 = self.out_tangents[i]
            h1 = self.in_tangents[i + 1]
            if not (np.any(h0) or np.any(h1)):
                points.append(p3[None, :])
                continue
            p1 = p0 + h0
            p2 = p3 + h1
            u = 1.0 - t
            pts = (
                (u**3) * p0
                + 3.0 * (u**2) * t * p1
                + 3.0 * u * (t**2) * p2
                + (t**3) * p3
            )
            points.append(pts)
        return np.concatenate(points, axis=0)


def _frozen(values) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64).reshape(-1, 2)
    arr.setflags(write=False)
    return arr


def straight_path(p: tuple[float, float], c: tuple[float, float]) -> EdgePath:
    zeros = [(0.0, 0.0), (0.0, 0.0)]
    return EdgePath(
        vertices=_frozen([p, c]),
        in_tangents=_frozen(zeros),
        out_tangents=_frozen(zeros),
    )


def edge_path(
    p: tuple[float, float],
    c: tuple[float, float],
    *,
    edge_id: int,
    use_curves: bool,
    tension: float,
    randomness: float,
) -> EdgePath:
    """親座標 `p` から子座標 `c` へのエッジ経路を返す。

    Parameters
    ----------
    p, c : tuple[float, float]
        始点（親）と終点（子）。
    edge_id : int
        エッジ id。曲げ方向/強さの乱数 seed（`edge_id + 101`）に使う。
    use_curves : bool
        False なら常に直線。
    tension : float
        曲げの強さ（距離に対する比）。0 以下なら直線。
    randomness : float
        曲げ強さの揺らぎ幅（0..1）。

    Returns
    -------
    EdgePath
        直線なら頂点 2 つ、曲線なら `[p, mid, c]` の 3 頂点。
    """

    tension_f = max(0.0, float(tension))
    randomness_f = max(0.0, float(randomness))
    if not use_curves or tension_f <= 0.0:
        return straight_path(p, c)

    px, py = float(p[0]), float(p[1])
    cx, cy = float(c[0]), float(c[1])
    dx = cx - px
    dy = cy - py
    dist = math.hypot(dx, dy)
    if dist == 0.0:
        return straight_path(p, c)

    dir_x, dir_y = dx / dist, dy / dist
    perp_x, perp_y = -dir_y, dir_x

    rng = LehmerRng(int(edge_id) + _CURVE_SEED_OFFSET)
    sign = -1.0 if rng.next() < 0.5 else 1.0
    variation = 1.0 + randomness_f * rng.range(-1.0, 1.0)
    bend = dist * tension_f * variation

    mid = (
        px + dx * 0.5 + perp_x * bend * 0.5 * sign,
        py + dy * 0.5 + perp_y * bend * 0.5 * sign,
    )
    handle_len = dist / 3.0
    out0 = (
        dir_x * handle_len + perp_x * bend * 0.35 * sign,
        dir_y * handle_len + perp_y * bend * 0.35 * sign,
    )
    out1 = (
        dir_x * handle_len * 0.25 + perp_x * bend * 0.4 * sign,
        dir_y * handle_len * 0.25 + perp_y * bend * 0.4 * sign,
    )
    in1 = (-out1[0], -out1[1])
    in2 = (-out0[0], -out0[1])

    return EdgePath(
        vertices=_frozen([(px, py), mid, (cx, cy)]),
        in_tangents=_frozen([(0.0, 0.0), in1, in2]),
        out_tangents=_frozen([out0, out1, (0.0, 0.0)]),
    )


def edge_geometry(
    paths: Sequence[EdgePath], *, segments: int = _DEFAULT_SEGMENTS
) -> RealizedGeometry:
    """エッジ経路列を平坦化し、1 つの RealizedGeometry にまとめる。"""
    return geometry_from_polylines([path.sample(segments) for path in paths])
