"""
どこで: `src/radial_branch/core/tree.py`。放射状分岐木の生成。
何を: root と `levels` 段のリングを、分岐数・半径・角度揺らぎに従って配置し、
      ノード/エッジをインデックス参照のアリーナとして返す。
なぜ: 幾何を seed だけで再現でき、かつ親子の相互参照を循環なしに表現するため。
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from radial_branch.core.options import BranchOptions
from radial_branch.core.rng import LehmerRng, create_rng

_MIN_RADIUS = 5.0


@dataclass(frozen=True, slots=True)
class Node:
    """木の 1 ノード。`id` はアリーナ内のインデックスと一致する。

    Attributes
    ----------
    parent:
        親ノードの id（root は None）。
    incoming_edge:
        親から自分へのエッジ id（root は None）。
    edges:
        自分から子へのエッジ id 列（生成順 = 走査順）。
    """

    id: int
    level: int
    angle: float
    radius: float
    position: tuple[float, float]
    parent: int | None
    incoming_edge: int | None
    edges: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Edge:
    """親→子の接続。`id` はアリーナ内のインデックスと一致する。"""

    id: int
    parent: int
    child: int


@dataclass(frozen=True, slots=True)
class Tree:
    """生成済みの木（不変）。

    Attributes
    ----------
    nodes:
        生成順のノード列。`nodes[0]` が root。
    edges:
        生成順のエッジ列。
    levels:
        階層ごとのノード id 列。`levels[0] == (0,)`。
    center:
        配置の中心座標（root の位置）。
    """

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    levels: tuple[tuple[int, ...], ...]
    center: tuple[float, float]

    @property
    def root(self) -> Node:
        return self.nodes[0]

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def children(self, node_id: int) -> tuple[int, ...]:
        """子ノード id を生成順で返す。"""
        return tuple(self.edges[e].child for e in self.nodes[int(node_id)].edges)

    def bfs(self) -> Iterator[Node]:
        """root からの幅優先順でノードを返す。"""
        queue: deque[int] = deque([0])
        while queue:
            node = self.nodes[queue.popleft()]
            yield node
            for e in node.edges:
                queue.append(self.edges[e].child)

    def positions(self) -> np.ndarray:
        """全ノードの座標を shape (N,2) float64 の読み取り専用配列で返す。"""
        out = np.asarray([n.position for n in self.nodes], dtype=np.float64).reshape(-1, 2)
        out.setflags(write=False)
        return out


def expected_node_count(initial_lines: int, levels: int, children_per_node: int) -> int:
    """`1 + initial_lines * sum_{k=0}^{levels-1} children_per_node^k` を返す。"""

    n_lines = max(0, int(initial_lines))
    n_levels = max(0, int(levels))
    k = max(0, int(children_per_node))
    return 1 + n_lines * sum(k**i for i in range(n_levels))


def polar_to_cartesian(
    center: tuple[float, float], radius: float, angle_deg: float
) -> tuple[float, float]:
    """中心・半径・角度 [deg] から 2D 座標を返す。"""
    rad = math.radians(float(angle_deg))
    return (
        float(center[0]) + math.cos(rad) * float(radius),
        float(center[1]) + math.sin(rad) * float(radius),
    )


def compute_radius(level: int, options: BranchOptions, rng: LehmerRng) -> float:
    """階層 `level` の半径を返す。

    `max(5, base_radius + (level-1)*radius_step + jitter)`。
    jitter は `radius_jitter > 0` のときだけ乱数を 1 回消費する。
    """
    base = float(options.base_radius) + (int(level) - 1) * float(options.radius_step)
    rj = float(options.radius_jitter)
    jitter = rng.range(-rj, rj) if rj > 0.0 else 0.0
    return max(_MIN_RADIUS, base + jitter)


def _angle_jitter(options: BranchOptions, rng: LehmerRng) -> float:
    aj = float(options.angle_jitter)
    if aj <= 0.0:
        return 0.0
    return rng.range(-aj, aj)


def _spread_offset(c: int, children_per_node: int, spread: float) -> float:
    """子 `c` の親角度からのオフセット [deg] を返す。子が 1 つなら 0。"""
    if children_per_node > 1:
        normalized = (c / (children_per_node - 1)) - 0.5
    else:
        normalized = 0.0
    return spread * normalized


class _TreeBuilder:
    """生成中だけ使う可変アリーナ。完成後に `Tree` へ固定する。"""

    def __init__(self, center: tuple[float, float]) -> None:
        self.center = (float(center[0]), float(center[1]))
        self._level: list[int] = []
        self._angle: list[float] = []
        self._radius: list[float] = []
        self._position: list[tuple[float, float]] = []
        self._parent: list[int | None] = []
        self._incoming: list[int | None] = []
        self._out_edges: list[list[int]] = []
        self._edges: list[Edge] = []

    def add_node(
        self,
        *,
        level: int,
        angle: float,
        radius: float,
        position: tuple[float, float],
        parent: int | None,
    ) -> int:
        node_id = len(self._level)
        self._level.append(int(level))
        self._angle.append(float(angle))
        self._radius.append(float(radius))
        self._position.append(position)
        self._parent.append(parent)
        self._incoming.append(None)
        self._out_edges.append([])
        if parent is not None:
            edge_id = len(self._edges)
            self._edges.append(Edge(id=edge_id, parent=int(parent), child=node_id))
            self._out_edges[parent].append(edge_id)
            self._incoming[node_id] = edge_id
        return node_id

    def angle(self, node_id: int) -> float:
        return self._angle[node_id]

    def freeze(self, levels: list[list[int]]) -> Tree:
        nodes = tuple(
            Node(
                id=i,
                level=self._level[i],
                angle=self._angle[i],
                radius=self._radius[i],
                position=self._position[i],
                parent=self._parent[i],
                incoming_edge=self._incoming[i],
                edges=tuple(self._out_edges[i]),
            )
            for i in range(len(self._level))
        )
        return Tree(
            nodes=nodes,
            edges=tuple(self._edges),
            levels=tuple(tuple(ids) for ids in levels),
            center=self.center,
        )


def build_tree(options: BranchOptions) -> Tree:
    """放射状分岐木を生成する。

    Parameters
    ----------
    options : BranchOptions
        生成パラメータ。値は境界（`options_from_mapping`）で検証済みである前提。

    Returns
    -------
    Tree
        生成済みの木。生成順は階層ごとの幅優先で、同じ階層内では
        「親ごと → 子ごと」（親 0 の子がすべて親 1 の子より先）になる。

    Notes
    -----
    - 第 1 階層は `360/initial_lines` 刻みで角度 0 から並べ、角度揺らぎを足す。
    - 第 2 階層以降は親角度 + `branch_spread * (c/(k-1) - 0.5)` + 角度揺らぎ。
    - 乱数の消費順はノードごとに「角度揺らぎ → 半径揺らぎ」。
    - `initial_lines == 0` なら root だけの木になる（例外にしない）。
    """

    rng = create_rng(int(options.seed) or 1)
    builder = _TreeBuilder(options.center)
    center = builder.center

    root = builder.add_node(level=0, angle=0.0, radius=0.0, position=center, parent=None)
    levels: list[list[int]] = [[root]]

    n_initial = max(0, int(options.initial_lines))
    n_children = max(0, int(options.children_per_node))
    spread = float(options.branch_spread)

    for level in range(1, max(0, int(options.levels)) + 1):
        current: list[int] = []
        if level == 1:
            angle_step = 360.0 / n_initial if n_initial > 0 else 0.0
            for i in range(n_initial):
                angle = angle_step * i + _angle_jitter(options, rng)
                radius = compute_radius(level, options, rng)
                pos = polar_to_cartesian(center, radius, angle)
                current.append(
                    builder.add_node(
                        level=level, angle=angle, radius=radius, position=pos, parent=root
                    )
                )
        else:
            for parent in levels[level - 1]:
                parent_angle = builder.angle(parent)
                for c in range(n_children):
                    offset = _spread_offset(c, n_children, spread)
                    angle = parent_angle + offset + _angle_jitter(options, rng)
                    radius = compute_radius(level, options, rng)
                    pos = polar_to_cartesian(center, radius, angle)
                    current.append(
                        builder.add_node(
                            level=level, angle=angle, radius=radius, position=pos, parent=parent
                        )
                    )
        levels.append(current)

    return builder.freeze(levels)
