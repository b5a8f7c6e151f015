"""
どこで: `src/radial_branch/core/timeline.py`。成長アニメーションのタイムライン計算。
何を: 木を幅優先で走査し、ノードの活性区間とエッジの描画区間（秒）を割り当てる。
なぜ: 親が確定してから子を決める順序で、因果的に矛盾しない時間割を得るため。
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np

from radial_branch.core.options import AnimationOptions
from radial_branch.core.rng import create_rng
from radial_branch.core.tree import Tree

# smooth_flow で node_duration=0 のときも区間長を正に保つ下限。
_MIN_SMOOTH_NODE_DURATION = 0.0001
# seed=0 のときに使う scheduler seed。
_FALLBACK_SCHEDULER_SEED = 123987


def scheduler_seed(seed: int) -> int:
    """幾何用 seed からタイムライン用 seed を導く（`seed*17 + 53`）。"""
    s = int(seed)
    if s == 0:
        return _FALLBACK_SCHEDULER_SEED
    return s * 17 + 53


def _frozen(values: list[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class Timeline:
    """ノード/エッジごとの絶対時刻区間（秒）。

    Attributes
    ----------
    node_start, node_end:
        shape (N,) のノード活性区間。index はノード id。
    edge_start, edge_end:
        shape (E,) のエッジ描画区間。index はエッジ id。
    max_time:
        全区間の終端の最大値。常に正。

    Notes
    -----
    配列は writeable=False で保持する。
    """

    node_start: np.ndarray
    node_end: np.ndarray
    edge_start: np.ndarray
    edge_end: np.ndarray
    max_time: float

    def node_window(self, node_id: int) -> tuple[float, float]:
        i = int(node_id)
        return float(self.node_start[i]), float(self.node_end[i])

    def edge_window(self, edge_id: int) -> tuple[float, float]:
        i = int(edge_id)
        return float(self.edge_start[i]), float(self.edge_end[i])

    def normalized_nodes(self) -> np.ndarray:
        """ノード区間を 0..100 の進行度空間へ写した shape (N,2) 配列を返す。"""
        return _normalize(self.node_start, self.node_end, self.max_time)

    def normalized_edges(self) -> np.ndarray:
        """エッジ区間を 0..100 の進行度空間へ写した shape (E,2) 配列を返す。"""
        return _normalize(self.edge_start, self.edge_end, self.max_time)


def _normalize(start: np.ndarray, end: np.ndarray, total: float) -> np.ndarray:
    # ルート直下の負のランダムオフセットで start < 0 になり得るため [0,100] に収める。
    out = np.stack([start, end], axis=1).reshape(-1, 2) / float(total) * 100.0
    out = np.clip(out, 0.0, 100.0)
    out.setflags(write=False)
    return out


def schedule(tree: Tree, options: AnimationOptions, *, seed: int) -> Timeline:
    """木にタイムラインを割り当てる。

    Parameters
    ----------
    tree : Tree
        `build_tree()` の結果。
    options : AnimationOptions
        区間長・スタッガー・ランダムオフセットなど。
    seed : int
        幾何生成と同じ seed。内部で `scheduler_seed()` により別系列へずらす。

    Returns
    -------
    Timeline
        確定済みの区間と `max_time`。

    Notes
    -----
    - root は `[0, node_duration]`。
    - 各ノードの i 番目のエッジは `parent_end + child_stagger*i (+ U(-r, r))` に描画開始する。
      `simultaneous_root` のとき root のエッジは i によらず offset 0 にする
      （乱数は消費したうえで捨てる）。
    - smooth_flow: 子はエッジ描画開始と同時に成長を始め、終端はエッジ終端より前にならない。
      それ以外: 子はエッジ描画の完了を待って成長する。
    - 幅優先のキュー順なので、子を決めるとき親の区間は必ず確定している。
    """

    node_duration = float(options.node_duration)
    line_duration = float(options.line_duration)
    child_stagger = float(options.child_stagger)
    random_offset = float(options.random_offset)
    simultaneous_root = bool(options.simultaneous_root)
    smooth_flow = bool(options.smooth_flow)

    rng = create_rng(scheduler_seed(seed))

    n_nodes = tree.node_count
    n_edges = tree.edge_count
    node_start = [0.0] * n_nodes
    node_end = [0.0] * n_nodes
    edge_start = [0.0] * n_edges
    edge_end = [0.0] * n_edges

    root_id = tree.root.id
    node_start[root_id] = 0.0
    node_end[root_id] = node_duration
    max_time = node_end[root_id]

    queue: deque[int] = deque([root_id])
    while queue:
        current = queue.popleft()
        parent_end = node_end[current]
        for i, edge_id in enumerate(tree.nodes[current].edges):
            offset = child_stagger * i
            if random_offset > 0.0:
                offset += rng.range(-random_offset, random_offset)
            if current == root_id and simultaneous_root:
                offset = 0.0

            draw_start = parent_end + offset
            draw_end = draw_start + line_duration
            edge_start[edge_id] = draw_start
            edge_end[edge_id] = draw_end

            child = tree.edges[edge_id].child
            if smooth_flow:
                start = draw_start
                end = max(start + max(node_duration, _MIN_SMOOTH_NODE_DURATION), draw_end)
            else:
                start = draw_end
                end = start + node_duration
            node_start[child] = start
            node_end[child] = end

            if end > max_time:
                max_time = end
            queue.append(child)

    if max_time <= 0.0:
        max_time = node_duration if node_duration > 0.0 else 1.0

    return Timeline(
        node_start=_frozen(node_start),
        node_end=_frozen(node_end),
        edge_start=_frozen(edge_start),
        edge_end=_frozen(edge_end),
        max_time=float(max_time),
    )
