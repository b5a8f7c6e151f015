# どこで: `src/radial_branch/scene/reorder.py`。
# 何を: 接続線をノードマーカーの最背面の直後へまとめて移す描画順の並べ替え。
# なぜ: 線がマーカーの下に描かれ、マーカーどうしの間を通って見えるようにするため。

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TypeVar

from radial_branch.scene.sink import SceneSink

H = TypeVar("H", bound=Hashable)


def reorder_paint_order(
    order: Sequence[H],
    node_handles: Sequence[H],
    edge_handles: Sequence[H],
) -> list[H]:
    """エッジを「最も奥のノード」の直後へ差し込んだ描画順を返す。

    Parameters
    ----------
    order : Sequence
        現在の描画順（先頭が最前面）。
    node_handles, edge_handles : Sequence
        ノード/エッジの handle。`order` に含まれないものは無視する。

    Returns
    -------
    list
        新しい描画順。エッジは現在の順序（昇順 index）を保ったまま連続して並び、
        それ以外のオブジェクトの相対順は変わらない。
        ノードかエッジのどちらかが空なら `order` をそのまま返す。
    """

    index = {h: i for i, h in enumerate(order)}
    nodes = [h for h in node_handles if h in index]
    edge_set = {h for h in edge_handles if h in index}
    if not nodes or not edge_set:
        return list(order)

    bottom = max(nodes, key=lambda h: index[h])
    edges_sorted = sorted(edge_set, key=lambda h: index[h])

    rest = [h for h in order if h not in edge_set]
    pos = rest.index(bottom)
    return [*rest[: pos + 1], *edges_sorted, *rest[pos + 1 :]]


def apply_reorder(
    sink: SceneSink,
    node_handles: Sequence[Hashable],
    edge_handles: Sequence[Hashable],
) -> list[Hashable]:
    """sink の描画順を並べ替え、適用後の順序を返す。"""

    order = reorder_paint_order(sink.paint_order(), node_handles, edge_handles)
    sink.reorder(order)
    return order
