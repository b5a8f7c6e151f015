"""描画順の並べ替え（`radial_branch.scene.reorder`）のテスト群。"""

from __future__ import annotations

from radial_branch.scene.reorder import apply_reorder, reorder_paint_order


def test_edges_move_directly_behind_bottommost_node() -> None:
    order = ["e1", "e0", "n2", "n1", "n0", "ctrl"]
    out = reorder_paint_order(order, ["n0", "n1", "n2"], ["e0", "e1"])
    assert out == ["n2", "n1", "n0", "e1", "e0", "ctrl"]


def test_edges_keep_relative_order_and_others_stay_put() -> None:
    order = ["bg_top", "e3", "n1", "e1", "n0", "e2", "bg_bottom"]
    out = reorder_paint_order(order, ["n0", "n1"], ["e1", "e2", "e3"])
    assert out == ["bg_top", "n1", "n0", "e3", "e1", "e2", "bg_bottom"]
    assert sorted(out) == sorted(order)


def test_no_op_when_nodes_or_edges_are_missing() -> None:
    order = ["n0", "other"]
    assert reorder_paint_order(order, ["n0"], []) == order
    assert reorder_paint_order(order, [], ["e0"]) == order
    # order に無い handle は無視する。
    assert reorder_paint_order(order, ["n0"], ["ghost"]) == order


def test_reorder_is_idempotent() -> None:
    order = ["e1", "e0", "n2", "n1", "n0", "ctrl"]
    once = reorder_paint_order(order, ["n0", "n1", "n2"], ["e0", "e1"])
    assert reorder_paint_order(once, ["n0", "n1", "n2"], ["e0", "e1"]) == once


class _ListSink:
    def __init__(self, order: list[str]) -> None:
        self.order = list(order)

    def paint_order(self) -> list[str]:
        return list(self.order)

    def reorder(self, order) -> None:
        self.order = list(order)


def test_apply_reorder_writes_back_to_sink() -> None:
    sink = _ListSink(["e0", "n1", "n0"])
    out = apply_reorder(sink, ["n0", "n1"], ["e0"])  # type: ignore[arg-type]
    assert out == ["n1", "n0", "e0"]
    assert sink.order == out
