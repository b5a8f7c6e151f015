"""
どこで: `src/radial_branch/scene/sink.py`。シーンオブジェクトの生成先（Scene Sink）。
何を: 投影先が実装すべきプロトコルと、投影内容をメモリに記録する `RecordingSink` を定義する。
なぜ: コアをホストアプリ（合成ソフト等）から切り離し、ホスト無しでテスト/書き出しできるようにするため。
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Protocol

from radial_branch.core.curves import EdgePath

RGBA = tuple[float, float, float, float]
Window = tuple[float, float]


@dataclass(frozen=True, slots=True)
class NodeSpec:
    """ノードマーカー 1 個分の生成内容。

    `window` は 0..100 の進行度空間での活性区間（start, end）。
    """

    id: int
    level: int
    name: str
    angle: float
    radius: float
    position: tuple[float, float]
    window: Window
    size: float
    stroke_width: float
    fill: RGBA
    stroke: RGBA


@dataclass(frozen=True, slots=True)
class EdgeSpec:
    """接続線 1 本分の生成内容。`level` は子ノードの階層。"""

    id: int
    parent_id: int
    child_id: int
    level: int
    name: str
    window: Window
    width: float
    color: RGBA
    path: EdgePath


class SceneSink(Protocol):
    """シーンオブジェクトの生成先。

    handle は sink が返す任意の hashable 値で、以降の呼び出しでオブジェクトを指す。
    描画順（paint order）は先頭ほど手前に描かれる。
    """

    def create_node(self, spec: NodeSpec) -> Hashable: ...

    def create_edge(
        self, spec: EdgeSpec, *, parent: Hashable, child: Hashable
    ) -> Hashable: ...

    def create_progress_driver(self, duration: float) -> None: ...

    def paint_order(self) -> list[Hashable]: ...

    def reorder(self, order: Sequence[Hashable]) -> None: ...


class RecordingSink:
    """投影内容をメモリに記録する SceneSink 実装。

    新しいオブジェクトは描画順の先頭（最前面）に積まれる。
    handle はオブジェクト名（`RB_Node_L1_3` など）。

    Parameters
    ----------
    existing : Sequence[str]
        生成前からシーンにあるオブジェクト名（先頭が最前面）。
        投影や並べ替えでは相対順を保ったまま残る。
    """

    def __init__(self, existing: Sequence[str] = ()) -> None:
        self.nodes: dict[str, NodeSpec] = {}
        self.edges: dict[str, EdgeSpec] = {}
        self.links: dict[str, tuple[str, str]] = {}
        self.progress_duration: float | None = None
        self._order: list[str] = [str(name) for name in existing]
        if len(set(self._order)) != len(self._order):
            raise ValueError(f"existing に重複した名前があります: {self._order!r}")

    def _insert_top(self, name: str) -> str:
        if name in self._order:
            raise ValueError(f"同名のシーンオブジェクトが既にあります: {name!r}")
        self._order.insert(0, name)
        return name

    def create_node(self, spec: NodeSpec) -> str:
        handle = self._insert_top(spec.name)
        self.nodes[handle] = spec
        return handle

    def create_edge(self, spec: EdgeSpec, *, parent: Hashable, child: Hashable) -> str:
        if parent not in self.nodes or child not in self.nodes:
            raise KeyError(f"未登録のノード handle です: parent={parent!r} child={child!r}")
        handle = self._insert_top(spec.name)
        self.edges[handle] = spec
        self.links[handle] = (str(parent), str(child))
        return handle

    def create_progress_driver(self, duration: float) -> None:
        d = float(duration)
        if d <= 0.0:
            raise ValueError(f"progress driver の duration は正である必要があります: got={d}")
        self.progress_duration = d

    def paint_order(self) -> list[str]:
        return list(self._order)

    def reorder(self, order: Sequence[Hashable]) -> None:
        new_order = [str(h) for h in order]
        if sorted(new_order) != sorted(self._order):
            raise ValueError("reorder は既存の handle をちょうど 1 回ずつ含む必要があります")
        self._order = new_order
