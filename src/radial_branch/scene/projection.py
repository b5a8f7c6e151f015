"""
どこで: `src/radial_branch/scene/projection.py`。木 + タイムライン → シーンオブジェクト。
何を: ノード/エッジごとに正規化済み区間と見た目を持つ Spec を作り、SceneSink へ生成させる。
なぜ: 幾何と時間割の計算結果を、ホスト側が解釈するだけで再生できる形にまとめるため。
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from radial_branch.core.curves import EdgePath, edge_path
from radial_branch.core.options import StyleOptions
from radial_branch.core.timeline import Timeline
from radial_branch.core.tree import Tree
from radial_branch.scene.sink import EdgeSpec, NodeSpec, SceneSink

# ストローク幅がこれより細いとホスト側で消えるため下限を設ける。
_MIN_STROKE_WIDTH = 0.1


@dataclass(frozen=True, slots=True)
class ProjectedScene:
    """投影で生成された handle と総時間。

    `node_handles[i]` / `edge_handles[i]` はノード/エッジ id `i` に対応する。
    """

    node_handles: tuple[Hashable, ...]
    edge_handles: tuple[Hashable, ...]
    max_time: float


def node_name(level: int, node_id: int) -> str:
    return f"RB_Node_L{int(level)}_{int(node_id)}"


def edge_name(level: int, edge_id: int) -> str:
    return f"RB_Line_L{int(level)}_{int(edge_id)}"


def edge_paths(tree: Tree, style: StyleOptions) -> tuple[EdgePath, ...]:
    """全エッジの経路を id 順に返す。"""
    out: list[EdgePath] = []
    for edge in tree.edges:
        out.append(
            edge_path(
                tree.nodes[edge.parent].position,
                tree.nodes[edge.child].position,
                edge_id=edge.id,
                use_curves=style.use_curves,
                tension=style.curve_tension,
                randomness=style.curve_randomness,
            )
        )
    return tuple(out)


def project_scene(
    tree: Tree,
    timeline: Timeline,
    sink: SceneSink,
    style: StyleOptions,
) -> ProjectedScene:
    """木とタイムラインを sink へ投影する。

    ノードを id 順に、続けてエッジを id 順に生成し、最後に
    `max_time` 秒で進行度 0→100 を進める progress driver を作る。
    """

    node_windows = timeline.normalized_nodes()
    edge_windows = timeline.normalized_edges()
    stroke_width = max(_MIN_STROKE_WIDTH, float(style.line_width))

    node_handles: list[Hashable] = []
    for node in tree.nodes:
        start, end = node_windows[node.id]
        spec = NodeSpec(
            id=node.id,
            level=node.level,
            name=node_name(node.level, node.id),
            angle=node.angle,
            radius=node.radius,
            position=node.position,
            window=(float(start), float(end)),
            size=float(style.circle_size),
            stroke_width=stroke_width,
            fill=style.circle_fill,
            stroke=style.circle_stroke,
        )
        node_handles.append(sink.create_node(spec))

    paths = edge_paths(tree, style)
    edge_handles: list[Hashable] = []
    for edge in tree.edges:
        level = tree.nodes[edge.child].level
        start, end = edge_windows[edge.id]
        spec = EdgeSpec(
            id=edge.id,
            parent_id=edge.parent,
            child_id=edge.child,
            level=level,
            name=edge_name(level, edge.id),
            window=(float(start), float(end)),
            width=stroke_width,
            color=style.line_color,
            path=paths[edge.id],
        )
        edge_handles.append(
            sink.create_edge(
                spec,
                parent=node_handles[edge.parent],
                child=node_handles[edge.child],
            )
        )

    sink.create_progress_driver(timeline.max_time)

    return ProjectedScene(
        node_handles=tuple(node_handles),
        edge_handles=tuple(edge_handles),
        max_time=float(timeline.max_time),
    )
