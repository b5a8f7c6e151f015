"""投影（`radial_branch.scene.projection.project_scene`）のテスト群。"""

from __future__ import annotations

import pytest

from radial_branch.core.options import AnimationOptions, BranchOptions, StyleOptions
from radial_branch.core.timeline import schedule
from radial_branch.core.tree import build_tree
from radial_branch.scene.projection import edge_name, node_name, project_scene
from radial_branch.scene.sink import RecordingSink


def _project(style: StyleOptions | None = None):
    tree = build_tree(BranchOptions(initial_lines=3, levels=2, children_per_node=2, seed=11))
    timeline = schedule(tree, AnimationOptions(), seed=11)
    sink = RecordingSink()
    scene = project_scene(tree, timeline, sink, style or StyleOptions())
    return tree, timeline, sink, scene


def test_object_names() -> None:
    assert node_name(0, 0) == "RB_Node_L0_0"
    assert edge_name(2, 7) == "RB_Line_L2_7"


def test_one_object_per_node_and_edge() -> None:
    tree, _timeline, sink, scene = _project()
    assert len(scene.node_handles) == tree.node_count
    assert len(scene.edge_handles) == tree.edge_count
    assert set(sink.nodes) == set(scene.node_handles)
    assert set(sink.edges) == set(scene.edge_handles)


def test_edge_names_use_child_level_and_link_endpoints() -> None:
    tree, _timeline, sink, scene = _project()
    for edge in tree.edges:
        handle = scene.edge_handles[edge.id]
        child_level = tree.nodes[edge.child].level
        assert handle == f"RB_Line_L{child_level}_{edge.id}"
        assert sink.links[handle] == (
            scene.node_handles[edge.parent],
            scene.node_handles[edge.child],
        )


def test_windows_are_normalized_timeline() -> None:
    tree, timeline, sink, scene = _project()
    nodes = timeline.normalized_nodes()
    for node in tree.nodes:
        spec = sink.nodes[scene.node_handles[node.id]]
        assert spec.window == (pytest.approx(nodes[node.id][0]), pytest.approx(nodes[node.id][1]))
        assert 0.0 <= spec.window[0] <= spec.window[1] <= 100.0


def test_creation_order_nodes_then_edges() -> None:
    tree, _timeline, sink, scene = _project()
    # 新しいものが先頭に積まれるため、生成順は paint order の逆。
    created = list(reversed(sink.paint_order()))
    assert created == [*scene.node_handles, *scene.edge_handles]


def test_progress_driver_uses_max_time() -> None:
    _tree, timeline, sink, scene = _project()
    assert sink.progress_duration == pytest.approx(timeline.max_time)
    assert scene.max_time == pytest.approx(timeline.max_time)


def test_style_is_applied_with_stroke_floor() -> None:
    style = StyleOptions(circle_size=10.0, line_width=0.0, line_color=(1.0, 0.0, 0.0, 1.0))
    _tree, _timeline, sink, scene = _project(style)
    node = sink.nodes[scene.node_handles[0]]
    edge = sink.edges[scene.edge_handles[0]]
    assert node.size == 10.0
    assert node.stroke_width == 0.1
    assert edge.width == 0.1
    assert edge.color == (1.0, 0.0, 0.0, 1.0)


def test_curved_style_produces_curved_paths() -> None:
    _tree, _timeline, sink, scene = _project(StyleOptions(use_curves=True))
    assert all(not sink.edges[h].path.is_straight for h in scene.edge_handles)
