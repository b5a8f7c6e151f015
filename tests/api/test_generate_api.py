"""公開 API（`radial_branch.generate`）のテスト群。"""

from __future__ import annotations

from pathlib import Path

import pytest

from radial_branch import (
    BranchOptions,
    GeneratorOptions,
    generate,
    options_from_config,
)
from radial_branch.core.errors import DegenerateGeometryError
from radial_branch.core.runtime_config import set_config_path
from radial_branch.scene.sink import RecordingSink


def _options(**branch) -> GeneratorOptions:
    base = dict(initial_lines=4, levels=2, children_per_node=2, seed=12345)
    base.update(branch)
    return GeneratorOptions(branch=BranchOptions(**base))


def test_generate_produces_scenario_counts() -> None:
    result = generate(_options())
    assert result.tree.node_count == 13
    assert len(result.scene.edge_handles) == 12
    assert isinstance(result.sink, RecordingSink)


def test_paint_order_puts_nodes_above_edges() -> None:
    result = generate(_options())
    nodes = list(reversed(result.scene.node_handles))
    edges = list(reversed(result.scene.edge_handles))
    assert list(result.paint_order) == nodes + edges
    assert result.sink.paint_order() == list(result.paint_order)


def test_existing_objects_in_sink_keep_their_place() -> None:
    sink = RecordingSink(existing=["host_title", "host_background"])
    result = generate(_options(initial_lines=2, levels=1), sink=sink)
    assert result.paint_order[-2:] == ("host_title", "host_background")
    assert result.paint_order[:3] == ("RB_Node_L1_2", "RB_Node_L1_1", "RB_Node_L0_0")


def test_require_branches_rejects_root_only_tree_without_touching_sink() -> None:
    sink = RecordingSink()
    with pytest.raises(DegenerateGeometryError):
        generate(_options(initial_lines=0), sink=sink, require_branches=True)
    assert sink.paint_order() == []
    assert sink.progress_duration is None


def test_root_only_tree_is_allowed_by_default() -> None:
    result = generate(_options(initial_lines=0))
    assert result.tree.node_count == 1
    assert result.paint_order == ("RB_Node_L0_0",)
    assert result.timeline.max_time > 0.0


def test_generate_is_deterministic() -> None:
    a = generate(_options(seed=99, levels=3))
    b = generate(_options(seed=99, levels=3))
    assert a.tree == b.tree
    assert a.paint_order == b.paint_order
    assert a.timeline.max_time == b.timeline.max_time


def test_options_from_config_applies_overrides(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    set_config_path(None)
    try:
        opts = options_from_config({"levels": "2", "seed": 7})
    finally:
        set_config_path(None)
    assert opts.branch.levels == 2
    assert opts.branch.seed == 7
    assert opts.branch.initial_lines == 12
