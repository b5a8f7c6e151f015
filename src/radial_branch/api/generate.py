"""
どこで: `src/radial_branch/api/generate.py`。
何を: 木の生成 → タイムライン → 投影 → 描画順の並べ替えを 1 回で実行する公開 API。
なぜ: CLI・書き出し・テストが同じパイプラインを共有し、途中状態を外へ出さないため。
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from radial_branch.core.errors import DegenerateGeometryError
from radial_branch.core.options import GeneratorOptions, options_from_mapping
from radial_branch.core.runtime_config import runtime_config
from radial_branch.core.timeline import Timeline, schedule
from radial_branch.core.tree import Tree, build_tree
from radial_branch.scene.projection import ProjectedScene, project_scene
from radial_branch.scene.reorder import apply_reorder
from radial_branch.scene.sink import RecordingSink, SceneSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """1 回の生成結果。"""

    options: GeneratorOptions
    tree: Tree
    timeline: Timeline
    scene: ProjectedScene
    paint_order: tuple[Hashable, ...]
    sink: SceneSink


def generate(
    options: GeneratorOptions | None = None,
    *,
    sink: SceneSink | None = None,
    require_branches: bool = False,
) -> GenerationResult:
    """放射状分岐シーンを生成する。

    Parameters
    ----------
    options : GeneratorOptions or None
        生成オプション。None なら既定値。
    sink : SceneSink or None
        投影先。None なら `RecordingSink` を新規に作る。
    require_branches : bool
        True のとき、root 以外のノードが無ければ `DegenerateGeometryError` にする。

    Returns
    -------
    GenerationResult
        木・タイムライン・投影結果・適用後の描画順。

    Notes
    -----
    木とタイムラインを最後まで計算してから sink に触れる。
    計算中の例外では sink は一切変更されない。
    """

    opts = GeneratorOptions() if options is None else options
    out_sink: SceneSink = RecordingSink() if sink is None else sink

    tree = build_tree(opts.branch)
    if require_branches and tree.node_count <= 1:
        raise DegenerateGeometryError(
            "root 以外のノードが生成されませんでした"
            f": initial_lines={opts.branch.initial_lines} levels={opts.branch.levels}"
        )
    timeline = schedule(tree, opts.animation, seed=opts.branch.seed)
    logger.debug(
        "tree/timeline を計算しました: nodes=%d edges=%d max_time=%.4f",
        tree.node_count,
        tree.edge_count,
        timeline.max_time,
    )

    scene = project_scene(tree, timeline, out_sink, opts.style)
    order = apply_reorder(out_sink, scene.node_handles, scene.edge_handles)

    logger.info(
        "radial branch を生成しました: seed=%d levels=%d nodes=%d edges=%d max_time=%.3fs",
        opts.branch.seed,
        opts.branch.levels,
        tree.node_count,
        tree.edge_count,
        timeline.max_time,
    )
    return GenerationResult(
        options=opts,
        tree=tree,
        timeline=timeline,
        scene=scene,
        paint_order=tuple(order),
        sink=out_sink,
    )


def options_from_config(overrides: Mapping[str, Any] | None = None) -> GeneratorOptions:
    """実行時設定の `generator:` に overrides を重ねてオプションを作る。"""

    merged: dict[str, Any] = dict(runtime_config().generator)
    if overrides:
        merged.update(overrides)
    return options_from_mapping(merged)
