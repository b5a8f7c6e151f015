"""
どこで: `src/radial_branch/devtools/describe.py`。
何を: 生成結果の要約（階層ごとのノード数・総時間・エッジ経路の頂点数）を表示する。
なぜ: plan を書き出す前に、パラメータの効き方を素早く確認するため。
"""

from __future__ import annotations

import argparse
import sys

from radial_branch.api.generate import GenerationResult, generate, options_from_config
from radial_branch.core.curves import edge_geometry
from radial_branch.core.runtime_config import runtime_config, set_config_path
from radial_branch.devtools.generate_plan import (
    add_common_arguments,
    collect_overrides,
    configure_logging,
)
from radial_branch.scene.projection import edge_paths


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m radial_branch describe")
    add_common_arguments(p)
    return p.parse_args(argv)


def summary_lines(result: GenerationResult, *, segments: int) -> list[str]:
    """生成結果の要約を行のリストで返す。"""

    tree = result.tree
    timeline = result.timeline
    geometry = edge_geometry(edge_paths(tree, result.options.style), segments=segments)

    lines = [
        f"seed: {result.options.branch.seed}",
        f"nodes: {tree.node_count}",
        f"edges: {tree.edge_count}",
    ]
    for level, ids in enumerate(tree.levels):
        lines.append(f"  level {level}: {len(ids)}")
    lines.append(f"max_time: {timeline.max_time:.3f}s")
    lines.append(f"edge polyline vertices: {int(geometry.coords.shape[0])}")
    return lines


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.verbose:
        configure_logging(int(args.verbose))
    if args.config is not None:
        set_config_path(args.config)

    cfg = runtime_config()
    overrides = collect_overrides(list(args.overrides))
    seeds: list[int | None] = [None] if args.seed is None else [int(s) for s in args.seed]

    for i, seed in enumerate(seeds):
        run_overrides: dict[str, object] = dict(overrides)
        if seed is not None:
            run_overrides["seed"] = seed
        result = generate(options_from_config(run_overrides))
        if i > 0:
            print("")
        for line in summary_lines(result, segments=cfg.curve_segments):
            print(line)
    return 0
