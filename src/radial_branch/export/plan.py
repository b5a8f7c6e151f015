"""
どこで: `src/radial_branch/export/plan.py`。
何を: 記録済みシーン（RecordingSink）を、ホストが読める JSON の「plan」として保存する。
なぜ: ホストアプリ側のスクリプトが、計算をやり直さずにオブジェクト生成と再生だけを行えるようにするため。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np

from radial_branch.api.generate import GenerationResult
from radial_branch.scene.sink import EdgeSpec, NodeSpec, RecordingSink

logger = logging.getLogger(__name__)

PLAN_VERSION = 1

# 決定性（同一入力→同一出力）のための前提:
# - 数値は常に固定桁で丸める（_round）
# - `-0.0` は `0.0` に正規化する
# - キー順は固定（sort_keys は使わず、組み立て順をそのまま出す）


def _round(value: float, *, decimals: int) -> float:
    """小数を固定桁に丸め、`-0.0` を `0.0` に正規化して返す。"""

    r = round(float(value), int(decimals))
    if r == 0.0:
        return 0.0
    return r


def _round_seq(values, *, decimals: int) -> list[float]:
    return [_round(v, decimals=decimals) for v in values]


def _round_rows(arr: np.ndarray, *, decimals: int) -> list[list[float]]:
    return [_round_seq(row, decimals=decimals) for row in np.asarray(arr).tolist()]


def _node_payload(spec: NodeSpec, *, decimals: int) -> dict[str, Any]:
    return {
        "id": spec.id,
        "name": spec.name,
        "level": spec.level,
        "angle": _round(spec.angle, decimals=decimals),
        "radius": _round(spec.radius, decimals=decimals),
        "position": _round_seq(spec.position, decimals=decimals),
        "window": _round_seq(spec.window, decimals=decimals),
        "size": _round(spec.size, decimals=decimals),
        "stroke_width": _round(spec.stroke_width, decimals=decimals),
        "fill": _round_seq(spec.fill, decimals=decimals),
        "stroke": _round_seq(spec.stroke, decimals=decimals),
    }


def _edge_payload(
    spec: EdgeSpec, link: tuple[str, str], *, decimals: int, segments: int
) -> dict[str, Any]:
    return {
        "id": spec.id,
        "name": spec.name,
        "level": spec.level,
        "parent": spec.parent_id,
        "child": spec.child_id,
        "parent_name": link[0],
        "child_name": link[1],
        "window": _round_seq(spec.window, decimals=decimals),
        "width": _round(spec.width, decimals=decimals),
        "color": _round_seq(spec.color, decimals=decimals),
        "path": {
            "vertices": _round_rows(spec.path.vertices, decimals=decimals),
            "in_tangents": _round_rows(spec.path.in_tangents, decimals=decimals),
            "out_tangents": _round_rows(spec.path.out_tangents, decimals=decimals),
        },
        "polyline": _round_rows(spec.path.sample(segments), decimals=decimals),
    }


def plan_payload(
    result: GenerationResult, *, decimals: int = 3, segments: int = 16
) -> dict[str, Any]:
    """生成結果を JSON 化可能な dict に変換する。

    各エッジには、ベジェ表現（`path`）と、`segments` 分割で平坦化した `polyline` の両方を載せる。

    Raises
    ------
    TypeError
        `result.sink` が RecordingSink でない場合（記録が無いため書き出せない）。
    """

    sink = result.sink
    if not isinstance(sink, RecordingSink):
        raise TypeError(
            f"plan の書き出しには RecordingSink が必要です: got={type(sink).__name__}"
        )
    if sink.progress_duration is None:
        raise ValueError("progress driver が未生成のシーンは書き出せません")

    d = int(decimals)
    nodes = sorted(sink.nodes.values(), key=lambda s: s.id)
    edges = sorted(sink.edges.items(), key=lambda kv: kv[1].id)
    branch = result.options.branch

    return {
        "version": PLAN_VERSION,
        "seed": int(branch.seed),
        "levels": int(branch.levels),
        "center": _round_seq(result.tree.center, decimals=d),
        "max_time": _round(result.timeline.max_time, decimals=d),
        "progress": {
            "duration": _round(sink.progress_duration, decimals=d),
            "from": 0.0,
            "to": 100.0,
        },
        "nodes": [_node_payload(spec, decimals=d) for spec in nodes],
        "edges": [
            _edge_payload(spec, sink.links[handle], decimals=d, segments=int(segments))
            for handle, spec in edges
        ],
        "paint_order": [str(h) for h in sink.paint_order()],
    }


def plan_to_json(result: GenerationResult, *, decimals: int = 3, segments: int = 16) -> str:
    """生成結果を plan JSON 文字列にして返す（末尾改行つき）。"""

    payload = plan_payload(result, decimals=decimals, segments=segments)
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def export_plan(
    result: GenerationResult,
    path: str | Path,
    *,
    decimals: int = 3,
    segments: int = 16,
) -> Path:
    """plan JSON を `path` に保存し、保存先を返す。親ディレクトリは必要なら作る。"""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(plan_to_json(result, decimals=decimals, segments=segments), encoding="utf-8")
    logger.info("plan を保存しました: %s", out)
    return out
