# どこで: `src/radial_branch/core/output_paths.py`。
# 何を: 生成パラメータに基づき、plan JSON などの出力ファイルの保存先パスを決める。
# なぜ: `output/{kind}/` 配下で、seed と階層数からファイル名を一意に決めて整理するため。

from __future__ import annotations

import re
from pathlib import Path

from radial_branch.core.runtime_config import output_root_dir

_PLAN_STEM = "radial_branch"


def _sanitize_run_id(run_id: str) -> str:
    """run_id をファイル名の一部として使える形に正規化して返す。"""

    return re.sub(r"[^A-Za-z0-9._-]+", "_", str(run_id))


def _run_id_suffix(run_id: str | None) -> str:
    """run_id の接尾辞（例: `_v1`）を返す。未指定なら空文字を返す。"""

    if run_id is None:
        return ""
    s = str(run_id).strip()
    if not s:
        return ""
    sanitized = _sanitize_run_id(s).strip("_")
    if not sanitized:
        return ""
    return f"_{sanitized}"


def _seed_text(seed: int) -> str:
    """seed をファイル名用に返す。負値は `m` 接頭辞にする（例: -5 → `m5`）。"""

    s = int(seed)
    return f"m{abs(s)}" if s < 0 else str(s)


def plan_filename(*, seed: int, levels: int, run_id: str | None = None) -> str:
    """plan JSON のファイル名（`radial_branch_seed<seed>_L<levels>[_<run_id>].json`）を返す。"""

    lv = int(levels)
    if lv < 0:
        raise ValueError("levels は 0 以上である必要がある")
    return f"{_PLAN_STEM}_seed{_seed_text(seed)}_L{lv}{_run_id_suffix(run_id)}.json"


def plan_output_path(
    *,
    seed: int,
    levels: int,
    run_id: str | None = None,
    out_dir: Path | None = None,
) -> Path:
    """plan JSON の保存先パスを返す。

    Notes
    -----
    - `out_dir` 未指定なら `<output_dir>/plan/` 配下になる。
    - ディレクトリの作成は書き出し側で行う。
    """

    base = Path(out_dir) if out_dir is not None else output_root_dir() / "plan"
    return base / plan_filename(seed=seed, levels=levels, run_id=run_id)
