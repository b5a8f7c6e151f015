"""
どこで: `src/radial_branch/devtools/generate_plan.py`。
何を: `python -m radial_branch generate ...` で生成を実行し、plan JSON を書き出す。
なぜ: ホストアプリを起動せずに、seed/パラメータ違いの候補を並べて比較できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from radial_branch.api.generate import generate, options_from_config
from radial_branch.core.options import parse_override
from radial_branch.core.output_paths import plan_output_path
from radial_branch.core.runtime_config import runtime_config, set_config_path
from radial_branch.export.plan import export_plan


def configure_logging(verbose: int) -> None:
    """`-v` の回数に応じてログレベルを設定する（0: WARNING, 1: INFO, 2 以上: DEBUG）。"""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def add_common_arguments(p: argparse.ArgumentParser) -> None:
    """generate / describe で共通の引数を追加する。"""
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="ログを詳細にする（-v: INFO, -vv: DEBUG）",
    )
    p.add_argument(
        "--config",
        default=None,
        help="config.yaml のパス（指定した場合は探索より優先）",
    )
    p.add_argument(
        "--seed",
        nargs="+",
        type=int,
        default=None,
        help="乱数 seed（複数指定可、既定: config の generator.seed）",
    )
    p.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="generator 設定の上書き（例: --set levels=4、複数指定可）",
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m radial_branch generate")
    add_common_arguments(p)
    p.add_argument(
        "--out",
        default=None,
        help="出力 JSON パス（--seed が 1 つのときのみ）",
    )
    p.add_argument(
        "--out-dir",
        default=None,
        help="出力ディレクトリ（省略時: <output_dir>/plan）",
    )
    p.add_argument(
        "--run-id",
        default=None,
        help="既定出力パスの run_id（ファイル名 suffix）",
    )
    p.add_argument(
        "--require-branches",
        action="store_true",
        help="root 以外のノードが無い場合はエラーにする",
    )

    args = p.parse_args(argv)

    if args.out is not None and args.out_dir is not None:
        p.error("--out と --out-dir は同時に指定できません")
    if args.out is not None and args.seed is not None and len(args.seed) != 1:
        p.error("--out は --seed が 1 つのときだけ指定できます（複数は --out-dir を使ってください）")

    return args


def collect_overrides(texts: list[str]) -> dict[str, str]:
    """`--set key=value` の列を dict にまとめる（後勝ち）。"""
    out: dict[str, str] = {}
    for text in texts:
        key, value = parse_override(text)
        out[key] = value
    return out


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

    for seed in seeds:
        run_overrides: dict[str, object] = dict(overrides)
        if seed is not None:
            run_overrides["seed"] = seed
        options = options_from_config(run_overrides)
        result = generate(options, require_branches=bool(args.require_branches))

        if args.out is not None:
            out_path = Path(str(args.out))
        else:
            out_dir = None if args.out_dir is None else Path(str(args.out_dir))
            out_path = plan_output_path(
                seed=options.branch.seed,
                levels=options.branch.levels,
                run_id=args.run_id,
                out_dir=out_dir,
            )

        saved = export_plan(
            result,
            out_path,
            decimals=cfg.plan_decimals,
            segments=cfg.curve_segments,
        )
        print(str(saved))

    return 0
