# どこで: `src/radial_branch/__main__.py`。
# 何を: `python -m radial_branch ...` の CLI エントリポイントを提供する。
# なぜ: plan の書き出しと要約表示を短い導線で実行できるようにするため。

from __future__ import annotations

import argparse
import sys

from radial_branch.core.errors import ConfigurationError, DegenerateGeometryError


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="python -m radial_branch")
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="ログを詳細にする（-v: INFO, -vv: DEBUG）。サブコマンドの後ろにも書ける",
    )
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser(
        "generate",
        help="生成して plan JSON を書き出す",
        add_help=False,
    )
    sub.add_parser(
        "describe",
        help="生成結果の要約を表示する",
        add_help=False,
    )

    args, rest = p.parse_known_args(argv)

    sub_argv = list(rest)
    if sub_argv and sub_argv[0] == "--":
        sub_argv = sub_argv[1:]
    # サブコマンドの前に書かれた -v はサブコマンド側でまとめて数える。
    sub_argv = ["-v"] * int(args.verbose) + sub_argv

    try:
        if args.cmd == "generate":
            from radial_branch.devtools import generate_plan

            return int(generate_plan.main(sub_argv))

        if args.cmd == "describe":
            from radial_branch.devtools import describe

            return int(describe.main(sub_argv))
    except (ConfigurationError, DegenerateGeometryError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
