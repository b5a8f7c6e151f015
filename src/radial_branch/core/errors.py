# どこで: `src/radial_branch/core/errors.py`。
# 何を: 生成処理が外へ投げる例外型を定義する。
# なぜ: 呼び出し側が「設定不正」と「枝が 1 本も無い」を区別して扱えるようにするため。

from __future__ import annotations


class ConfigurationError(ValueError):
    """構造的に解釈できない設定（mapping でない・未知キー等）を表す。

    範囲外の数値はクランプして続行するため、この例外にはならない。
    """


class DegenerateGeometryError(ValueError):
    """枝を要求されたのに root 以外のノードが 1 つも生成されなかったことを表す。"""
