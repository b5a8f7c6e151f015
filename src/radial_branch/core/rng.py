"""
どこで: `src/radial_branch/core/rng.py`。
何を: Lehmer（Park–Miller）型の乗算合同法による決定的乱数列を提供する。
なぜ: 木の幾何とタイムラインの揺らぎを、seed と呼び出し順だけで再現できるようにするため。
"""

from __future__ import annotations

LEHMER_MODULUS = 2147483647
LEHMER_MULTIPLIER = 16807


def normalize_seed(seed: int) -> int:
    """seed を内部状態 `[1, 2^31-2]` に畳み込んで返す。

    Notes
    -----
    剰余は被除数の符号を保つ（切り捨て除算の剰余）。
    負の seed は `-(|seed| mod m)` になり、0 以下なら `m-1` を足して正にする。
    seed=0 は不動点 0 にならず `2147483646` になる。
    """

    s = int(seed)
    r = abs(s) % LEHMER_MODULUS
    if s < 0:
        r = -r
    if r <= 0:
        r += LEHMER_MODULUS - 1
    return r


class LehmerRng:
    """seed から一意に決まる一様乱数列。

    状態は 1 個の整数だけで、`next()` は状態の純関数である。
    同じ seed・同じ呼び出し順なら、常に同じ値列を返す。
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = normalize_seed(seed)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """`[0, 1)` の一様乱数を返す。"""
        self._state = (self._state * LEHMER_MULTIPLIER) % LEHMER_MODULUS
        return (self._state - 1) / (LEHMER_MODULUS - 1)

    def range(self, lo: float, hi: float) -> float:
        """`[lo, hi)` の一様乱数を返す。"""
        lo_f = float(lo)
        return lo_f + (float(hi) - lo_f) * self.next()


def create_rng(seed: int) -> LehmerRng:
    """seed から新しい `LehmerRng` を作って返す。"""
    return LehmerRng(int(seed))
