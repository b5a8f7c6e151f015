# src/radial_branch/core/realized_geometry.py
# 平坦化したエッジ経路を 1 組の `(coords, offsets)` 配列に詰めて保持する。

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


def _checked_arrays(coords, offsets) -> tuple[np.ndarray, np.ndarray]:
    xy = np.asarray(coords, dtype=np.float64)
    if xy.size == 0:
        xy = xy.reshape(0, 2)
    if xy.ndim != 2 or xy.shape[1] != 2:
        raise ValueError(f"coords は shape (N,2) である必要があります: got={xy.shape}")

    idx = np.asarray(offsets).astype(np.int32, copy=False)
    if idx.ndim != 1 or idx.size == 0:
        raise ValueError(f"offsets は長さ 1 以上の 1 次元配列である必要があります: got={idx.shape}")
    if int(idx[0]) != 0 or int(idx[-1]) != xy.shape[0]:
        raise ValueError(
            f"offsets は 0 で始まり頂点数 {xy.shape[0]} で終わる必要があります: "
            f"got=[{int(idx[0])}, ..., {int(idx[-1])}]"
        )
    if idx.size > 1 and bool((idx[1:] < idx[:-1]).any()):
        raise ValueError("offsets が減少しています")
    return xy, idx


@dataclass(frozen=True, slots=True)
class RealizedGeometry:
    """ポリライン列。`i` 本目は `coords[offsets[i]:offsets[i+1]]`。

    coords は float64 (N,2)、offsets は int32 (M+1,)。
    構築時に検証し、どちらの配列も書き込み不可にする。
    """

    coords: np.ndarray
    offsets: np.ndarray

    def __post_init__(self) -> None:
        xy, idx = _checked_arrays(self.coords, self.offsets)
        for arr in (xy, idx):
            arr.setflags(write=False)
        object.__setattr__(self, "coords", xy)
        object.__setattr__(self, "offsets", idx)

    @property
    def n_lines(self) -> int:
        return int(self.offsets.shape[0]) - 1

    def line(self, index: int) -> np.ndarray:
        """index 番目のポリラインを shape (K,2) で返す。"""
        i = int(index)
        if not 0 <= i < self.n_lines:
            raise IndexError(f"polyline index が範囲外です: {i}")
        return self.coords[int(self.offsets[i]) : int(self.offsets[i + 1])]


def empty_geometry() -> RealizedGeometry:
    return RealizedGeometry(
        coords=np.zeros((0, 2), dtype=np.float64),
        offsets=np.zeros((1,), dtype=np.int32),
    )


def geometry_from_polylines(lines: Sequence[np.ndarray]) -> RealizedGeometry:
    """shape (K,2) のポリライン列を 1 つの RealizedGeometry に詰める。"""
    if not lines:
        return empty_geometry()
    arrays = [np.asarray(ln, dtype=np.float64).reshape(-1, 2) for ln in lines]
    counts = [int(a.shape[0]) for a in arrays]
    offsets = np.concatenate([[0], np.cumsum(counts)]).astype(np.int32)
    return RealizedGeometry(coords=np.concatenate(arrays, axis=0), offsets=offsets)
