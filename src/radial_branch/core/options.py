"""
どこで: `src/radial_branch/core/options.py`。
何を: 木の生成・タイムライン・見た目の各オプションを不変データとして定義し、
      生の mapping（YAML / CLI）からクランプ付きで構築する境界を提供する。
なぜ: コアには検証済みの値だけを渡し、入力の揺れは境界で吸収するため。
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import yaml

from radial_branch.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

RGBA = tuple[float, float, float, float]

SEED_MIN = -2147483647
SEED_MAX = 2147483646


@dataclass(frozen=True, slots=True)
class BranchOptions:
    """木（ノード配置）の生成パラメータ。

    Parameters
    ----------
    initial_lines : int
        root から出る第 1 階層の本数。360° を等分して配置する。
    levels : int
        root より下の階層数。
    children_per_node : int
        第 2 階層以降で各ノードが持つ子の数。
    base_radius : float
        第 1 階層の半径。
    radius_step : float
        階層が 1 つ下がるごとに足す半径。
    radius_jitter : float
        半径の揺らぎ幅（`U(-j, +j)`）。
    angle_jitter : float
        角度の揺らぎ幅 [deg]。
    branch_spread : float
        子どうしが広がる角度幅 [deg]。
    seed : int
        乱数 seed（0 は 1 として扱う）。
    center : tuple[float, float]
        配置の中心座標。
    """

    initial_lines: int = 12
    levels: int = 3
    children_per_node: int = 2
    base_radius: float = 250.0
    radius_step: float = 180.0
    radius_jitter: float = 40.0
    angle_jitter: float = 8.0
    branch_spread: float = 60.0
    seed: int = 12345
    center: tuple[float, float] = (960.0, 540.0)


@dataclass(frozen=True, slots=True)
class AnimationOptions:
    """タイムライン（成長アニメーション）の生成パラメータ。時間の単位は秒。"""

    node_duration: float = 0.22
    line_duration: float = 0.35
    child_stagger: float = 0.05
    random_offset: float = 0.06
    simultaneous_root: bool = False
    smooth_flow: bool = True


@dataclass(frozen=True, slots=True)
class StyleOptions:
    """シーンオブジェクトへ渡す見た目のパラメータ。"""

    canvas_size: tuple[int, int] = (1920, 1080)
    circle_size: float = 26.0
    line_width: float = 4.0
    circle_fill: RGBA = (0.137, 0.2, 0.345, 1.0)
    circle_stroke: RGBA = (0.835, 0.894, 1.0, 1.0)
    line_color: RGBA = (0.835, 0.894, 1.0, 1.0)
    use_curves: bool = False
    curve_tension: float = 0.45
    curve_randomness: float = 0.35


@dataclass(frozen=True, slots=True)
class GeneratorOptions:
    """1 回の生成に必要な全オプション。"""

    branch: BranchOptions = field(default_factory=BranchOptions)
    animation: AnimationOptions = field(default_factory=AnimationOptions)
    style: StyleOptions = field(default_factory=StyleOptions)


# key -> (min, max)。None は片側無制限。
_INT_RANGES: dict[str, tuple[int | None, int | None]] = {
    "initial_lines": (1, 720),
    "levels": (1, 10),
    "children_per_node": (1, 8),
    "seed": (SEED_MIN, SEED_MAX),
}

_FLOAT_RANGES: dict[str, tuple[float | None, float | None]] = {
    "base_radius": (1.0, None),
    "radius_step": (0.0, None),
    "radius_jitter": (0.0, None),
    "angle_jitter": (0.0, None),
    "branch_spread": (0.0, 360.0),
    "node_duration": (0.05, None),
    "line_duration": (0.05, None),
    "child_stagger": (0.0, None),
    "random_offset": (0.0, None),
    "circle_size": (2.0, None),
    "line_width": (0.5, None),
    "curve_tension": (0.0, 1.0),
    "curve_randomness": (0.0, 1.0),
}

_BOOL_KEYS = ("simultaneous_root", "smooth_flow", "use_curves")
_COLOR_KEYS = ("circle_fill", "circle_stroke", "line_color")

_BRANCH_KEYS = (
    "initial_lines",
    "levels",
    "children_per_node",
    "base_radius",
    "radius_step",
    "radius_jitter",
    "angle_jitter",
    "branch_spread",
    "seed",
)
_ANIMATION_KEYS = (
    "node_duration",
    "line_duration",
    "child_stagger",
    "random_offset",
    "simultaneous_root",
    "smooth_flow",
)
_STYLE_KEYS = (
    "circle_size",
    "line_width",
    "circle_fill",
    "circle_stroke",
    "line_color",
    "use_curves",
    "curve_tension",
    "curve_randomness",
)
_CANVAS_KEYS = ("canvas_width", "canvas_height")
_CANVAS_MIN = 16

KNOWN_KEYS: frozenset[str] = frozenset(
    (*_BRANCH_KEYS, *_ANIMATION_KEYS, *_STYLE_KEYS, *_CANVAS_KEYS)
)


def _clamp(value, lo, hi, *, key: str):
    out = value
    if lo is not None and out < lo:
        out = lo
    if hi is not None and out > hi:
        out = hi
    if out != value:
        logger.info("%s を範囲内にクランプしました: %r -> %r", key, value, out)
    return out


def _fallback(key: str, value: Any, default: Any) -> Any:
    warnings.warn(
        f"{key} を解釈できないため既定値を使います: {value!r} -> {default!r}",
        UserWarning,
        stacklevel=4,
    )
    return default


def _read_int(values: Mapping[str, Any], key: str, default: int) -> int:
    """int として読み、解釈できなければ既定値、範囲外ならクランプする。"""

    raw = values.get(key)
    if raw is None:
        return int(default)
    if isinstance(raw, bool):
        v = _fallback(key, raw, default)
    else:
        try:
            # "12.7" のような文字列も先頭の整数部として受け付ける。
            v = int(float(raw)) if isinstance(raw, str) else int(raw)
        except (TypeError, ValueError, OverflowError):
            v = _fallback(key, raw, default)
    lo, hi = _INT_RANGES.get(key, (None, None))
    return int(_clamp(int(v), lo, hi, key=key))


def _read_float(values: Mapping[str, Any], key: str, default: float) -> float:
    """float として読み、解釈できなければ既定値、範囲外ならクランプする。"""

    raw = values.get(key)
    if raw is None:
        return float(default)
    if isinstance(raw, bool):
        v = _fallback(key, raw, default)
    else:
        try:
            v = float(raw)
        except (TypeError, ValueError):
            v = _fallback(key, raw, default)
        else:
            if v != v or v in (float("inf"), float("-inf")):
                v = _fallback(key, raw, default)
    lo, hi = _FLOAT_RANGES.get(key, (None, None))
    return float(_clamp(float(v), lo, hi, key=key))


def _read_bool(values: Mapping[str, Any], key: str, default: bool) -> bool:
    raw = values.get(key)
    if raw is None:
        return bool(default)
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and int(raw) in (0, 1):
        return bool(int(raw))
    if isinstance(raw, str):
        s = raw.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return bool(_fallback(key, raw, default))


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _color_components(raw: Any) -> list[float]:
    """色指定を数値列にする。文字列は YAML（`[0.1, 0.2, 0.3]`）かカンマ区切りとして読む。"""

    value = raw
    if isinstance(raw, str):
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ValueError(f"色として読めません: {raw!r}") from exc
        if isinstance(value, str):
            value = value.split(",")
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise TypeError(f"色は数値の配列である必要があります: {raw!r}")
    return [float(c) for c in value]


def _read_color(values: Mapping[str, Any], key: str, default: RGBA) -> RGBA:
    """RGB / RGBA の 0..1 配列を読む。alpha 省略時は 1.0 とする。"""

    raw = values.get(key)
    if raw is None:
        return default
    try:
        seq = _color_components(raw)
    except (TypeError, ValueError):
        return _fallback(key, raw, default)
    if len(seq) == 3:
        seq.append(1.0)
    if len(seq) != 4:
        return _fallback(key, raw, default)
    r, g, b, a = (_clamp01(c) for c in seq)
    return (r, g, b, a)


def options_from_mapping(values: Mapping[str, Any] | None) -> GeneratorOptions:
    """生の mapping から `GeneratorOptions` を構築する。

    Parameters
    ----------
    values : Mapping[str, Any] or None
        フラットなキー（`initial_lines`, `node_duration`, `canvas_width` など）の mapping。
        None は空 mapping と同じ扱い。

    Returns
    -------
    GeneratorOptions
        クランプ済みの不変オプション。

    Raises
    ------
    ConfigurationError
        mapping でない場合、または未知のキーを含む場合。

    Notes
    -----
    - 範囲外の値はクランプして続行する（例外にしない）。
    - 数値として解釈できない値は UserWarning を出して既定値に戻す。
    - 配置の中心は canvas の中心になる。
    """

    if values is None:
        values = {}
    if not isinstance(values, Mapping):
        raise ConfigurationError(
            f"generator 設定は mapping である必要があります: got={type(values).__name__}"
        )

    unknown = sorted(str(k) for k in values.keys() if str(k) not in KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"未知の generator 設定キーです: {unknown}")

    b0 = BranchOptions()
    a0 = AnimationOptions()
    s0 = StyleOptions()

    canvas_w = _read_int(values, "canvas_width", s0.canvas_size[0])
    canvas_h = _read_int(values, "canvas_height", s0.canvas_size[1])
    canvas_w = max(_CANVAS_MIN, canvas_w)
    canvas_h = max(_CANVAS_MIN, canvas_h)

    branch = BranchOptions(
        initial_lines=_read_int(values, "initial_lines", b0.initial_lines),
        levels=_read_int(values, "levels", b0.levels),
        children_per_node=_read_int(values, "children_per_node", b0.children_per_node),
        base_radius=_read_float(values, "base_radius", b0.base_radius),
        radius_step=_read_float(values, "radius_step", b0.radius_step),
        radius_jitter=_read_float(values, "radius_jitter", b0.radius_jitter),
        angle_jitter=_read_float(values, "angle_jitter", b0.angle_jitter),
        branch_spread=_read_float(values, "branch_spread", b0.branch_spread),
        seed=_read_int(values, "seed", b0.seed),
        center=(canvas_w / 2.0, canvas_h / 2.0),
    )
    animation = AnimationOptions(
        node_duration=_read_float(values, "node_duration", a0.node_duration),
        line_duration=_read_float(values, "line_duration", a0.line_duration),
        child_stagger=_read_float(values, "child_stagger", a0.child_stagger),
        random_offset=_read_float(values, "random_offset", a0.random_offset),
        simultaneous_root=_read_bool(values, "simultaneous_root", a0.simultaneous_root),
        smooth_flow=_read_bool(values, "smooth_flow", a0.smooth_flow),
    )
    style = StyleOptions(
        canvas_size=(canvas_w, canvas_h),
        circle_size=_read_float(values, "circle_size", s0.circle_size),
        line_width=_read_float(values, "line_width", s0.line_width),
        circle_fill=_read_color(values, "circle_fill", s0.circle_fill),
        circle_stroke=_read_color(values, "circle_stroke", s0.circle_stroke),
        line_color=_read_color(values, "line_color", s0.line_color),
        use_curves=_read_bool(values, "use_curves", s0.use_curves),
        curve_tension=_read_float(values, "curve_tension", s0.curve_tension),
        curve_randomness=_read_float(values, "curve_randomness", s0.curve_randomness),
    )
    return GeneratorOptions(branch=branch, animation=animation, style=style)


def parse_override(text: str) -> tuple[str, str]:
    """CLI の `key=value` を `(key, value)` に分解する。"""

    key, sep, value = str(text).partition("=")
    key = key.strip()
    if not sep or not key:
        raise ConfigurationError(f"--set は key=value 形式で指定してください: {text!r}")
    return key, value.strip()
