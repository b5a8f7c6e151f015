# どこで: `src/radial_branch/core/runtime_config.py`。
# 何を: 生成パラメータと出力先を持つ config.yaml を探して読み、不変の設定値にまとめる。
# なぜ: seed や階層数の既定値をコードから切り離し、ユーザーの YAML で差し替えられるようにするため。

"""radial_branch の実行時設定。

設定は次の順に重ねる（後勝ち、トップレベルの浅い上書き）:

1. 同梱 `radial_branch/resource/default_config.yaml`
2. 探索で最初に見つかったユーザー設定
   （`./.radial_branch/config.yaml`、`~/.config/radial_branch/config.yaml`）
3. `set_config_path()` で明示された設定

`generator:` のようなセクションを書くと、同梱側のセクションは丸ごと置き換わる。
欠けた generator キーは `options_from_mapping()` が既定値で補う。

結果はプロセス内で 1 回だけ構築してキャッシュする。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

_SUPPORTED_VERSION = 1
_PLAN_DECIMALS_DEFAULT = 3
_CURVE_SEGMENTS_DEFAULT = 16


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """構築済みの実行時設定。

    Attributes
    ----------
    config_path:
        重ねたユーザー設定のうち最後のもの（明示 > 探索）。無ければ None。
    output_dir:
        plan JSON などの出力ルート。
    generator:
        `generator:` セクション（読み取り専用 mapping）。
    plan_decimals:
        plan JSON の小数桁数。
    curve_segments:
        曲線エッジ 1 区間あたりの平坦化分割数。
    """

    config_path: Path | None
    output_dir: Path
    generator: Mapping[str, Any]
    plan_decimals: int
    curve_segments: int


_explicit_path: Path | None = None
_cached: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """明示 config を差し替え、キャッシュを捨てる。None で探索のみに戻す。"""

    global _explicit_path, _cached
    _explicit_path = None if path is None else Path(str(path)).expanduser()
    _cached = None


def _search_paths() -> tuple[Path, ...]:
    return (
        Path.cwd() / ".radial_branch" / "config.yaml",
        Path.home() / ".config" / "radial_branch" / "config.yaml",
    )


def _read_yaml(text: str, *, source: str) -> dict[str, Any]:
    """YAML を読み、トップレベルの dict を返す。空文書は `{}`。"""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"YAML として読めません: {source}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config のトップレベルは mapping である必要があります: {source}")
    return dict(data)


def _packaged_defaults() -> dict[str, Any]:
    source = "radial_branch/resource/default_config.yaml"
    try:
        text = (
            resources.files("radial_branch")
            .joinpath("resource")
            .joinpath("default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(f"同梱設定を読めません（package-data を確認）: {source}") from exc
    return _read_yaml(text, source=source)


def _section(payload: Mapping[str, Any], dotted: str) -> dict[str, Any]:
    """`export.plan` のようなドット区切りのセクションを dict で返す。欠けていれば `{}`。"""

    node: Any = payload
    for part in dotted.split("."):
        node = node.get(part) if isinstance(node, Mapping) else None
        if node is None:
            return {}
        if not isinstance(node, Mapping):
            raise RuntimeError(f"{dotted} は mapping である必要があります: got={node!r}")
    return dict(node)


def _int_or(value: Any, default: int, *, key: str, minimum: int) -> int:
    if value is None:
        return default
    try:
        out = int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if out < minimum:
        raise ValueError(f"{key} は {minimum} 以上である必要があります: got={out}")
    return out


def _output_dir(payload: Mapping[str, Any]) -> Path:
    raw = _section(payload, "paths").get("output_dir")
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise RuntimeError("paths.output_dir が空です（同梱 default_config.yaml を確認してください）")
    return Path(os.path.expandvars(os.path.expanduser(text)))


def _layered_payload() -> tuple[dict[str, Any], Path | None]:
    """同梱 → 探索 → 明示の順に重ねた payload と、最後に重ねたユーザー設定パスを返す。"""

    explicit = _explicit_path
    if explicit is not None and not explicit.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit}")

    layers = [p for p in _search_paths() if p.is_file()][:1]
    if explicit is not None:
        layers.append(explicit)

    payload = _packaged_defaults()
    for path in layers:
        payload.update(_read_yaml(path.read_text(encoding="utf-8"), source=str(path)))
    return payload, (layers[-1] if layers else None)


def runtime_config() -> RuntimeConfig:
    """実行時設定を返す。初回だけ YAML を読み、以後はキャッシュを返す。"""

    global _cached
    if _cached is not None:
        return _cached

    payload, config_path = _layered_payload()

    raw_version = payload.get("version")
    try:
        version = int(raw_version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config の version が不正です: got={raw_version!r}") from exc
    if version != _SUPPORTED_VERSION:
        raise RuntimeError(f"未対応の config version です: got={version}")

    generator = _section(payload, "generator")
    plan_decimals = _int_or(
        _section(payload, "export.plan").get("decimals"),
        _PLAN_DECIMALS_DEFAULT,
        key="export.plan.decimals",
        minimum=0,
    )
    curve_segments = _int_or(
        _section(payload, "curves").get("segments"),
        _CURVE_SEGMENTS_DEFAULT,
        key="curves.segments",
        minimum=1,
    )

    _cached = RuntimeConfig(
        config_path=config_path,
        output_dir=_output_dir(payload),
        generator=MappingProxyType(generator),
        plan_decimals=plan_decimals,
        curve_segments=curve_segments,
    )
    logger.debug("runtime config を読み込みました: config_path=%s", config_path)
    return _cached


def output_root_dir() -> Path:
    """出力ルートディレクトリ（`paths.output_dir`）を返す。"""

    return runtime_config().output_dir
