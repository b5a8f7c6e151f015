"""実行時設定（`radial_branch.core.runtime_config`）のテスト群。"""

from __future__ import annotations

from pathlib import Path

import pytest

from radial_branch.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # CWD / HOME の config.yaml を拾わないよう、空のディレクトリへ逃がす。
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    set_config_path(None)
    yield
    set_config_path(None)


def test_packaged_defaults_are_loaded() -> None:
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.output_dir == Path("data/output")
    assert cfg.plan_decimals == 3
    assert cfg.curve_segments == 16
    assert cfg.generator["initial_lines"] == 12
    assert cfg.generator["seed"] == 12345


def test_result_is_cached_until_path_changes(tmp_path: Path) -> None:
    first = runtime_config()
    assert runtime_config() is first

    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("export:\n  plan:\n    decimals: 5\n", encoding="utf-8")
    set_config_path(cfg_path)
    second = runtime_config()
    assert second is not first
    assert second.plan_decimals == 5


def test_discovered_config_in_cwd_overrides_top_level_sections(tmp_path: Path) -> None:
    local = tmp_path / ".radial_branch"
    local.mkdir()
    (local / "config.yaml").write_text(
        "paths:\n  output_dir: out_here\ngenerator:\n  levels: 2\n",
        encoding="utf-8",
    )
    cfg = runtime_config()
    assert cfg.config_path == local / "config.yaml"
    assert output_root_dir() == Path("out_here")
    # generator セクションは丸ごと置き換わる。
    assert dict(cfg.generator) == {"levels": 2}


def test_explicit_config_wins_over_discovered(tmp_path: Path) -> None:
    local = tmp_path / ".radial_branch"
    local.mkdir()
    (local / "config.yaml").write_text("curves:\n  segments: 4\n", encoding="utf-8")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("curves:\n  segments: 9\n", encoding="utf-8")

    set_config_path(explicit)
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.curve_segments == 9


def test_missing_explicit_config_raises(tmp_path: Path) -> None:
    set_config_path(tmp_path / "nope.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "- just\n- a list\n",
        "generator: [1, 2]\n",
        "paths:\n  output_dir: ''\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config_raises_runtime_error(tmp_path: Path, text: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    set_config_path(path)
    with pytest.raises(RuntimeError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    ["export:\n  plan:\n    decimals: -1\n", "curves:\n  segments: 0\n"],
)
def test_out_of_range_export_settings_raise_value_error(tmp_path: Path, text: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    set_config_path(path)
    with pytest.raises(ValueError):
        runtime_config()
