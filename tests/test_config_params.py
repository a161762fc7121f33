"""Config loading and parameter merging."""
from __future__ import annotations

from pathlib import Path

import pytest

from sith_codec.config import load_config, load_default_config
from sith_codec.errors import ConfigError
from sith_codec.headers import HeaderRegistry
from sith_codec.params import CodecParams, merge_params
from sith_codec.transcode import Transcoder


def test_default_config_values() -> None:
    config = load_default_config()
    params = CodecParams.from_config(config)
    assert params.temp_dir is None
    assert params.temp_name_length == 16
    assert params.seed is None
    assert params.commit_mode == "auto"
    assert params.strict_headers is False
    assert params.registry() == HeaderRegistry()


def test_custom_config_merges_headers(tmp_path: Path) -> None:
    custom = tmp_path / "codec.yaml"
    custom.write_text('seed: 3\nstrict_headers: true\nheaders:\n  vo: "aa bb"\n', encoding="utf-8")

    params = CodecParams.from_config(load_config(custom))

    assert params.seed == 3
    assert params.strict_headers is True
    assert params.registry().vo == b"\xaa\xbb"
    assert params.registry() == HeaderRegistry(vo=b"\xaa\xbb")


def test_missing_config_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("seed: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(broken)


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(listing)


@pytest.mark.parametrize(
    "config",
    [
        {"commit_mode": "copy"},
        {"temp_name_length": 0},
        {"seed": "abc"},
        {"headers": ["sfx"]},
        {"strict_headers": "false"},
        {"strict_headers": 1},
    ],
)
def test_invalid_params(config: dict) -> None:
    with pytest.raises(ConfigError):
        CodecParams.from_config(config)


def test_merge_precedence_and_sources(tmp_path: Path) -> None:
    default = CodecParams()
    config = CodecParams(seed=9, commit_mode="delete_rename")
    merged, sources = merge_params(default, config, {"seed": 11, "temp_dir": tmp_path, "strict_headers": None})

    assert merged.seed == 11
    assert merged.commit_mode == "delete_rename"
    assert merged.temp_dir == tmp_path
    assert merged.strict_headers is False
    assert sources["seed"] == "cli"
    assert sources["temp_dir"] == "cli"
    assert sources["commit_mode"] == "config"
    assert sources["strict_headers"] == "default"


def test_transcoder_from_params(tmp_path: Path) -> None:
    params = CodecParams(temp_dir=tmp_path, seed=1, commit_mode="delete_rename", strict_headers=True)
    transcoder = Transcoder.from_params(params)
    assert transcoder.temp_paths.temp_dir == tmp_path
    assert transcoder.commit_mode == "delete_rename"
    assert transcoder.strict is True


def test_quoted_strict_flag_in_yaml_is_rejected(tmp_path: Path) -> None:
    custom = tmp_path / "codec.yaml"
    custom.write_text('strict_headers: "false"\n', encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        CodecParams.from_config(load_config(custom))
    assert "strict_headers" in excinfo.value.message
