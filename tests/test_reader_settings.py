import json
import os

import pytest

from langreader import reader_settings, utils
from langreader.reader_settings import (
    DEFAULT_READER_CONFIG,
    ReaderConfig,
    apply_overrides,
    build_reader_config,
    clear_cached_settings,
    get_runtime_settings,
)


def _write_config(settings_dir, payload) -> None:
    settings_dir.mkdir(parents=True, exist_ok=True)
    (settings_dir / "config.json").write_text(json.dumps(payload), encoding="utf-8")


def test_defaults_without_config_file():
    settings = get_runtime_settings()

    assert settings == {
        "reader_space_marker": "\u00a0",
        "reader_expand_ellipsis": True,
        "reader_max_workers": 4,
        "reader_parallel_threshold": 8,
    }
    assert build_reader_config() == DEFAULT_READER_CONFIG


def test_config_file_values_are_used(isolated_settings):
    _write_config(
        isolated_settings,
        {"reader_space_marker": "_", "reader_expand_ellipsis": "false", "reader_max_workers": "2"},
    )

    config = build_reader_config()

    assert config == ReaderConfig(space_marker="_", expand_ellipsis=False, max_workers=2, parallel_threshold=8)


def test_invalid_values_fall_back_to_defaults(isolated_settings):
    _write_config(
        isolated_settings,
        {
            "reader_space_marker": "",
            "reader_expand_ellipsis": "maybe",
            "reader_max_workers": 0,
            "reader_parallel_threshold": True,
        },
    )

    assert build_reader_config() == DEFAULT_READER_CONFIG


def test_environment_fills_keys_missing_from_config(monkeypatch, isolated_settings):
    _write_config(isolated_settings, {"reader_max_workers": 3})
    monkeypatch.setenv("LANGREADER_MAX_WORKERS", "9")
    monkeypatch.setenv("LANGREADER_PARALLEL_THRESHOLD", "16")
    clear_cached_settings()

    settings = get_runtime_settings()

    assert settings["reader_max_workers"] == 3
    assert settings["reader_parallel_threshold"] == 16


def test_runtime_settings_are_cached(isolated_settings):
    first = get_runtime_settings()
    _write_config(isolated_settings, {"reader_space_marker": "_"})

    assert get_runtime_settings() == first

    clear_cached_settings()
    assert get_runtime_settings()["reader_space_marker"] == "_"


def test_apply_overrides_ignores_unknown_keys():
    merged = apply_overrides(get_runtime_settings(), {"reader_max_workers": "6", "voice": "af_nova"})

    assert merged["reader_max_workers"] == 6
    assert "voice" not in merged


def test_build_reader_config_from_explicit_settings():
    config = build_reader_config(settings={"reader_space_marker": "·"})

    assert config.space_marker == "·"
    assert config.max_workers == DEFAULT_READER_CONFIG.max_workers


def test_settings_dir_honours_override(isolated_settings):
    assert utils.get_user_settings_dir() == os.path.abspath(str(isolated_settings))
    assert os.path.isdir(isolated_settings)


def test_settings_dir_under_data_root(monkeypatch, tmp_path):
    monkeypatch.delenv("LANGREADER_SETTINGS_DIR", raising=False)
    monkeypatch.setenv("LANGREADER_DATA", str(tmp_path / "data"))
    utils.get_user_settings_dir.cache_clear()

    assert utils.get_user_settings_dir() == os.path.abspath(str(tmp_path / "data" / "settings"))


def test_settings_dir_falls_back_to_platform_config_dir(monkeypatch, tmp_path):
    import platformdirs

    monkeypatch.delenv("LANGREADER_SETTINGS_DIR", raising=False)
    monkeypatch.delenv("LANGREADER_DATA", raising=False)
    monkeypatch.delenv("LANGREADER_DATA_DIR", raising=False)
    monkeypatch.setattr(platformdirs, "user_config_dir", lambda *args, **kwargs: str(tmp_path / "platform"))
    utils.get_user_settings_dir.cache_clear()

    assert utils.get_user_settings_dir() == os.path.abspath(str(tmp_path / "platform"))
    assert os.path.isdir(tmp_path / "platform")


def test_save_and_load_config_round_trip(isolated_settings):
    utils.save_config({"reader_max_workers": 5})

    assert utils.load_config() == {"reader_max_workers": 5}

    clear_cached_settings()
    assert reader_settings.build_reader_config().max_workers == 5


@pytest.mark.parametrize("payload", ["{not json", "[1, 2, 3]"])
def test_unreadable_config_is_ignored(isolated_settings, payload):
    isolated_settings.mkdir(parents=True, exist_ok=True)
    (isolated_settings / "config.json").write_text(payload, encoding="utf-8")

    assert utils.load_config() == {}
    assert build_reader_config() == DEFAULT_READER_CONFIG
