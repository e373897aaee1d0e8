from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    import langreader.reader_settings as reader_settings
    import langreader.utils as utils

    settings_dir = tmp_path / "settings"
    monkeypatch.setenv("LANGREADER_SETTINGS_DIR", str(settings_dir))
    for key in (
        "LANGREADER_SPACE_MARKER",
        "LANGREADER_EXPAND_ELLIPSIS",
        "LANGREADER_MAX_WORKERS",
        "LANGREADER_PARALLEL_THRESHOLD",
    ):
        monkeypatch.delenv(key, raising=False)

    utils.get_user_settings_dir.cache_clear()
    reader_settings.clear_cached_settings()
    yield settings_dir
    utils.get_user_settings_dir.cache_clear()
    reader_settings.clear_cached_settings()
