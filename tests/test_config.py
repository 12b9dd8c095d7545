from pathlib import Path

from pogo_gamemaster import config


def test_log_level_defaults_to_info(monkeypatch) -> None:
    monkeypatch.delenv(config.LOG_LEVEL_ENV, raising=False)
    assert config.log_level() == "INFO"


def test_log_level_from_env(monkeypatch) -> None:
    monkeypatch.setenv(config.LOG_LEVEL_ENV, " debug ")
    assert config.log_level() == "DEBUG"


def test_gamemaster_path(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv(config.GAMEMASTER_FILE_ENV, str(tmp_path / "gm.json"))
    assert config.gamemaster_path() == Path(tmp_path / "gm.json")
    monkeypatch.setenv(config.GAMEMASTER_FILE_ENV, "  ")
    assert config.gamemaster_path() is None
