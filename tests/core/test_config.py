"""Tests for configuration loading."""

from pathlib import Path

import pytest

from playlist_player.core.config import (
    Config,
    LibraryConfig,
    WebConfig,
    apply_env_overrides,
    create_default_config,
    load_config,
    parse_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("PLAYLIST_PLAYER_ROOT", "PORT", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    # Keep .env lookup away from the real config directory
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_defaults():
    config = Config()
    assert config.library.supported_formats == [".mp3"]
    assert config.library.debounce_seconds == 1.0
    assert config.web.port == 3000
    assert config.web.allowed_origins == ["*"]
    assert config.logging.level == "INFO"


def test_parse_full_config(tmp_path):
    config = parse_config(
        {
            "library": {
                "root": str(tmp_path),
                "supported_formats": ["MP3", ".flac"],
                "debounce_seconds": 0.5,
                "watch": False,
            },
            "web": {"host": "127.0.0.1", "port": 8080, "allowed_origins": ["http://a"]},
            "logging": {"level": "debug", "console_output": True},
        }
    )

    assert config.library.root == str(tmp_path)
    assert config.library.supported_formats == [".mp3", ".flac"]
    assert config.library.debounce_seconds == 0.5
    assert config.library.watch is False
    assert config.web.host == "127.0.0.1"
    assert config.web.port == 8080
    assert config.web.allowed_origins == ["http://a"]
    assert config.logging.level == "DEBUG"
    assert config.logging.console_output is True


def test_library_root_expands_user():
    config = parse_config({"library": {"root": "~/tunes"}})
    assert config.library.root == str(Path.home() / "tunes")


def test_invalid_section_falls_back_to_defaults():
    config = parse_config({"library": {"debounce_seconds": -1}, "web": {"port": 70000}})
    assert config.library == LibraryConfig()
    assert config.web == WebConfig()


def test_validate_rejects_empty_formats():
    with pytest.raises(ValueError):
        LibraryConfig(supported_formats=[]).validate()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PLAYLIST_PLAYER_ROOT", str(tmp_path / "lib"))
    monkeypatch.setenv("PORT", "4100")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a, http://b,")

    config = apply_env_overrides(Config())

    assert config.library.root == str(tmp_path / "lib")
    assert config.web.port == 4100
    assert config.web.allowed_origins == ["http://a", "http://b"]


def test_invalid_port_env_is_ignored(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    assert apply_env_overrides(Config()).web.port == 3000


def test_load_config_writes_default_file(tmp_path):
    path = tmp_path / "conf" / "config.toml"

    config = load_config(path)

    assert path.exists()
    assert path.read_text(encoding="utf-8") == create_default_config()
    assert config.web.port == 3000


def test_default_file_round_trips(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(create_default_config(), encoding="utf-8")

    config = load_config(path)

    assert config.library.root == str(Path.home() / "Music" / "playlists")
    assert config.library.supported_formats == [".mp3"]
    assert config.web.port_search_range == 100


def test_load_config_env_beats_file(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[web]\nport = 5000\n', encoding="utf-8")
    monkeypatch.setenv("PORT", "5001")

    assert load_config(path).web.port == 5001


def test_malformed_toml_uses_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[library\nroot = ", encoding="utf-8")

    assert load_config(path) == Config()
