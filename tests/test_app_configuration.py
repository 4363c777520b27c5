from logcord.configuration.app_configuration import (
    DEFAULT_ATTACHMENT_FETCH_TIMEOUT,
    DEFAULT_MESSAGE_CACHE_SIZE,
    AppConfig,
)


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LOGCORD_DEBUG", raising=False)
    config = AppConfig(tmp_path / "missing.yml")

    assert config.data == {}
    assert config.debug is False
    assert config.message_cache_size == DEFAULT_MESSAGE_CACHE_SIZE
    assert config.attachment_fetch_timeout == DEFAULT_ATTACHMENT_FETCH_TIMEOUT


def test_values_from_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("LOGCORD_DEBUG", raising=False)
    path = tmp_path / "app_config.yml"
    path.write_text("debug: true\nmessage_cache_size: 500\nattachment_fetch_timeout: 15\n", encoding="utf-8")

    config = AppConfig(path)

    assert config.debug is True
    assert config.message_cache_size == 500
    assert config.attachment_fetch_timeout == 15.0
    assert config.get("unknown", "fallback") == "fallback"


def test_environment_overrides_debug(tmp_path, monkeypatch):
    path = tmp_path / "app_config.yml"
    path.write_text("debug: true\n", encoding="utf-8")

    monkeypatch.setenv("LOGCORD_DEBUG", "0")
    assert AppConfig(path).debug is False

    monkeypatch.setenv("LOGCORD_DEBUG", "yes")
    assert AppConfig(tmp_path / "missing.yml").debug is True


def test_invalid_values_fall_back(tmp_path):
    path = tmp_path / "app_config.yml"
    path.write_text("message_cache_size: lots\nattachment_fetch_timeout: -3\n", encoding="utf-8")

    config = AppConfig(path)

    assert config.message_cache_size == DEFAULT_MESSAGE_CACHE_SIZE
    assert config.attachment_fetch_timeout == DEFAULT_ATTACHMENT_FETCH_TIMEOUT


def test_non_mapping_and_broken_yaml_are_ignored(tmp_path):
    path = tmp_path / "app_config.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert AppConfig(path).data == {}

    path.write_text("debug: [unclosed\n", encoding="utf-8")
    assert AppConfig(path).data == {}


def test_reload_picks_up_changes(tmp_path):
    path = tmp_path / "app_config.yml"
    path.write_text("message_cache_size: 10\n", encoding="utf-8")
    config = AppConfig(path)

    path.write_text("message_cache_size: 20\n", encoding="utf-8")
    config.reload()

    assert config.message_cache_size == 20
