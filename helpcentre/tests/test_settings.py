import logging

import pytest

from helpcentre.settings import PROJECT_ROOT, configure_logging, load_settings

ENV_VARS = (
    "HELPCENTRE_CONFIG",
    "HELPCENTRE_CONTENT_ROOT",
    "HELPCENTRE_DEFAULT_GROUP",
    "HELPCENTRE_ADMIN_TOKEN",
    "HELPCENTRE_CACHE_ENTRIES",
    "HELPCENTRE_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path):
        settings = load_settings(tmp_path / "missing.yml")
        assert settings.content_root == PROJECT_ROOT / "public" / "data"
        assert settings.default_group == "uki"
        assert settings.admin_token == "admin123"
        assert settings.cache_entries == 256
        assert settings.debug is False

    def test_reads_yaml_file(self, tmp_path):
        path = tmp_path / "helpcentre.yml"
        path.write_text(
            "# local overrides\n"
            "content_root: content\n"
            "default_group: eu\n"
            "cache_entries: 0\n"
            "debug: true\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.content_root == PROJECT_ROOT / "content"
        assert settings.default_group == "eu"
        assert settings.cache_entries == 0
        assert settings.debug is True

    def test_environment_wins(self, tmp_path, monkeypatch):
        path = tmp_path / "helpcentre.yml"
        path.write_text("default_group: eu\n", encoding="utf-8")
        monkeypatch.setenv("HELPCENTRE_DEFAULT_GROUP", "na")
        monkeypatch.setenv("HELPCENTRE_CONTENT_ROOT", str(tmp_path))
        monkeypatch.setenv("HELPCENTRE_ADMIN_TOKEN", "s3cret")
        monkeypatch.setenv("HELPCENTRE_DEBUG", "yes")
        settings = load_settings(path)
        assert settings.default_group == "na"
        assert settings.content_root == tmp_path
        assert settings.admin_token == "s3cret"
        assert settings.debug is True

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "other.yml"
        path.write_text("admin_token: from-file\n", encoding="utf-8")
        monkeypatch.setenv("HELPCENTRE_CONFIG", str(path))
        assert load_settings().admin_token == "from-file"

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "helpcentre.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(TypeError):
            load_settings(path)


class TestConfigureLogging:
    def test_project_logger_level(self):
        configure_logging()
        assert logging.getLogger("helpcentre").level == logging.INFO

    def test_debug_switches_formatter(self):
        configure_logging(debug=True)
        handler = logging.getLogger("helpcentre").handlers[0]
        assert "%(funcName)s" in handler.formatter._fmt
