"""Tests for resolver settings and the settings loader."""

import pytest
from pydantic import ValidationError
from require_resolution import ResolverSettings
from require_resolution import SettingsLoader
from require_resolution.settings import load_settings


@pytest.fixture
def loader(tmp_path, monkeypatch):
    monkeypatch.delenv("REQUIRE_INDEX_NAME", raising=False)
    monkeypatch.delenv("REQUIRE_EXTENSIONS", raising=False)
    return SettingsLoader(config_dir=tmp_path / "project" / ".require", user_dir=tmp_path / "user")


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestResolverSettings:
    def test_defaults(self):
        settings = ResolverSettings()
        assert settings.index_name == "index"
        assert settings.extensions == (".a", ".b")

    def test_entry_names(self):
        assert ResolverSettings().entry_names("util") == ("util.a", "util.b")

    def test_module_name(self):
        settings = ResolverSettings()
        assert settings.module_name("util.b") == "util"
        assert settings.module_name("util.c") is None
        assert settings.module_name(".a") is None

    def test_is_index_entry(self):
        settings = ResolverSettings(index_name="init")
        assert settings.is_index_entry("init.a")
        assert not settings.is_index_entry("index.a")

    @pytest.mark.parametrize(
        "extensions",
        [
            (".a", ".a"),
            ("a", ".b"),
            (".", ".b"),
            (".a", ".b", ".c"),
            (".a/x", ".b"),
        ],
    )
    def test_invalid_extensions(self, extensions):
        with pytest.raises(ValidationError):
            ResolverSettings(extensions=extensions)

    @pytest.mark.parametrize("index_name", ["", "a/b", ".", "..", "*", ":x"])
    def test_invalid_index_name(self, index_name):
        with pytest.raises(ValidationError):
            ResolverSettings(index_name=index_name)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ResolverSettings().index_name = "other"


class TestSettingsLoader:
    def test_no_files_gives_defaults(self, loader):
        assert loader.load() == ResolverSettings()

    def test_user_settings(self, loader):
        _write(loader.user_settings_file, "resolution:\n  index_name: main\n")
        assert loader.load().index_name == "main"

    def test_project_overrides_user(self, loader):
        _write(loader.user_settings_file, "resolution:\n  index_name: main\n  extensions: ['.x', '.y']\n")
        _write(loader.project_settings_file, "resolution:\n  index_name: init\n")

        settings = loader.load()
        assert settings.index_name == "init"
        assert settings.extensions == (".x", ".y")

    def test_local_overrides_project(self, loader):
        _write(loader.project_settings_file, "resolution:\n  index_name: init\n")
        _write(loader.local_settings_file, "resolution:\n  index_name: mod\n")
        assert loader.load().index_name == "mod"

    def test_env_overrides_files(self, loader, monkeypatch):
        _write(loader.project_settings_file, "resolution:\n  index_name: init\n")
        monkeypatch.setenv("REQUIRE_INDEX_NAME", "envindex")
        monkeypatch.setenv("REQUIRE_EXTENSIONS", ".src, .gen")

        settings = loader.load()
        assert settings.index_name == "envindex"
        assert settings.extensions == (".src", ".gen")

    def test_other_sections_ignored(self, loader):
        _write(loader.project_settings_file, "profile:\n  active: dev\nresolution: not-a-dict\n")
        assert loader.load() == ResolverSettings()

    def test_malformed_yaml_is_skipped(self, loader):
        _write(loader.project_settings_file, "resolution: [unclosed\n")
        assert loader.load() == ResolverSettings()

    def test_invalid_values_raise(self, loader):
        _write(loader.project_settings_file, "resolution:\n  extensions: ['.a']\n")
        with pytest.raises(ValidationError):
            loader.load()


def test_load_settings_reads_project_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("REQUIRE_INDEX_NAME", raising=False)
    monkeypatch.delenv("REQUIRE_EXTENSIONS", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    _write(tmp_path / ".require" / "settings.yaml", "resolution:\n  index_name: init\n")

    assert load_settings(tmp_path / ".require").index_name == "init"
