"""Tests for settings resolution and the YAML config file."""

import os
from argparse import Namespace

from cli_config import build_settings, load_config_file
from constants import Constants


COMMON = dict(DRY_RUN=False, QUIET=False, LOG_FILE=None, LOG_LEVEL=None, CONFIG=None)


def node_args(**kwargs):
    return Namespace(action="node", **{**COMMON, **kwargs})


def dotnet_args(**kwargs):
    base = dict(COMMON, NO_CLEANUP=False, NO_PROFILE_UPDATE=False, DOTNET_ROOT=None)
    return Namespace(action="dotnet", **{**base, **kwargs})


def write_config(tmp_path, text):
    path = tmp_path / "config.yml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadConfigFile:
    def test_missing_default_is_silent(self, tmp_path):
        assert load_config_file(str(tmp_path / "nope.yml")) == ({}, [])

    def test_missing_explicit_warns(self, tmp_path):
        data, warnings = load_config_file(str(tmp_path / "nope.yml"), explicit=True)
        assert data == {}
        assert "not found" in warnings[0]

    def test_invalid_yaml_warns(self, tmp_path):
        data, warnings = load_config_file(write_config(tmp_path, "node: [unclosed"))
        assert data == {}
        assert "Failed to load config" in warnings[0]

    def test_non_mapping_warns(self, tmp_path):
        data, warnings = load_config_file(write_config(tmp_path, "- a\n- b\n"))
        assert data == {}
        assert "mapping" in warnings[0]


class TestBuildSettings:
    """CLI > environment > config file > default."""

    def test_defaults(self, tmp_path):
        env = {Constants.ENV_CONFIG: str(tmp_path / "absent.yml")}
        settings = build_settings(node_args(), env)
        assert settings.log_file == os.path.expanduser("~/.nvm-sync.log")
        assert settings.nvm_dir == os.path.expanduser("~/.nvm")
        assert settings.node_index_url is None

    def test_config_file_values(self, tmp_path):
        path = write_config(tmp_path, (
            "http:\n  timeout: 5\n  retries: 1\n"
            "dotnet:\n  log_file: /var/log/dn.log\n  dotnet_root: /opt/dn\n"
            "  releases_index_url: https://mirror.test/releases-index.json\n"
        ))
        settings = build_settings(dotnet_args(CONFIG=path), {})

        assert settings.log_file == "/var/log/dn.log"
        assert settings.dotnet_root == "/opt/dn"
        assert settings.releases_index_url == "https://mirror.test/releases-index.json"
        assert Constants.REQUEST_TIMEOUT == 5.0
        assert Constants.HTTP_RETRY_MAX == 1
        assert settings.warnings == []

    def test_environment_beats_config(self, tmp_path):
        path = write_config(tmp_path, "dotnet:\n  log_file: /from/config.log\n  dotnet_root: /from/config\n")
        env = {Constants.ENV_LOG_FILE: "/from/env.log", Constants.ENV_DOTNET_ROOT: "/from/env"}
        settings = build_settings(dotnet_args(CONFIG=path), env)
        assert settings.log_file == "/from/env.log"
        assert settings.dotnet_root == "/from/env"

    def test_cli_beats_environment(self, tmp_path):
        env = {
            Constants.ENV_CONFIG: str(tmp_path / "absent.yml"),
            Constants.ENV_LOG_FILE: "/from/env.log",
            Constants.ENV_DOTNET_ROOT: "/from/env",
        }
        settings = build_settings(dotnet_args(LOG_FILE="/from/cli.log", DOTNET_ROOT="/from/cli"), env)
        assert settings.log_file == "/from/cli.log"
        assert settings.dotnet_root == "/from/cli"

    def test_dotnet_flags(self, tmp_path):
        env = {Constants.ENV_CONFIG: str(tmp_path / "absent.yml")}
        settings = build_settings(dotnet_args(NO_CLEANUP=True, NO_PROFILE_UPDATE=True), env)
        assert settings.cleanup is False
        assert settings.update_profile is False

    def test_nvm_dir_from_environment(self, tmp_path):
        env = {Constants.ENV_CONFIG: str(tmp_path / "absent.yml"), Constants.ENV_NVM_DIR: "/srv/nvm"}
        assert build_settings(node_args(), env).nvm_dir == "/srv/nvm"

    def test_bad_http_settings_warn(self, tmp_path):
        path = write_config(tmp_path, "http:\n  timeout: soon\n")
        settings = build_settings(node_args(CONFIG=path), {})
        assert "invalid http settings" in settings.warnings[0]
