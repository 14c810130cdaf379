"""
Tests for rteman.config and rteman.utils.jinja_env – loading rteman.yml.
"""

import os

import pytest
import yaml

from rteman.config import ProjectConfig, find_config_file, load_config
from rteman.exceptions import ConfigError
from rteman.utils.jinja_env import (
    create_jinja_env,
    env,
    env_is_set,
    env_required,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("RTEMAN_CONF", "RTEMAN_CONF_FILE", "RTEMAN_CONF_DIR"):
        monkeypatch.delenv(name, raising=False)


class TestEnvHelpers:

    def test_env_value(self, monkeypatch):
        monkeypatch.setenv("RTEMAN_TEST_VAR", "hello")
        assert env("RTEMAN_TEST_VAR") == "hello"

    def test_env_default(self, monkeypatch):
        monkeypatch.delenv("RTEMAN_TEST_VAR", raising=False)
        assert env("RTEMAN_TEST_VAR") == ""
        assert env("RTEMAN_TEST_VAR", default="fallback") == "fallback"

    def test_env_required_raises_when_empty(self, monkeypatch):
        monkeypatch.setenv("RTEMAN_TEST_VAR", "")
        with pytest.raises(ValueError, match="not set"):
            env_required("RTEMAN_TEST_VAR")

    def test_env_required_custom_message(self, monkeypatch):
        monkeypatch.delenv("RTEMAN_TEST_VAR", raising=False)
        with pytest.raises(ValueError, match="set it!"):
            env_required("RTEMAN_TEST_VAR", "set it!")

    def test_env_is_set(self, monkeypatch):
        monkeypatch.setenv("RTEMAN_TEST_VAR", "1")
        assert env_is_set("RTEMAN_TEST_VAR") is True
        monkeypatch.setenv("RTEMAN_TEST_VAR", "")
        assert env_is_set("RTEMAN_TEST_VAR") is False

    def test_extra_globals(self, tmp_path):
        (tmp_path / "t.yml").write_text("root: {{ project_root }}\n")
        jinja_env = create_jinja_env(
            str(tmp_path), extra_globals={"project_root": "/srv/site"})
        rendered = jinja_env.get_template("t.yml").render()
        assert yaml.safe_load(rendered) == {"root": "/srv/site"}


class TestLoadConfig:

    def test_plain_yaml(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text(
            "runtime_environments:\n"
            "  host:\n"
            "    enabled: true\n"
        )
        assert load_config(str(conf)) == {
            "runtime_environments": {"host": {"enabled": True}}}

    def test_enabled_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DDEV_PROJECT", "site")
        conf = tmp_path / "rteman.yml"
        conf.write_text(
            "runtime_environments:\n"
            "  ddev:\n"
            '    enabled: {{ env_is_set("DDEV_PROJECT") }}\n'
        )
        config = load_config(str(conf))
        assert config["runtime_environments"]["ddev"]["enabled"] is True

    def test_conf_file_and_dir_are_exposed(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text(
            'conf_file: {{ env("RTEMAN_CONF_FILE") }}\n'
            'conf_dir: {{ env("RTEMAN_CONF_DIR") }}\n'
        )
        config = load_config(str(conf))
        assert config["conf_file"] == str(conf)
        assert config["conf_dir"] == str(tmp_path)
        # only set while rendering
        assert "RTEMAN_CONF_FILE" not in os.environ

    def test_user_conf_file_var_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RTEMAN_CONF_FILE", "/custom/rteman.yml")
        conf = tmp_path / "rteman.yml"
        conf.write_text('conf_file: {{ env("RTEMAN_CONF_FILE") }}\n')
        assert load_config(str(conf))["conf_file"] == "/custom/rteman.yml"
        assert os.environ["RTEMAN_CONF_FILE"] == "/custom/rteman.yml"

    def test_empty_file(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("")
        assert load_config(str(conf)) == {}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="config file not found"):
            load_config(str(tmp_path / "nope.yml"))

    def test_env_required_raises_config_error(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RTEMAN_TEST_VAR", raising=False)
        conf = tmp_path / "rteman.yml"
        conf.write_text('db: {{ env_required("RTEMAN_TEST_VAR") }}\n')
        with pytest.raises(ConfigError, match="not set"):
            load_config(str(conf))

    def test_undefined_name_raises(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("db: {{ no_such_thing }}\n")
        with pytest.raises(ConfigError, match="failed to render"):
            load_config(str(conf))

    def test_invalid_yaml_raises(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("runtime_environments: [host\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(str(conf))

    def test_top_level_list_raises(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("- host\n- ddev\n")
        with pytest.raises(ConfigError, match="expected a mapping"):
            load_config(str(conf))


class TestFindConfigFile:

    def test_found_in_start_dir(self, tmp_path):
        (tmp_path / "rteman.yml").write_text("")
        assert find_config_file(str(tmp_path)) == str(tmp_path / "rteman.yml")

    def test_found_in_parent(self, tmp_path):
        (tmp_path / "rteman.yml").write_text("")
        sub = tmp_path / "web" / "modules"
        sub.mkdir(parents=True)
        assert find_config_file(str(sub)) == str(tmp_path / "rteman.yml")

    def test_not_found(self, tmp_path):
        assert find_config_file(str(tmp_path), conf_name="no-such.yml") is None


class TestProjectConfig:

    def test_explicit_conf_path(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("runtime_environments:\n  host: {enabled: true}\n")
        config = ProjectConfig(conf_path=str(conf))
        assert config.conf_path == str(conf)
        assert config.project_root == str(tmp_path)
        assert config.runtime_environments == {"host": {"enabled": True}}

    def test_conf_from_env_var(self, tmp_path, monkeypatch):
        conf = tmp_path / "other.yml"
        conf.write_text("tasks:\n  switch: {command: 'true'}\n")
        monkeypatch.setenv("RTEMAN_CONF", str(conf))
        config = ProjectConfig()
        assert config.conf_path == str(conf)
        assert config.tasks == {"switch": {"command": "true"}}

    def test_explicit_project_root_wins(self, tmp_path):
        conf = tmp_path / "rteman.yml"
        conf.write_text("")
        root = tmp_path / "site"
        root.mkdir()
        config = ProjectConfig(conf_path=str(conf), project_root=str(root))
        assert config.project_root == str(root)

    def test_no_config_file_is_empty(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = ProjectConfig(project_root=str(tmp_path))
        assert config.conf_path is None
        assert config.data == {}
        assert config.runtime_environments is None
        assert config.tasks == {}
        assert config.project_root == str(tmp_path)

    def test_missing_explicit_conf_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            ProjectConfig(conf_path=str(tmp_path / "missing.yml"))
