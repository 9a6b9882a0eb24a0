import os
import tempfile

import yaml

from logquery.config import Config, load_config
from logquery.validator import DEFAULT_SCHEMA_PATH


class TestConfig:
    def test_default_config(self):
        """Verify defaults are loaded when no file is given."""
        config = Config()
        assert config["server"]["host"] == "0.0.0.0"
        assert config["server"]["port"] == 3000
        assert config["server"]["debug"] is False
        assert config["storage"]["path"] == "data/logs.json"
        assert config["query"]["default_limit"] == 50
        assert config["query"]["max_limit"] == 1000
        assert config["validation"]["schema_path"] == DEFAULT_SCHEMA_PATH
        assert config["cors"]["origins"] == "*"
        assert config["logging"]["level"] == "INFO"

    def test_load_from_yaml(self):
        """Write a temp YAML with overrides, verify merge."""
        override = {
            "server": {"port": 8080, "debug": True},
            "query": {"max_limit": 200},
        }
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False
        ) as f:
            yaml.dump(override, f)
            temp_path = f.name

        try:
            cfg = Config(temp_path)
            assert cfg["server"]["port"] == 8080
            assert cfg["server"]["debug"] is True
            assert cfg["server"]["host"] == "0.0.0.0"  # default preserved
            assert cfg["query"]["max_limit"] == 200
            assert cfg["query"]["default_limit"] == 50  # default preserved
        finally:
            os.unlink(temp_path)

    def test_missing_file_uses_defaults(self):
        cfg = Config("/nonexistent/path/config.yaml")
        assert cfg["server"]["port"] == 3000

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("server: [unclosed\n")
        cfg = Config(str(path))
        assert cfg["server"]["port"] == 3000

    def test_deep_merge(self):
        base = {"server": {"host": "localhost", "port": 5000, "debug": False}}
        override = {"server": {"port": 9090}}
        result = Config._deep_merge(base, override)
        assert result["server"]["port"] == 9090
        assert result["server"]["host"] == "localhost"
        assert result["server"]["debug"] is False


class TestEnvOverrides:
    def test_apply_env(self):
        cfg = Config().apply_env({
            "PORT": "8081",
            "LOG_STORE_PATH": "/var/lib/logs.json",
            "LOG_LEVEL": "debug",
        })
        assert cfg["server"]["port"] == 8081
        assert cfg["storage"]["path"] == "/var/lib/logs.json"
        assert cfg["logging"]["level"] == "DEBUG"

    def test_empty_env_values_ignored(self):
        cfg = Config().apply_env({"PORT": ""})
        assert cfg["server"]["port"] == 3000

    def test_load_config_reads_config_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({"storage": {"path": "elsewhere.json"}}))
        monkeypatch.setenv("CONFIG_PATH", str(path))
        monkeypatch.setenv("PORT", "4000")
        monkeypatch.delenv("LOG_STORE_PATH", raising=False)

        cfg = load_config()
        assert cfg["storage"]["path"] == "elsewhere.json"
        assert cfg["server"]["port"] == 4000
