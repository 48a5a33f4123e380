"""Unit tests for configuration management."""

import json
import logging
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import pytest

from srcmap.config import (
    LogLevel,
    NormalizeConfig,
    SrcmapConfig,
    create_default_config,
    find_config_file,
    load_config,
)


class TestNormalizeConfig:
    """Test NormalizeConfig model."""

    def test_defaults(self):
        config = NormalizeConfig()
        assert config.base_dir == "base"
        assert config.default_id_type == "none"

    def test_alias_and_field_name(self):
        assert NormalizeConfig(baseDir="proj").base_dir == "proj"
        assert NormalizeConfig(base_dir="proj").base_dir == "proj"

    def test_invalid_base_dir_rejected(self):
        """Test that the base dir is validated like the normalizer does."""
        with pytest.raises(ValueError, match="alphanumeric"):
            NormalizeConfig(baseDir="my project")

        with pytest.raises(ValueError, match="cannot be empty"):
            NormalizeConfig(baseDir="")

    def test_default_id_type_normalized(self):
        assert NormalizeConfig(defaultIdType="SHA256").default_id_type == "sha256"
        assert NormalizeConfig(default_id_type=" md5 ").default_id_type == "md5"

    @pytest.mark.parametrize("bad", ["crc32", "", "sha-1"])
    def test_unknown_default_id_type_rejected(self, bad):
        with pytest.raises(ValueError, match="unknown id type"):
            NormalizeConfig(defaultIdType=bad)

    def test_unknown_default_id_type_in_file(self, tmp_path):
        path = tmp_path / ".srcmap.json"
        path.write_text(json.dumps({"normalize": {"defaultIdType": "crc32"}}))
        with pytest.raises(ValueError, match="unknown id type"):
            load_config(path)


class TestSrcmapConfig:
    """Test complete SrcmapConfig model."""

    def test_config_from_dict(self):
        """Test config creation from dictionary."""
        config_data = {
            "normalize": {"baseDir": "firmware", "defaultIdType": "md5"},
            "processors": {"ldefs": "custom.ldefs"},
            "logging": {"level": "debug"},
        }

        config = SrcmapConfig(**config_data)
        assert config.normalize.base_dir == "firmware"
        assert config.normalize.default_id_type == "md5"
        assert config.processors.ldefs == "custom.ldefs"
        assert config.logging.level == LogLevel.DEBUG

    def test_config_extra_fields_forbidden(self):
        """Test that extra fields are rejected."""
        with pytest.raises(ValueError):
            SrcmapConfig(invalid_field="should-fail")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            SrcmapConfig(logging={"level": "trace"})

    def test_log_level_mapping(self):
        assert LogLevel.WARN.to_logging() == logging.WARNING
        assert LogLevel.DEBUG.to_logging() == logging.DEBUG


class TestConfigFileOperations:
    """Test configuration file loading and discovery."""

    def test_load_config_with_file(self):
        """Test loading config from existing file."""
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".srcmap.json"
            with open(config_file, "w") as f:
                json.dump({"normalize": {"baseDir": "from_file"}}, f)

            config = load_config(config_file)
            assert config.normalize.base_dir == "from_file"

    def test_load_config_file_not_found(self):
        """Test loading config when an explicit file doesn't exist."""
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / "nonexistent.json"
            with pytest.raises(FileNotFoundError):
                load_config(config_file)

    def test_load_config_invalid_json(self):
        """Test loading config with invalid JSON."""
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".srcmap.json"
            with open(config_file, "w") as f:
                f.write("{invalid json")

            with pytest.raises(ValueError, match="Invalid JSON"):
                load_config(config_file)

    def test_load_config_invalid_structure(self):
        """Test loading config with invalid structure."""
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".srcmap.json"
            with open(config_file, "w") as f:
                json.dump({"invalid": "structure"}, f)

            with pytest.raises(ValueError, match="Failed to load config"):
                load_config(config_file)

    def test_find_config_file_parent_dir(self):
        """Test finding config file in parent directory."""
        with TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            config_file = temp_path / ".srcmap.json"
            config_file.touch()

            sub_dir = temp_path / "a" / "b"
            sub_dir.mkdir(parents=True)

            found = find_config_file(sub_dir)
            assert found == config_file.resolve()

    def test_find_config_file_not_found(self):
        """Test config file discovery when not found."""
        with TemporaryDirectory() as temp_dir:
            with patch("pathlib.Path.exists", return_value=False):
                assert find_config_file(Path(temp_dir)) is None

    def test_create_default_config(self):
        config = create_default_config()
        assert config.normalize.base_dir == "base"
        assert config.processors.ldefs is None
        assert config.logging.level == LogLevel.WARN


class TestConfigIntegration:
    """Integration tests for configuration system."""

    def test_zero_config_operation(self):
        """Test zero-config operation with defaults."""
        with patch("srcmap.config.find_config_file", return_value=None):
            config = load_config()
            assert config == create_default_config()

    def test_discovered_config_used(self):
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".srcmap.json"
            with open(config_file, "w") as f:
                json.dump({"normalize": {"baseDir": "discovered"}}, f)

            with patch("srcmap.config.find_config_file", return_value=config_file):
                assert load_config().normalize.base_dir == "discovered"
