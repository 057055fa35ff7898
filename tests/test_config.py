"""
Tests for configuration management.
"""

import logging

import pytest
import yaml
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dumpstats.config import Config, Constants, Settings, setup_logging


@pytest.fixture
def sample_config():
    """Get custom configuration as YAML text."""
    return yaml.dump(
        {
            "receiver": {
                "latitude": 48.8566,
                "longitude": 2.3522,
                "name": "Paris, France",
            },
            "feed": {
                "host": "192.168.1.20",
                "port": 30003,
                "timeout_seconds": 10,
            },
            "snapshot": {"path": "data/stats_paris.out"},
            "charts": {
                "output_dir": "charts",
                "company_threshold": 3,
                "airline_db": "data/airlines.tsv",
            },
            "logging": {
                "level": "DEBUG",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "file": None,
            },
        }
    )


class TestConstants:
    """Tests for fixed constants."""

    def test_values(self):
        """Aggregation constants."""
        assert Constants.EARTH_RADIUS_KM == 6378.137
        assert Settings.POLAR_RANGE_SLOTS == 360
        assert Settings.MAX_FLIGHT_LEVEL == 500
        assert Settings.FLIGHT_BUFFER_TTL_SECONDS == 1800


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self):
        """Test loading default configuration."""
        for config in (Config(config_path="non_existent_config.yaml"), Config(config_path=None)):
            assert config.receiver_latitude == 50.0
            assert config.receiver_longitude == 16.0
            assert config.feed_host == "127.0.0.1"
            assert config.feed_port == 30003
            assert config.snapshot_path == "stats.out"
            assert config.company_threshold == 0
            assert config.log_file is None

    def test_custom_config(self, tmp_path, sample_config):
        """Test loading custom configuration from YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))
        assert config.receiver_name == "Paris, France"
        assert config.feed_host == "192.168.1.20"
        assert config.feed_timeout == 10
        assert config.snapshot_path == "data/stats_paris.out"
        assert config.chart_dir == "charts"
        assert config.company_threshold == 3
        assert config.airline_db_path == "data/airlines.tsv"
        assert config.log_level == "DEBUG"

    def test_save_config(self, tmp_path, sample_config):
        """Test saving configuration to YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))

        config.set("feed.port", 30005)
        config.save_config()

        reloaded_config = Config(config_path=str(custom_config_path))
        assert reloaded_config.feed_port == 30005

    def test_save_without_path(self):
        """Saving needs a path."""
        with pytest.raises(ValueError):
            Config().save_config()

    def test_malformed_config(self, tmp_path):
        """Test handling of malformed configuration file."""
        malformed_config_path = tmp_path / "malformed_config.yaml"
        malformed_config_path.write_text(
            """
receiver:
  latitude: not_a_number
  longitude: 2.3522
"""
        )
        config = Config(config_path=str(malformed_config_path))
        assert config.receiver_latitude == 50.0
        assert config.snapshot_path == "stats.out"

    def test_get_set(self):
        """Dot notation access."""
        config = Config()
        assert config.get("feed.port") == 30003
        assert config.get("feed.missing", "x") == "x"
        assert config.get("receiver.latitude.deeper", 1) == 1

        config.set("charts.company_threshold", 7)
        assert config.company_threshold == 7

        config.set("new.section.value", True)
        assert config.get("new.section.value") is True


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_log_file(self, tmp_path):
        """Records go to the log file."""
        log_file = tmp_path / "debug.log"
        setup_logging("DEBUG", "%(levelname)s %(message)s", str(log_file))

        logging.getLogger("dumpstats.test").debug("Discarded message.")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "DEBUG Discarded message." in log_file.read_text()
        assert logging.getLogger().level == logging.DEBUG

        setup_logging("INFO")
        assert logging.getLogger().level == logging.INFO
