"""
DumpStats Configuration Management

This module provides configuration management for the DumpStats collector.
It includes physical constants, aggregation settings, chart options, and
runtime configuration loaded from YAML files.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# =============================================================================
# Physical Constants
# =============================================================================


class Constants:
    """Physical constants representing real-world measurements."""

    EARTH_RADIUS_KM: float = 6378.137  # Equatorial radius (WGS-84)
    NM_PER_KM: float = 0.53996  # Nautical miles in one kilometer
    FEET_PER_FLIGHT_LEVEL: int = 100  # FL350 = 35000 ft


# =============================================================================
# Aggregation Settings
# =============================================================================


class Settings:
    """Fixed settings of the aggregation engine and chart output."""

    # --- Aggregates ---
    POLAR_RANGE_SLOTS: int = 360  # One slot per whole degree of bearing
    MAX_FLIGHT_LEVEL: int = 500  # Highest recorded flight level (FL500)
    HEATMAP_RESOLUTION: int = 100  # Cells per degree (0.01 deg quantization)

    # --- Flight Buffer ---
    FLIGHT_BUFFER_TTL_SECONDS: int = 1800  # Keep ICAO24/callsign pairs 30 min

    # --- Snapshot ---
    FLUSH_PERIOD_SECONDS: int = 60  # Snapshot + buffer eviction once a minute

    # --- Feed ---
    DEFAULT_FEED_HOST: str = "127.0.0.1"
    DEFAULT_FEED_PORT: int = 30003  # dump1090 BaseStation output
    DEFAULT_FEED_TIMEOUT: int = 30  # seconds

    # --- Visualization ---
    DEFAULT_MAP_STYLE: str = "OpenStreetMap"  # Base map tile style
    POLAR_MAP_ZOOM: int = 7  # Initial zoom of the polar range map
    HEATMAP_ZOOM: int = 9  # Initial zoom of the heatmap
    POLAR_STROKE_WEIGHT: int = 2  # Polar polygon outline thickness
    POLAR_STROKE_OPACITY: float = 0.8  # Polar polygon outline transparency
    POLAR_FILL_OPACITY: float = 0.35  # Polar polygon fill transparency
    HEATMAP_CELL_SLACK_KM: float = 1.0  # Cell rounding beyond the polar range


# =============================================================================
# Color Schemes
# =============================================================================


class Colors:
    """Color definitions for charts."""

    POLAR_RANGE_COLOR: str = "#FF0000"  # Polar range polygon (red)

    # Heatmap gradient stops (cyan to red)
    HEATMAP_GRADIENT: Dict[float, str] = {
        0.0: "#00ffff",
        0.25: "#007fff",
        0.5: "#0000bf",
        0.75: "#7f003f",
        1.0: "#ff0000",
    }


# =============================================================================
# Runtime Configuration
# =============================================================================


class Config:
    """
    Runtime configuration manager for DumpStats.

    Loads settings from YAML files or uses sensible defaults.
    Provides property-based access to common settings.

    Example:
        >>> config = Config('config.yaml')
        >>> print(f"Receiver at {config.receiver_latitude}, {config.receiver_longitude}")
        >>> print(f"Feed: {config.feed_host}:{config.feed_port}")
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file. If None or missing,
                        uses default configuration.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file or return defaults.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
                if self._validate_config(config):
                    return config
                else:
                    logger.warning("Invalid config structure in %s, using defaults", self.config_path)
                    return self._get_default_config()
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            return self._get_default_config()

    def _validate_config(self, config: Dict[str, Any]) -> bool:
        """
        Validate configuration structure and required fields.

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            # Required: receiver section
            assert "receiver" in config
            assert "latitude" in config["receiver"]
            assert "longitude" in config["receiver"]
            assert isinstance(config["receiver"]["latitude"], (float, int))
            assert isinstance(config["receiver"]["longitude"], (float, int))
            assert -90 <= config["receiver"]["latitude"] <= 90
            assert -180 <= config["receiver"]["longitude"] <= 180

            # Required: feed section
            assert "feed" in config
            assert "port" in config["feed"]
            assert isinstance(config["feed"]["port"], int)
            assert 0 < config["feed"]["port"] < 65536

            # Required: snapshot section
            assert "snapshot" in config
            assert "path" in config["snapshot"]
            assert isinstance(config["snapshot"]["path"], str)

            return True
        except (AssertionError, KeyError, TypeError):
            return False

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            "receiver": {
                "latitude": 50.0,
                "longitude": 16.0,
                "name": "Home receiver",
            },
            "feed": {
                "host": Settings.DEFAULT_FEED_HOST,
                "port": Settings.DEFAULT_FEED_PORT,
                "timeout_seconds": Settings.DEFAULT_FEED_TIMEOUT,
            },
            "snapshot": {"path": "stats.out"},
            "charts": {
                "output_dir": ".",
                "company_threshold": 0,
                "airline_db": "data/iata-icao.db",
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "file": None,
            },
        }

    def save_config(self) -> None:
        """
        Save current configuration to YAML file.

        Raises:
            ValueError: If config_path is not set
        """
        if self.config_path is None:
            raise ValueError("Cannot save config: no config_path specified")

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False)

    # --- Property Accessors ---

    @property
    def receiver_latitude(self) -> float:
        """Get receiver reference latitude in degrees."""
        return float(self._config["receiver"]["latitude"])

    @property
    def receiver_longitude(self) -> float:
        """Get receiver reference longitude in degrees."""
        return float(self._config["receiver"]["longitude"])

    @property
    def receiver_name(self) -> str:
        """Get descriptive receiver name."""
        return self._config["receiver"].get("name", "Unknown Receiver")

    @property
    def feed_host(self) -> str:
        """Get SBS feed host name."""
        return self._config["feed"].get("host", Settings.DEFAULT_FEED_HOST)

    @property
    def feed_port(self) -> int:
        """Get SBS feed TCP port."""
        return int(self._config["feed"]["port"])

    @property
    def feed_timeout(self) -> int:
        """Get socket timeout in seconds."""
        return int(self._config["feed"].get("timeout_seconds", Settings.DEFAULT_FEED_TIMEOUT))

    @property
    def snapshot_path(self) -> str:
        """Get snapshot file path."""
        return self._config["snapshot"]["path"]

    @property
    def chart_dir(self) -> str:
        """Get chart output directory."""
        return self.get("charts.output_dir", ".")

    @property
    def company_threshold(self) -> int:
        """Get airline count threshold for the airline chart."""
        return int(self.get("charts.company_threshold", 0))

    @property
    def airline_db_path(self) -> str:
        """Get airline reference file path."""
        return self.get("charts.airline_db", "data/iata-icao.db")

    @property
    def log_level(self) -> str:
        """Get logging level name."""
        return self.get("logging.level", "INFO")

    @property
    def log_format(self) -> str:
        """Get logging record format."""
        return self.get(
            "logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    @property
    def log_file(self) -> Optional[str]:
        """Get log file path, None for console only."""
        return self.get("logging.file")

    # --- Generic Accessors ---

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'receiver.latitude')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('feed.port', 30003)
            30003
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'receiver.latitude')
            value: Value to set

        Example:
            >>> config.set('feed.port', 30005)
        """
        keys = key.split(".")
        config = self._config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value


# =============================================================================
# Logging
# =============================================================================


def setup_logging(
    level: str = "INFO",
    fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the collector and converter scripts.

    Args:
        level: Logging level name (e.g. 'DEBUG', 'INFO')
        fmt: Record format string
        log_file: Optional path of a debug log file. The file receives the
                  same records as the console; with DEBUG level this
                  includes one record per processed message.
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=fmt,
        handlers=handlers,
        force=True,
    )
