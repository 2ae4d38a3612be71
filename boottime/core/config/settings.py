"""Configuration management for the boottime client."""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_HOME = Path.home() / ".boottime"


@dataclass
class SourcesConfig:
    """Locations of the host telemetry sources."""

    efivars_dir: str = "/sys/firmware/efi/efivars"
    fpdt_table_path: str = "/sys/firmware/acpi/tables/FPDT"
    memory_device_path: str = "/dev/mem"
    analyze_command: list[str] = field(default_factory=lambda: ["systemd-analyze", "time"])


@dataclass
class StorageConfig:
    """Record log location."""

    records_file: str = str(DEFAULT_HOME / "records.jsonl")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    file: str | None = None


@dataclass
class BootTimeConfig:
    """Top level boottime configuration."""

    sources: SourcesConfig = field(default_factory=SourcesConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> BootTimeConfig:
        """Create a configuration from a (possibly partial) mapping."""
        sources_config = SourcesConfig(**config_dict.get("sources", {}))
        storage_config = StorageConfig(**config_dict.get("storage", {}))
        logging_config = LoggingConfig(**config_dict.get("logging", {}))

        return cls(sources=sources_config, storage=storage_config, logging=logging_config)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": asdict(self.sources),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
        }


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            # a non-table value in the file is replaced by the override
            base = d.get(k)
            d[k] = _deep_update(base if isinstance(base, dict) else {}, v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """Load configuration from a TOML file, then apply environment overrides."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """Initialise the manager.

        Args:
            config_path: TOML file to read; defaults to ``~/.boottime/config.toml``
            use_env: apply ``BOOTTIME_*`` environment overrides on top of the file
        """
        self.config_path = config_path or DEFAULT_HOME / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> BootTimeConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                # a broken config file falls back to defaults
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())

        try:
            return BootTimeConfig.from_dict(config_dict)
        except TypeError as e:
            logger.warning(f"Ignoring invalid configuration in {self.config_path}: {e}")
            return BootTimeConfig()

    def get_config(self) -> BootTimeConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(storage={"records_file": ...})``."""
        config_dict = self.config.to_dict()
        _deep_update(config_dict, updates)
        self.config = BootTimeConfig.from_dict(config_dict)


def load_config_from_env() -> dict[str, Any]:
    """Collect ``BOOTTIME_*`` environment overrides into a config mapping."""
    config: dict[str, Any] = {}

    sources_config: dict[str, Any] = {}
    efivars_dir = os.getenv("BOOTTIME_EFIVARS_DIR")
    if efivars_dir:
        sources_config["efivars_dir"] = efivars_dir
    fpdt_table_path = os.getenv("BOOTTIME_FPDT_TABLE_PATH")
    if fpdt_table_path:
        sources_config["fpdt_table_path"] = fpdt_table_path
    memory_device_path = os.getenv("BOOTTIME_MEMORY_DEVICE_PATH")
    if memory_device_path:
        sources_config["memory_device_path"] = memory_device_path
    analyze_command = os.getenv("BOOTTIME_ANALYZE_COMMAND")
    if analyze_command:
        sources_config["analyze_command"] = analyze_command.split()

    if sources_config:
        config["sources"] = sources_config

    records_file = os.getenv("BOOTTIME_RECORDS_FILE")
    if records_file:
        config["storage"] = {"records_file": records_file}

    logging_config: dict[str, Any] = {}
    logging_level = os.getenv("BOOTTIME_LOGGING_LEVEL")
    if logging_level is not None:
        logging_config["level"] = logging_level
    logging_file = os.getenv("BOOTTIME_LOGGING_FILE")
    if logging_file is not None:
        logging_config["file"] = logging_file

    if logging_config:
        config["logging"] = logging_config

    return config
