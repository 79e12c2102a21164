"""Configuration loading and validation for the fee predictor."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any
from .predictor import Urgency
from .constants import (
    DEFAULT_RPC_URL,
    DEFAULT_POLL_SECS,
    DEFAULT_COMPUTE_UNITS,
    DEFAULT_MIN_SAMPLES,
    DEFAULT_LOG_MAX_BYTES,
    DEFAULT_LOG_BACKUP_COUNT,
)


DEFAULT_CONFIG = {
    "rpc": {
        "url": DEFAULT_RPC_URL,
    },
    "polling": {
        "poll_secs": DEFAULT_POLL_SECS,
    },
    "sampling": {
        "payer": "local",
        "compute_units": DEFAULT_COMPUTE_UNITS,
    },
    "prediction": {
        "compute_units_estimate": DEFAULT_COMPUTE_UNITS,
        "urgency": "medium",
        "min_samples": DEFAULT_MIN_SAMPLES,
    },
    "state": {
        "backend": "sqlite",
        "db_path": "state/feepredictor.db",
        "json_path": "state/feepredictor.json",
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
        "console_level": "INFO",
        "rotation": {
            "max_bytes": DEFAULT_LOG_MAX_BYTES,
            "backup_count": DEFAULT_LOG_BACKUP_COUNT,
            "when": "midnight",
        },
    },
    "structured_output": {
        "enabled": False,
        "base_dir": "logs/structured",
        "samples_filename": "samples.jsonl",
        "predictions_filename": "predictions.jsonl",
    },
}

# env var -> (section, key, converter)
ENV_OVERRIDES = {
    "FP_RPC_URL": ("rpc", "url", str),
    "FP_POLL_SECS": ("polling", "poll_secs", int),
    "FP_PAYER": ("sampling", "payer", str),
    "FP_SAMPLE_COMPUTE_UNITS": ("sampling", "compute_units", int),
    "FP_COMPUTE_UNITS_ESTIMATE": ("prediction", "compute_units_estimate", int),
    "FP_URGENCY": ("prediction", "urgency", str),
    "FP_MIN_SAMPLES": ("prediction", "min_samples", int),
    "FP_STATE_BACKEND": ("state", "backend", str),
    "FP_STATE_DB_PATH": ("state", "db_path", str),
    "FP_STATE_JSON_PATH": ("state", "json_path", str),
    "FP_LOG_DIR": ("logging", "log_dir", str),
    "FP_LOG_LEVEL": ("logging", "level", str),
    "FP_CONSOLE_LEVEL": ("logging", "console_level", str),
    "FP_STRUCTURED_OUTPUT": ("structured_output", "enabled", lambda v: v.lower() == "true"),
}


class Config:
    """Configuration container with environment variable overrides."""

    def __init__(self, config_path: str = None, create_if_missing: bool = True):
        """
        Load configuration from YAML file with environment variable overrides.

        Configuration precedence (highest to lowest):
        1. Environment variables (FP_* prefix)
        2. config.local.yaml (if exists, local overrides)
        3. config.yaml (main config file)
        4. Default values

        Args:
            config_path: Path to config.yaml. If None, searches for config.yaml
                        in current directory and parent directories.
            create_if_missing: If True and config_path is None, create default config
                              if not found. If config_path is explicitly provided,
                              this is ignored (file must exist).
        """
        if config_path is None:
            config_path = self._find_config_file()
            if create_if_missing and not Path(config_path).exists():
                self._create_default_config(config_path)
        elif not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        if Path(config_path).exists():
            with open(config_path, 'r') as f:
                self._raw = yaml.safe_load(f) or {}
        else:
            self._raw = {}

        local_config_path = Path(config_path).parent / "config.local.yaml"
        if local_config_path.exists():
            with open(local_config_path, 'r') as f:
                self._deep_merge(self._raw, yaml.safe_load(f) or {})

        self._apply_env_overrides()
        self._validate()

    def _find_config_file(self) -> str:
        """Find config.yaml in current directory or parents."""
        current = Path.cwd()
        for path in [current] + list(current.parents):
            config_file = path / "config.yaml"
            if config_file.exists():
                return str(config_file)
        return str(current / "config.yaml")

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge override dict into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _create_default_config(self, path: str):
        """Create a default config.yaml file."""
        with open(path, 'w') as f:
            yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)

    def _apply_env_overrides(self):
        """Apply environment variable overrides using FP_ prefix."""
        for env_name, (section, key, convert) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                self._raw.setdefault(section, {})[key] = convert(value)

    def _validate(self):
        """Validate and normalize configuration values."""
        if self.state_backend not in ("sqlite", "json"):
            raise ValueError(f"Unknown state backend: {self.state_backend}")
        if self.poll_secs <= 0:
            raise ValueError(f"poll_secs must be positive, got {self.poll_secs}")
        if self.min_samples < 0:
            raise ValueError(f"min_samples must be >= 0, got {self.min_samples}")
        Urgency.parse(self.urgency)

    def _section(self, name: str) -> Dict[str, Any]:
        return self._raw.get(name) or {}

    @property
    def rpc_url(self) -> str:
        return self._section("rpc").get("url", DEFAULT_RPC_URL)

    @property
    def poll_secs(self) -> int:
        return int(self._section("polling").get("poll_secs", DEFAULT_POLL_SECS))

    @property
    def payer(self) -> str:
        return str(self._section("sampling").get("payer", "local"))

    @property
    def sample_compute_units(self) -> int:
        return int(self._section("sampling").get("compute_units", DEFAULT_COMPUTE_UNITS))

    @property
    def compute_units_estimate(self) -> int:
        return int(self._section("prediction").get("compute_units_estimate", DEFAULT_COMPUTE_UNITS))

    @property
    def urgency(self) -> str:
        return str(self._section("prediction").get("urgency", "medium"))

    @property
    def min_samples(self) -> int:
        return int(self._section("prediction").get("min_samples", DEFAULT_MIN_SAMPLES))

    @property
    def state_backend(self) -> str:
        return self._section("state").get("backend", "sqlite")

    @property
    def state_db_path(self) -> str:
        return self._section("state").get("db_path", "state/feepredictor.db")

    @property
    def state_json_path(self) -> str:
        return self._section("state").get("json_path", "state/feepredictor.json")

    @property
    def log_level(self) -> str:
        return self._section("logging").get("level", "INFO")

    @property
    def log_dir(self) -> str:
        return self._section("logging").get("log_dir", "logs")

    @property
    def console_level(self) -> str:
        return self._section("logging").get("console_level", "INFO")

    @property
    def log_rotation(self) -> Dict[str, Any]:
        """Get log rotation configuration with defaults."""
        rotation = self._section("logging").get("rotation") or {}
        return {
            "max_bytes": rotation.get("max_bytes", DEFAULT_LOG_MAX_BYTES),
            "backup_count": rotation.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
            "when": rotation.get("when", "midnight")
        }

    @property
    def structured_output_config(self) -> Dict[str, Any]:
        """Get structured output configuration with defaults."""
        cfg = self._section("structured_output")
        return {
            "enabled": cfg.get("enabled", False),
            "base_dir": cfg.get("base_dir", str(Path(self.log_dir) / "structured")),
            "samples_filename": cfg.get("samples_filename", "samples.jsonl"),
            "predictions_filename": cfg.get("predictions_filename", "predictions.jsonl"),
        }
