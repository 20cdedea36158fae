"""Configuration loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field, fields

from ffbatch.domain.exceptions import ConfigurationError
from ffbatch.infrastructure.media.ffmpeg import split_params
from ffbatch.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = Path("ffbatch.yaml")

_TRUE = ("true", "1", "yes", "on")


@dataclass
class BatchConfig:
    """Settings for one batch run."""

    # Input selection
    input_path: Path
    pattern: Optional[str] = None
    recursive: bool = False

    # Output and post-processing
    extension: str = ""
    move_dir: Optional[Path] = None
    copy_timestamps: bool = False

    # Engine
    ffmpeg_bin: str = "ffmpeg"
    ffmpeg_params: List[str] = field(default_factory=list)

    # Process control
    poll_interval: float = 0.1
    cleanup_retry_delay: float = 0.25

    # Misc
    assume_yes: bool = False
    log_file: Optional[Path] = None
    verbose: bool = False

    def __post_init__(self):
        """Normalize and validate configuration after initialization."""
        if self.input_path is None or not str(self.input_path).strip():
            raise ConfigurationError("Input file or directory is missing")
        self.input_path = Path(self.input_path)
        if self.move_dir is not None:
            self.move_dir = Path(self.move_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        self.extension = self.extension or ""
        if self.extension and not self.extension.startswith("."):
            self.extension = "." + self.extension
        try:
            self.ffmpeg_params = split_params(self.ffmpeg_params)
            self.poll_interval = float(self.poll_interval)
            self.cleanup_retry_delay = float(self.cleanup_retry_delay)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}")
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if self.move_dir is not None and not self.move_dir.is_dir():
            raise ConfigurationError(f"Move directory does not exist: {self.move_dir}")

        if not self.ffmpeg_bin:
            raise ConfigurationError("ffmpeg_bin must not be empty")

        if self.poll_interval <= 0:
            raise ConfigurationError(f"poll_interval must be positive, got: {self.poll_interval}")

        if self.cleanup_retry_delay < 0:
            raise ConfigurationError(
                f"cleanup_retry_delay cannot be negative, got: {self.cleanup_retry_delay}"
            )


class ConfigLoader:
    """Loads and validates configuration from a YAML file, the environment and CLI overrides."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to YAML config file. An explicitly
                given file must exist; the default one is optional.
        """
        self._explicit = config_path is not None
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_FILE
        self._logger = get_logger(__name__)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> BatchConfig:
        """
        Load configuration from file and environment.

        Precedence, lowest first: YAML file, environment variables, overrides.

        Returns:
            BatchConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        config_dict.update(self._load_from_file())
        config_dict.update(self._load_from_env())

        # Apply runtime overrides (from CLI) if provided
        if overrides:
            for k, v in overrides.items():
                if v is None:
                    continue
                config_dict[k] = v

        if "input_path" not in config_dict:
            raise ConfigurationError("Input file or directory is missing")

        valid_fields = {f.name for f in fields(BatchConfig)}
        unknown = sorted(k for k in config_dict if k not in valid_fields)
        if unknown:
            self._logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}

        try:
            return BatchConfig(**filtered_config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def _load_from_file(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            if self._explicit:
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            return {}

        self._logger.info(f"Loading config from {self.config_path}")
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {self.config_path} must be a mapping")
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        if ffmpeg_bin := os.getenv("FFBATCH_FFMPEG_BIN"):
            env_config["ffmpeg_bin"] = ffmpeg_bin

        if extension := os.getenv("FFBATCH_EXTENSION"):
            env_config["extension"] = extension

        if move_dir := os.getenv("FFBATCH_MOVE_DIR"):
            env_config["move_dir"] = Path(move_dir)

        if copy_ts := os.getenv("FFBATCH_COPY_TIMESTAMPS"):
            env_config["copy_timestamps"] = copy_ts.lower() in _TRUE

        if poll := os.getenv("FFBATCH_POLL_INTERVAL"):
            try:
                env_config["poll_interval"] = float(poll)
            except ValueError:
                self._logger.warning(f"Invalid FFBATCH_POLL_INTERVAL value: {poll}")

        if log_file := os.getenv("FFBATCH_LOG_FILE"):
            env_config["log_file"] = Path(log_file)

        return env_config
