"""Configuration management for keyframer."""

import logging
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from keyframer.core.exceptions import ConfigurationError
from keyframer.core.types import DEFAULT_DESCRIPTION


logger = logging.getLogger(__name__)


class ExtractionConfig(BaseModel):
    """Configuration for automatic frame extraction."""
    frame_count: int = 8  # Frames sampled per auto-extraction run

    @field_validator("frame_count")
    @classmethod
    def validate_frame_count(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"frame_count must be positive, got {v}")
        return v


class CaptureConfig(BaseModel):
    """Configuration for rasterizing captured frames."""
    jpeg_quality: int = Field(default=92, ge=1, le=95)
    placeholder_description: str = DEFAULT_DESCRIPTION


class ExportConfig(BaseModel):
    """Configuration for the exported report."""
    title: str = "Shadow Puppet Motion Analysis Report"
    filename_prefix: str = "motion_analysis"
    template: str = "report.html.j2"
    template_dir: Optional[str] = None  # Directory searched before bundled templates
    language: str = "en"
    output_directory: str = "."


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = 10
    backup_count: int = 3


class KeyframerConfig(BaseModel):
    """Root configuration for keyframer."""

    project_name: str = "keyframer"
    debug_mode: bool = False

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        level_name = "DEBUG" if self.debug_mode else self.logging.level.upper()
        log_level = getattr(logging, level_name, None)
        if not isinstance(log_level, int):
            raise ConfigurationError(f"Unknown log level: {self.logging.level}")

        handlers = []

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        # File handler
        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(exist_ok=True, parents=True)

            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                log_dir / "keyframer.log",
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            force=True
        )

        logger.info(f"Logging configured: level={level_name}")


def load_config(
    config_path: Optional[str | Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    setup_logging: bool = True,
) -> KeyframerConfig:
    """Load configuration from YAML file with optional overrides.

    Args:
        config_path: Path to YAML config file. If None, uses config/default.yaml
        overrides: Dictionary of config overrides (nested keys with dots)
        setup_logging: Install logging handlers from the loaded config

    Returns:
        Validated KeyframerConfig instance

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation

    Example:
        >>> config = load_config("config/default.yaml")
        >>> config = load_config(overrides={"extraction.frame_count": 12})
    """
    if config_path is None:
        repo_root = Path(__file__).parent.parent.parent.parent
        config_path = repo_root / "config" / "default.yaml"
    else:
        config_path = Path(config_path)

    config_dict: Dict[str, Any] = {}
    if config_path.exists():
        logger.info(f"Loading config from {config_path}")
        try:
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Config root must be a mapping: {config_path}")
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    if overrides:
        config_dict = _apply_overrides(config_dict, overrides)

    try:
        config = KeyframerConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if setup_logging:
        config.setup_logging()

    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply nested overrides to config dictionary.

    Example:
        overrides = {"extraction.frame_count": 12}
        -> config_dict["extraction"]["frame_count"] = 12
    """
    for key, value in overrides.items():
        keys = key.split(".")
        d = config_dict
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value
    return config_dict
