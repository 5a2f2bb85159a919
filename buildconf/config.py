"""buildconf configuration management using Pydantic."""

__all__ = [
    "BuildConfConfig",
    "DisplayConfig",
    "LoggingConfig",
    "ValidationConfig",
]

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from buildconf.constants import CONFIG_DIR, CONFIG_FILE, SECRET_MASK, SECURE_PREFIX
from buildconf.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="warn", pattern="^(debug|info|warn|error)$")
    directory: str | None = None
    structured_output: bool = True
    max_log_size_mb: int = Field(default=10, ge=1, le=1000)


class DisplayConfig(BaseModel):
    """How property bags are shown on the command line."""

    mask_secrets: bool = True
    secret_mask: str = Field(default=SECRET_MASK, min_length=1)
    secure_prefix: str = Field(default=SECURE_PREFIX, min_length=1)


class ValidationConfig(BaseModel):
    """Validation behavior of the command line."""

    fail_on_unknown_type: bool = Field(
        default=False,
        description="Reject entity types missing from the registry instead of keeping them opaque",
    )


class BuildConfConfig(BaseModel):
    """Complete buildconf configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "BuildConfConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Defaults to .buildconf/config.yaml

        Returns:
            BuildConfConfig instance
        """
        config_path = Path(CONFIG_DIR) / CONFIG_FILE if config_path is None else Path(config_path)

        if not config_path.exists():
            logger.debug("No config at %s, using defaults", config_path)
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}", {"error": str(e)}) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {config_path} must be a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildConfConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            BuildConfConfig instance
        """
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise ConfigurationError("Invalid buildconf configuration", {"error": str(e)}) from e

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to .buildconf/config.yaml
        """
        config_path = Path(CONFIG_DIR) / CONFIG_FILE if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self.model_dump()

    def is_secret(self, key: str) -> bool:
        return key.startswith(self.display.secure_prefix)
