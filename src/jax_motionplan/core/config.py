"""
Planner configuration.

Settings are validated with pydantic and can be loaded from a YAML file::

    result_poll_interval: 0.02
    result_timeout: 30
    log_level: DEBUG
    json_logs: false
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from jax_motionplan.core.exceptions import ConfigurationError
from jax_motionplan.core.logging import configure_logging


class PlannerConfig(BaseModel):
    """Runtime settings shared by the planning entry points."""

    result_poll_interval: float = Field(default=0.05, gt=0)
    result_timeout: Optional[float] = Field(default=None, ge=0)
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    def configure_logging(self) -> None:
        """Apply the logging fields of this config."""
        configure_logging(level=self.log_level, json_output=self.json_logs, log_file=self.log_file)


def load_config(path: str | Path) -> PlannerConfig:
    """
    Load a PlannerConfig from a YAML file.

    Raises:
        ConfigurationError: the file is missing, unreadable, or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", details={"error": str(e)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")

    try:
        return PlannerConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid planner configuration in {path}", details={"errors": e.errors()}) from e
