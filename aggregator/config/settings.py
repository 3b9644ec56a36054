"""Client settings and configuration loading."""

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import AliasChoices, Field, PositiveInt, ValidationError
from pydantic_settings import BaseSettings

from .networks import DEFAULT_API_BASE_URL, DEFAULT_PART_COUNT, DEFAULT_TIMEOUT_SECONDS

logger = structlog.get_logger(__name__)


class AggregatorSettings(BaseSettings):
    """Route aggregation settings with environment variable support."""

    # API endpoints
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL, description="Routing API base URL"
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "api_key", "BITZY_API_KEY", "NEXT_PUBLIC_BITZY_API_KEY"
        ),
        description="Value sent in the authen-key header",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, gt=0, description="HTTP timeout in seconds"
    )

    # Routing
    default_part_count: PositiveInt = Field(
        default=DEFAULT_PART_COUNT, description="Part count for high-value pairs"
    )
    part_count_mode: Literal["offline", "online"] = Field(
        default="offline", description="Part count selection mode"
    )

    # RPC endpoint overrides keyed by chain id
    rpc_urls: dict[int, str] = Field(
        default_factory=dict, description="RPC URL overrides per chain id"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }


def load_settings(yaml_path: str) -> AggregatorSettings:
    """Load settings from a YAML file with environment variable overlay.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        AggregatorSettings instance

    Raises:
        FileNotFoundError: If the YAML file doesn't exist
        ValidationError: If configuration is invalid
        ValueError: If the YAML cannot be parsed
    """
    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    try:
        with open(yaml_file, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError("Configuration root must be a mapping")

        logger.info("Loading configuration", yaml_path=yaml_path)

        settings = AggregatorSettings(**yaml_config)

        logger.info(
            "Configuration loaded successfully",
            api_base_url=settings.api_base_url,
            part_count_mode=settings.part_count_mode,
            authenticated=settings.api_key is not None,
        )
        return settings

    except yaml.YAMLError as e:
        logger.error("Failed to parse YAML configuration", error=str(e))
        raise ValueError(f"Invalid YAML configuration: {e}") from e
    except ValidationError as e:
        logger.error("Configuration validation failed", error=str(e))
        raise
