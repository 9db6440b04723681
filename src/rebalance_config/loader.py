"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None


def load_config(config_path: Optional[str | Path] = None) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file, or None for the defaults

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    if config_path is None:
        logger.debug("No configuration file given, using defaults")
        _config = AppConfig()
        return _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    retirement = _config.allocation.retirement
    brokerage = _config.allocation.brokerage
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Retirement allocation: {retirement.stock}:{retirement.bond}:{retirement.inflation}")
    logger.info(f"  Brokerage allocation: {brokerage.stock}:{brokerage.bond}:{brokerage.inflation}")
    logger.info(f"  Brokerage in retirement pool: {_config.allocation.include_brokerage_in_retirement_pool}")
    logger.info(f"  Glide path entries: {len(_config.allocation.glide_path)}")
    logger.info(f"  Placement tolerance: ${_config.tolerance.placement_budget_usd}")
    logger.info(f"  Account value tolerance: {_config.tolerance.account_value_percent}%")
    logger.info(f"  Quote timeout: {_config.quotes.request_timeout_seconds}s")

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Returns:
        Current AppConfig instance

    Raises:
        RuntimeError: If config hasn't been loaded yet
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() first."
        )
    return _config
