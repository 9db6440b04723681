"""Application configuration management for the Vanguard rebalancer."""

from .models import (
    AppConfig,
    PercentPolicyConfig,
    GlidePathEntry,
    AllocationConfig,
    ToleranceConfig,
    OutsideAssetsConfig,
    QuoteConfig,
    EquityConfig,
    DistributionConfig,
    LoggingConfig,
    default_glide_path,
)
from .loader import load_config, get_config

__all__ = [
    "AppConfig",
    "PercentPolicyConfig",
    "GlidePathEntry",
    "AllocationConfig",
    "ToleranceConfig",
    "OutsideAssetsConfig",
    "QuoteConfig",
    "EquityConfig",
    "DistributionConfig",
    "LoggingConfig",
    "default_glide_path",
    "load_config",
    "get_config",
]
