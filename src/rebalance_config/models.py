"""Pydantic models for application configuration with validation."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class PercentPolicyConfig(BaseModel):
    """Stock/bond/inflation-protected percentage split."""

    stock: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Percentage to allocate in stocks"
    )
    bond: float = Field(
        default=40.0,
        ge=0.0,
        le=100.0,
        description="Percentage to allocate in bonds"
    )
    inflation: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Percentage to allocate in inflation protected securities"
    )

    @model_validator(mode="after")
    def validate_total(self) -> "PercentPolicyConfig":
        """Percentages must add up to 100."""
        total = self.stock + self.bond + self.inflation
        if abs(total - 100.0) > 0.01:
            raise ValueError(
                f"Stock, bond and inflation percentages must sum to 100, got {total:.2f}"
            )
        return self


class GlidePathEntry(PercentPolicyConfig):
    """Allocation used once retirement is at most this many years away."""

    years_to_retirement: int = Field(
        description="Threshold in years until retirement (negative once retired)"
    )


def default_glide_path() -> List[GlidePathEntry]:
    """Glide path modelled on target-date fund allocations."""
    rows = [
        (25, 90.0, 10.0, 0.0),
        (20, 83.0, 17.0, 0.0),
        (15, 75.0, 25.0, 0.0),
        (10, 66.0, 34.0, 0.0),
        (5, 57.0, 38.0, 5.0),
        (0, 50.0, 42.0, 8.0),
        (-5, 40.0, 47.0, 13.0),
        (-7, 30.0, 53.0, 17.0),
    ]
    return [
        GlidePathEntry(years_to_retirement=years, stock=stock, bond=bond, inflation=inflation)
        for years, stock, bond, inflation in rows
    ]


class AllocationConfig(BaseModel):
    """Target allocation policies."""

    retirement: PercentPolicyConfig = Field(
        default_factory=PercentPolicyConfig,
        description="Allocation for the combined Roth and traditional IRA accounts"
    )
    brokerage: PercentPolicyConfig = Field(
        default_factory=PercentPolicyConfig,
        description="Allocation for the taxable brokerage account"
    )
    include_brokerage_in_retirement_pool: bool = Field(
        default=False,
        description="Place the brokerage account in the retirement placement walk, safest assets first"
    )
    glide_path: List[GlidePathEntry] = Field(
        default_factory=default_glide_path,
        description="Allocation by years to retirement, used when a retirement year is given"
    )

    @field_validator("glide_path")
    @classmethod
    def validate_glide_path(cls, v: List[GlidePathEntry]) -> List[GlidePathEntry]:
        """Sort entries from furthest to nearest retirement and reject duplicates."""
        years = [entry.years_to_retirement for entry in v]
        if len(set(years)) != len(years):
            raise ValueError(f"Duplicate years_to_retirement in glide path: {years}")
        return sorted(v, key=lambda entry: entry.years_to_retirement, reverse=True)


class ToleranceConfig(BaseModel):
    """Numeric tolerances for allocation invariants."""

    sub_allocation_sum: float = Field(
        default=0.001,
        gt=0.0,
        le=0.01,
        description="Allowed deviation of the sub-allocation fractions from 1.0"
    )
    placement_budget_usd: float = Field(
        default=0.01,
        gt=0.0,
        le=10.0,
        description="Allowed leftover account budget after the placement walk"
    )
    account_value_percent: float = Field(
        default=1.0,
        gt=0.0,
        le=5.0,
        description="Allowed divergence of a placed target from the account value"
    )


class OutsideAssetsConfig(BaseModel):
    """Value held outside the managed accounts that counts toward the allocation."""

    us_stock: float = Field(default=0.0, ge=0.0, description="US stock held elsewhere (USD)")
    us_bond: float = Field(default=0.0, ge=0.0, description="US bonds held elsewhere (USD)")
    int_stock: float = Field(default=0.0, ge=0.0, description="International stock held elsewhere (USD)")
    int_bond: float = Field(default=0.0, ge=0.0, description="International bonds held elsewhere (USD)")


class QuoteConfig(BaseModel):
    """Stock quote retrieval settings."""

    base_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart",
        description="Chart endpoint used for latest and historical closes"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=60.0,
        description="Timeout for quote requests"
    )
    eoy_window_start_day: int = Field(
        default=25,
        ge=1,
        le=31,
        description="First December day searched for the year-end close"
    )


class EquityConfig(BaseModel):
    """External brokerage equity retrieval settings."""

    base_url: str = Field(
        default="https://api.alpaca.markets",
        description="Alpaca trading API base URL"
    )
    key_id_env: str = Field(
        default="APCA_API_KEY_ID",
        description="Environment variable holding the API key id"
    )
    secret_key_env: str = Field(
        default="APCA_API_SECRET_KEY",
        description="Environment variable holding the API secret"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=60.0,
        description="Timeout for equity requests"
    )


class DistributionConfig(BaseModel):
    """Required minimum distribution settings."""

    table_path: Optional[str] = Field(
        default=None,
        description="Age/divisor table; the bundled uniform lifetime table is used when unset"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log line format"
    )
    directory: Optional[str] = Field(
        default=None,
        description="Directory for rotated log files; console only when unset"
    )
    file_name: str = Field(
        default="vanguard-rebalance.log",
        description="Log file name inside the log directory"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level '{v}'")
        return level


class AppConfig(BaseModel):
    """Root application configuration."""

    allocation: AllocationConfig = Field(
        default_factory=AllocationConfig,
        description="Target allocation policies"
    )
    tolerance: ToleranceConfig = Field(
        default_factory=ToleranceConfig,
        description="Invariant tolerances"
    )
    outside_assets: OutsideAssetsConfig = Field(
        default_factory=OutsideAssetsConfig,
        description="Assets held outside the managed accounts"
    )
    quotes: QuoteConfig = Field(
        default_factory=QuoteConfig,
        description="Quote retrieval settings"
    )
    equity: EquityConfig = Field(
        default_factory=EquityConfig,
        description="External brokerage equity settings"
    )
    distribution: DistributionConfig = Field(
        default_factory=DistributionConfig,
        description="Minimum distribution settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )
