from typing import Dict, Optional
from pydantic import BaseModel, Field
from holdings_base import AccountType, ShareValues
from rebalance_config import OutsideAssetsConfig
from .policy import AllocationPolicy


class OutsideAssets(BaseModel):
    """Dollar value per asset class held outside the managed accounts"""
    us_stock: float = 0.0
    us_bond: float = 0.0
    int_stock: float = 0.0
    int_bond: float = 0.0

    @classmethod
    def from_config(cls, config: OutsideAssetsConfig) -> "OutsideAssets":
        return cls(**config.model_dump())

    def total(self) -> float:
        return self.us_stock + self.us_bond + self.int_stock + self.int_bond

    def with_us_stock(self, extra: float) -> "OutsideAssets":
        """Copy with additional US stock, e.g. equity from another brokerage"""
        return self.model_copy(update={"us_stock": self.us_stock + extra})


class RebalanceRequest(BaseModel):
    """Per-run allocation inputs"""
    retirement_policy: AllocationPolicy = Field(default_factory=lambda: AllocationPolicy(stock=60.0, bond=40.0))
    brokerage_policy: AllocationPolicy = Field(default_factory=lambda: AllocationPolicy(stock=60.0, bond=40.0))
    brokerage_add: float = 0.0  # Signed; negative for a withdrawal
    roth_add: float = 0.0
    traditional_add: float = 0.0
    outside_assets: OutsideAssets = Field(default_factory=OutsideAssets)
    external_brokerage_equity: float = 0.0
    include_brokerage_in_pool: bool = False

    def cash_added(self, account_type: AccountType) -> float:
        return {
            AccountType.BROKERAGE: self.brokerage_add,
            AccountType.ROTH_IRA: self.roth_add,
            AccountType.TRADITIONAL_IRA: self.traditional_add,
        }[account_type]


class PlacementResult(BaseModel):
    """Targets assigned to each pooled account"""
    targets: Dict[AccountType, ShareValues] = Field(default_factory=dict)
    combined_target: Optional[ShareValues] = None
