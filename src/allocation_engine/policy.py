"""Allocation policy and its decomposition into per-symbol fractions"""

import logging
from datetime import date
from typing import Dict, Iterable, Optional
from pydantic import BaseModel, ConfigDict, model_validator
from holdings_base import AllocationConfigError, Symbol
from rebalance_config import GlidePathEntry, PercentPolicyConfig

logger = logging.getLogger(__name__)

# Fixed sub-splits of the stock and bond allocations
US_STOCK_SHARE = 2.0 / 3.0
INT_STOCK_SHARE = 1.0 / 3.0
EMERGING_SHARE_OF_INT_STOCK = 1.0 / 3.0
US_BOND_SHARE = 2.0 / 3.0
INT_BOND_SHARE = 1.0 / 3.0
CORPORATE_SHARE_OF_US_BOND = 0.5

PERCENT_SUM_TOLERANCE = 0.01


class SubAllocations(BaseModel):
    """Fraction of the whole portfolio targeted to each symbol"""
    model_config = ConfigDict(frozen=True)

    us_stock_large: float
    us_stock_mid: float
    us_stock_small: float
    int_tot_stock: float
    int_emerging_stock: float
    us_tot_bond: float
    us_corp_bond: float
    int_bond: float
    inflation_protected: float

    def fractions(self) -> Dict[Symbol, float]:
        return {
            Symbol.VV: self.us_stock_large,
            Symbol.VO: self.us_stock_mid,
            Symbol.VB: self.us_stock_small,
            Symbol.VXUS: self.int_tot_stock,
            Symbol.VWO: self.int_emerging_stock,
            Symbol.BND: self.us_tot_bond,
            Symbol.VTC: self.us_corp_bond,
            Symbol.BNDX: self.int_bond,
            Symbol.VTIP: self.inflation_protected,
        }

    def fraction(self, symbol: Symbol) -> float:
        """Fraction for a symbol; symbols without a target get 0"""
        return self.fractions().get(symbol, 0.0)

    def total(self) -> float:
        return sum(self.fractions().values())


class AllocationPolicy(BaseModel):
    """Stock/bond/inflation-protected percentage triple summing to 100"""
    model_config = ConfigDict(frozen=True)

    stock: float
    bond: float
    inflation: float = 0.0

    @model_validator(mode="after")
    def validate_percentages(self) -> "AllocationPolicy":
        # AllocationConfigError is not a ValueError, so pydantic lets it through unwrapped
        for name, value in (("stock", self.stock), ("bond", self.bond), ("inflation", self.inflation)):
            if value < 0.0 or value > 100.0:
                raise AllocationConfigError(f"{name} percentage must be between 0 and 100, got {value}")

        total = self.stock + self.bond + self.inflation
        if abs(total - 100.0) > PERCENT_SUM_TOLERANCE:
            raise AllocationConfigError(
                f"Stock, bond and inflation percentages must sum to 100, got "
                f"{self.stock}:{self.bond}:{self.inflation} ({total:.2f})"
            )
        return self

    @classmethod
    def from_config(cls, policy: PercentPolicyConfig) -> "AllocationPolicy":
        return cls(stock=policy.stock, bond=policy.bond, inflation=policy.inflation)

    @classmethod
    def from_retirement_year(cls, retirement_year: int, glide_path: Iterable[GlidePathEntry],
                             today: Optional[date] = None) -> "AllocationPolicy":
        """
        Derive the policy from the glide path.

        The entry with the largest ``years_to_retirement`` that does not
        exceed the years left until ``retirement_year`` is used.
        """
        today = today or date.today()
        years_left = retirement_year - today.year

        for entry in sorted(glide_path, key=lambda e: e.years_to_retirement, reverse=True):
            if years_left >= entry.years_to_retirement:
                logger.info(
                    f"Retirement in {years_left} years: using glide path "
                    f"{entry.stock}:{entry.bond}:{entry.inflation}"
                )
                return cls(stock=entry.stock, bond=entry.bond, inflation=entry.inflation)

        raise AllocationConfigError(
            f"No glide path entry covers retirement year {retirement_year} "
            f"({years_left} years from {today.year})"
        )

    def sub_allocations(self, tolerance: float = 0.001) -> SubAllocations:
        """
        Split the triple into per-symbol fractions of the whole portfolio.

        US stock is 2/3 of stock in equal large/mid/small thirds; international
        stock is the other 1/3, a third of it emerging markets. US bonds are
        2/3 of bond split evenly between total and corporate, international
        bonds the remaining 1/3. Inflation protected is taken as is.
        """
        stock = self.stock / 100.0
        bond = self.bond / 100.0
        inflation = self.inflation / 100.0

        us_stock_tranche = stock * US_STOCK_SHARE / 3.0
        int_stock = stock * INT_STOCK_SHARE
        us_bond = bond * US_BOND_SHARE

        sub_allocations = SubAllocations(
            us_stock_large=us_stock_tranche,
            us_stock_mid=us_stock_tranche,
            us_stock_small=us_stock_tranche,
            int_tot_stock=int_stock * (1.0 - EMERGING_SHARE_OF_INT_STOCK),
            int_emerging_stock=int_stock * EMERGING_SHARE_OF_INT_STOCK,
            us_tot_bond=us_bond * (1.0 - CORPORATE_SHARE_OF_US_BOND),
            us_corp_bond=us_bond * CORPORATE_SHARE_OF_US_BOND,
            int_bond=bond * INT_BOND_SHARE,
            inflation_protected=inflation,
        )

        total = sub_allocations.total()
        if abs(total - 1.0) > tolerance:
            raise AllocationConfigError(
                f"Sub-allocations sum to {total:.4f}, expected 1.0 (tolerance {tolerance})"
            )

        logger.debug(f"Sub-allocations for {self.stock}:{self.bond}:{self.inflation}: {sub_allocations.fractions()}")
        return sub_allocations
