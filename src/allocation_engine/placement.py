"""Risk-ordered placement of a combined target across accounts"""

from typing import Dict, Optional, Sequence, Tuple
import logging
from holdings_base import AccountType, PlacementInvariantError, ShareValues, Symbol
from rebalance_config import ToleranceConfig
from .models import OutsideAssets, PlacementResult
from .policy import SubAllocations
from .targets import build_target

# Highest expected growth/volatility first; the target-date fund never takes part
HIGH_TO_LOW_RISK: Tuple[Symbol, ...] = (
    Symbol.VWO,
    Symbol.VXUS,
    Symbol.VB,
    Symbol.VO,
    Symbol.VV,
    Symbol.BNDX,
    Symbol.VTC,
    Symbol.BND,
    Symbol.VTIP,
)
LOW_TO_HIGH_RISK: Tuple[Symbol, ...] = tuple(reversed(HIGH_TO_LOW_RISK))


class PlacementCalculator:
    """Split a combined target between Roth, traditional and brokerage accounts"""

    def __init__(self, tolerance: Optional[ToleranceConfig] = None, logger: Optional[logging.Logger] = None):
        self.tolerance = tolerance or ToleranceConfig()
        self.logger = logger or logging.getLogger(__name__)

    def place_accounts(self, pool: Dict[AccountType, ShareValues], sub_allocations: SubAllocations,
                       outside: Optional[OutsideAssets] = None) -> PlacementResult:
        """
        Assign target holdings to every account in the pool.

        Each account keeps its target-date fund where it is. With several
        accounts the Roth account takes the riskiest assets first, a pooled
        brokerage account takes the safest assets first, and the traditional
        account receives what remains.
        """
        if not pool:
            return PlacementResult()

        if len(pool) == 1:
            account_type, holdings = next(iter(pool.items()))
            target = self.single_account_target(holdings, sub_allocations, outside)
            return PlacementResult(targets={account_type: target})

        pool_value = sum(self._budget(holdings) for holdings in pool.values())
        combined = build_target(sub_allocations, pool_value, outside)
        combined.vtivx = sum(holdings.vtivx for holdings in pool.values())
        self.logger.info(f"Combined target for {len(pool)} accounts: ${combined.managed_value():,.2f}")

        walks = []
        if AccountType.ROTH_IRA in pool:
            walks.append((AccountType.ROTH_IRA, HIGH_TO_LOW_RISK))
        if AccountType.BROKERAGE in pool:
            walks.append((AccountType.BROKERAGE, LOW_TO_HIGH_RISK))

        if AccountType.TRADITIONAL_IRA in pool:
            remainder_account = AccountType.TRADITIONAL_IRA
        else:
            remainder_account = walks.pop()[0]

        targets: Dict[AccountType, ShareValues] = {}
        residual = combined
        for account_type, order in walks:
            holdings = pool[account_type]
            target = self.walk(residual, self._budget(holdings), order, account_type)
            target.vtivx = holdings.vtivx
            self.check_account_value(target, holdings, account_type)
            targets[account_type] = target
            residual = residual.subtract(target)

        self.check_account_value(residual, pool[remainder_account], remainder_account)
        targets[remainder_account] = residual

        return PlacementResult(targets=targets, combined_target=combined)

    def single_account_target(self, holdings: ShareValues, sub_allocations: SubAllocations,
                              outside: Optional[OutsideAssets] = None) -> ShareValues:
        """Target for an account that shares its allocation with no other account"""
        target = build_target(sub_allocations, self._budget(holdings), outside)
        target.vtivx = holdings.vtivx
        return target

    def walk(self, available: ShareValues, budget: float, order: Sequence[Symbol],
             account_type: AccountType) -> ShareValues:
        """
        Greedily take ``min(available, remaining budget)`` of each symbol in order.

        Raises PlacementInvariantError if budget is left over once the order
        is exhausted.
        """
        target = ShareValues()
        remaining = budget

        for symbol in order:
            if remaining <= 0.0:
                break
            value = min(max(available.value(symbol), 0.0), remaining)
            remaining -= value
            target.set_value(symbol, value)
            self.logger.debug(
                f"Placed ${value:,.2f} of {symbol.value}, ${remaining:,.2f} left",
                extra={'account': account_type.value}
            )

        if abs(remaining) > self.tolerance.placement_budget_usd:
            self.logger.error(
                f"Unexpected leftover {account_type.label} budget: ${remaining:,.2f}",
                extra={'account': account_type.value}
            )
            raise PlacementInvariantError(
                f"Unexpected leftover {account_type.label} cash of ${remaining:,.2f} after placement; "
                f"combined target does not match the account totals"
            )

        return target

    def check_account_value(self, target: ShareValues, holdings: ShareValues, account_type: AccountType) -> None:
        """Placed target must be within the configured percentage of the account value"""
        account_value = holdings.total_value()
        placed_value = target.managed_value()
        allowed = abs(account_value) * self.tolerance.account_value_percent / 100.0
        allowed = max(allowed, self.tolerance.placement_budget_usd)

        if abs(placed_value - account_value) > allowed:
            raise PlacementInvariantError(
                f"{account_type.label} target and total do not match: "
                f"target ${placed_value:,.2f}, account ${account_value:,.2f}"
            )

    @staticmethod
    def _budget(holdings: ShareValues) -> float:
        """Account value available to the walk, the target-date fund excluded"""
        return holdings.total_value() - holdings.vtivx
