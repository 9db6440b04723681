"""Rebalance calculation across brokerage and retirement accounts"""

from typing import Dict, Optional
import logging
from holdings_base import (
    AccountHoldings,
    AccountType,
    ShareValues,
    VanguardHoldings,
    VanguardRebalance,
)
from rebalance_config import AppConfig, get_config
from .models import OutsideAssets, RebalanceRequest
from .placement import PlacementCalculator

RETIREMENT_ACCOUNTS = (AccountType.ROTH_IRA, AccountType.TRADITIONAL_IRA)


class RebalanceCalculator:
    """Calculate how much of each fund should be bought or sold"""

    def __init__(self, config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or get_config()
        self.placement = PlacementCalculator(self.config.tolerance, logger=self.logger)

    def calculate(self, holdings: VanguardHoldings, request: RebalanceRequest) -> VanguardRebalance:
        """
        Build the rebalance for every account present in ``holdings``.

        If both a Roth and a traditional IRA exist, the riskiest assets are
        shifted to the Roth account and the safer ones stay in the
        traditional account, keeping the largest growth where withdrawals
        are not taxed. The brokerage account is balanced on its own unless
        ``request.include_brokerage_in_pool`` is set.
        """
        rebalance = VanguardRebalance()
        current = self._current_holdings(holdings, request)
        quotes = holdings.quotes
        tolerance = self.config.tolerance.sub_allocation_sum

        brokerage_outside = request.outside_assets.with_us_stock(request.external_brokerage_equity)
        # Pooling needs a retirement account for the brokerage to join
        pool_brokerage = (
            request.include_brokerage_in_pool
            and AccountType.BROKERAGE in current
            and any(account_type in current for account_type in RETIREMENT_ACCOUNTS)
        )

        pool = {account_type: current[account_type] for account_type in RETIREMENT_ACCOUNTS if account_type in current}
        pool_outside = OutsideAssets()
        if pool_brokerage:
            pool[AccountType.BROKERAGE] = current[AccountType.BROKERAGE]
            pool_outside = brokerage_outside
            self.logger.info("Including brokerage account in the retirement placement")

        if pool:
            placement = self.placement.place_accounts(
                pool,
                request.retirement_policy.sub_allocations(tolerance),
                pool_outside,
            )
            if placement.combined_target is not None:
                rebalance.add_retirement_target(placement.combined_target)
            for account_type, target in placement.targets.items():
                rebalance.add_account_holdings(
                    self._account_holdings(current[account_type], target, quotes, account_type),
                    account_type
                )

        if AccountType.BROKERAGE in current and not pool_brokerage:
            brokerage = current[AccountType.BROKERAGE]
            target = self.placement.single_account_target(
                brokerage,
                request.brokerage_policy.sub_allocations(tolerance),
                brokerage_outside,
            )
            rebalance.add_account_holdings(
                self._account_holdings(brokerage, target, quotes, AccountType.BROKERAGE),
                AccountType.BROKERAGE
            )

        return rebalance

    def _current_holdings(self, holdings: VanguardHoldings, request: RebalanceRequest) -> Dict[AccountType, ShareValues]:
        """Present accounts with any requested cash added to the money market fund"""
        current = {}
        for account_type in AccountType:
            account = holdings.holdings(account_type)
            if account is None:
                continue
            account = account.model_copy()
            added = request.cash_added(account_type)
            if added:
                account.vmfxx += added
                self.logger.info(
                    f"Adding ${added:,.2f} cash to {account_type.label}",
                    extra={'account': account_type.value}
                )
            current[account_type] = account
        return current

    def _account_holdings(self, current: ShareValues, target: ShareValues, quotes: ShareValues,
                          account_type: AccountType) -> AccountHoldings:
        account_holdings = AccountHoldings.from_target(current, target, quotes)
        stock, bond, inflation = target.percent_stock_bond_infl()
        self.logger.info(
            f"{account_type.label}: ${current.total_value():,.2f} rebalanced to "
            f"{stock:.1f}:{bond:.1f}:{inflation:.1f}",
            extra={'account': account_type.value}
        )
        return account_holdings
