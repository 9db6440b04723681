"""Target holdings from sub-allocations and outside assets"""

import logging
from typing import Optional
from holdings_base import ShareValues, Symbol
from .models import OutsideAssets
from .policy import SubAllocations

logger = logging.getLogger(__name__)

US_STOCK_SYMBOLS = (Symbol.VV, Symbol.VO, Symbol.VB)
US_BOND_SYMBOLS = (Symbol.BND, Symbol.VTC)


def build_target(sub_allocations: SubAllocations, total_value: float,
                 outside: Optional[OutsideAssets] = None) -> ShareValues:
    """
    Build the target holdings for ``total_value`` dollars.

    Outside assets count toward the overall ratio but are subtracted from
    the symbols of their class so they are not bought a second time:
    US stock evenly from VV/VO/VB, US bonds evenly from BND/VTC,
    international stock 2/3 from VXUS and 1/3 from VWO, international bonds
    from BNDX. Cash, VTI and the target-date fund are targeted at 0.
    """
    outside = outside or OutsideAssets()
    grand_total = total_value + outside.total()

    target = ShareValues()
    for symbol, fraction in sub_allocations.fractions().items():
        target.set_value(symbol, grand_total * fraction)

    for symbol in US_STOCK_SYMBOLS:
        target.set_value(symbol, target.value(symbol) - outside.us_stock / len(US_STOCK_SYMBOLS))
    for symbol in US_BOND_SYMBOLS:
        target.set_value(symbol, target.value(symbol) - outside.us_bond / len(US_BOND_SYMBOLS))
    target.vxus -= outside.int_stock * 2.0 / 3.0
    target.vwo -= outside.int_stock / 3.0
    target.bndx -= outside.int_bond

    target.outside_stock = outside.us_stock + outside.int_stock
    target.outside_bond = outside.us_bond + outside.int_bond

    negative = [symbol.value for symbol in Symbol if target.value(symbol) < 0]
    if negative:
        logger.warning(
            f"Outside assets exceed the target for {', '.join(negative)}; "
            f"those symbols will show a sale"
        )

    logger.debug(f"Target for ${total_value:,.2f} (+${outside.total():,.2f} outside): ${target.total_value():,.2f}")
    return target
