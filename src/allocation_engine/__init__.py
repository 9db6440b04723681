from .calculator import RebalanceCalculator
from .placement import PlacementCalculator, HIGH_TO_LOW_RISK, LOW_TO_HIGH_RISK
from .policy import AllocationPolicy, SubAllocations
from .targets import build_target
from .models import OutsideAssets, RebalanceRequest, PlacementResult
from .distribution import (
    calculate_minimum_distribution,
    parse_distribution_table,
    load_distribution_table,
    eoy_traditional_value,
)

__version__ = "1.0.0"

__all__ = [
    "RebalanceCalculator",
    "PlacementCalculator",
    "HIGH_TO_LOW_RISK",
    "LOW_TO_HIGH_RISK",
    "AllocationPolicy",
    "SubAllocations",
    "build_target",
    "OutsideAssets",
    "RebalanceRequest",
    "PlacementResult",
    "calculate_minimum_distribution",
    "parse_distribution_table",
    "load_distribution_table",
    "eoy_traditional_value",
    "__version__",
]
