class AllocationConfigError(Exception):
    """Raised when allocation percentages or sub-allocations are inconsistent"""
    pass

class UnsupportedSymbolError(Exception):
    """Raised when a value is required for a ticker outside the supported set"""
    pass

class PlacementInvariantError(Exception):
    """Raised when the cross-account placement does not conserve account value"""
    pass

class AccountNotFoundError(Exception):
    """Raised when a requested account number is missing from the holdings report"""
    pass

class ReportFormatError(Exception):
    """Raised when the holdings report contains a malformed row"""
    pass

class QuoteRetrievalError(Exception):
    """Raised when a stock quote cannot be retrieved"""
    pass

class EquityRetrievalError(Exception):
    """Raised when external brokerage equity cannot be retrieved"""
    pass
