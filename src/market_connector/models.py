from pydantic import BaseModel
from datetime import datetime

class CachedQuote(BaseModel):
    """Retrieved closing price with the time it was fetched"""
    symbol: str
    price: float
    cached_at: datetime
