"""ScrollHarvest Scrapers Package"""

from .base import BaseScraper
from .login import login_with_credentials
from .marketplace import HarvestResult, MarketplaceScraper, build_search_url

__all__ = [
    "BaseScraper",
    "HarvestResult",
    "MarketplaceScraper",
    "build_search_url",
    "login_with_credentials",
]
