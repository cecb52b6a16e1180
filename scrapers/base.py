"""
ScrollHarvest Base Scraper
Abstract base class for browser-backed listing scrapers.
"""

from abc import ABC, abstractmethod


class BaseScraper(ABC):
    """Abstract base class for listing scrapers."""

    def __init__(self, platform: str):
        """
        Initialize the scraper.

        Args:
            platform: Platform identifier (e.g., 'marketplace')
        """
        self.platform = platform

    @abstractmethod
    def get_html(self, url: str, options, **kwargs):
        """
        Load a listing page, scroll it and return the markup to extract from.

        Args:
            url: Listing page URL
            options: ScrollOptions for the scroll session

        Returns:
            HarvestResult with the chosen markup and session summary
        """
        pass

    @abstractmethod
    def close(self):
        """Clean up any resources (browser, connections, etc.)."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
