"""
Base Scraper
Fetch capability protocol and the abstract scraper every source task goes through
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Protocol, runtime_checkable
import logging

from models import ScrapedItem


logger = logging.getLogger(__name__)


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can turn a URL into page text (SourceFetcher, or a fake in tests)."""

    async def fetch(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        ...


class BaseScraper(ABC):
    """
    Abstract scraper.

    Concrete scrapers receive their fetch capability at construction time
    and keep no state between calls.
    """

    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher

    @property
    @abstractmethod
    def name(self) -> str:
        """Scraper name used in logs"""
        pass

    @abstractmethod
    async def scrape(self, config, query: Optional[str] = None) -> List[ScrapedItem]:
        """
        Fetch and extract one source.

        Args:
            config: source description
            query: optional keyword the items must mention

        Returns:
            Extracted items (possibly empty)
        """
        pass

    def _log_scrape(self, source: str, count: int):
        logger.info(f"[{self.name}] {source} yielded {count} items")
