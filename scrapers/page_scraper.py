"""
Page Scraper
Fetch + heuristic extraction for one configured source
"""
from dataclasses import replace
from typing import List, Optional
import logging

from config import get_scraper_settings
from models import ScrapedItem
from .base import BaseScraper, Fetcher
from .extractor import HeuristicExtractor, QualityRules
from .sources import SourceConfig


logger = logging.getLogger(__name__)


class PageScraper(BaseScraper):
    """
    Scrapes HTML listing pages with a selector cascade.

    Fetch failures propagate as NetworkError / FetchTimeoutError so the
    aggregator can record them; extraction misses just yield fewer items.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        extractor: Optional[HeuristicExtractor] = None,
        rules: Optional[QualityRules] = None,
    ):
        super().__init__(fetcher)
        self.extractor = extractor or HeuristicExtractor()
        self.rules = rules or QualityRules(max_containers=get_scraper_settings().max_containers)

    @property
    def name(self) -> str:
        return "PageScraper"

    def rules_for(self, config: SourceConfig, query: Optional[str] = None) -> QualityRules:
        rules = self.rules
        if config.max_containers is not None:
            rules = replace(rules, max_containers=config.max_containers)
        if query:
            rules = replace(rules, query=query)
        return rules

    async def scrape(self, config: SourceConfig, query: Optional[str] = None) -> List[ScrapedItem]:
        html = await self.fetcher.fetch(
            config.url,
            timeout=config.timeout,
            headers=config.headers or None,
        )
        items = self.extractor.extract(
            html,
            config.cascade,
            self.rules_for(config, query),
            source=config.name,
            category=config.category,
            base_url=config.url,
        )
        self._log_scrape(config.name, len(items))
        return items
