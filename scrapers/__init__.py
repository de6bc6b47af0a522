"""
Scrapers Module
"""
from .base import BaseScraper, Fetcher
from .fetcher import SourceFetcher
from .extractor import (
    HeuristicExtractor,
    SelectorCascade,
    QualityRules,
    BOILERPLATE_MARKERS,
    POLITICAL_KEYWORDS,
)
from .sources import (
    SourceConfig,
    NEWS_SOURCES,
    GOVERNMENT_SOURCES,
    social_sources,
    default_sources,
)
from .page_scraper import PageScraper

__all__ = [
    # Base
    "BaseScraper",
    "Fetcher",
    # Fetch / extract
    "SourceFetcher",
    "HeuristicExtractor",
    "SelectorCascade",
    "QualityRules",
    "BOILERPLATE_MARKERS",
    "POLITICAL_KEYWORDS",
    # Catalogue
    "SourceConfig",
    "NEWS_SOURCES",
    "GOVERNMENT_SOURCES",
    "social_sources",
    "default_sources",
    # Scraper
    "PageScraper",
]
