"""
Heuristic Extractor
Selector-cascade extraction of article teasers from raw HTML
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
import logging
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from models import ScrapedItem, SourceCategory
from processing.cleaner import DataCleaner
from utils.exceptions import ExtractionMismatch


logger = logging.getLogger(__name__)


BOILERPLATE_MARKERS: Tuple[str, ...] = (
    "cookie",
    "subscribe",
    "click here",
    "sign up",
    "newsletter",
    "advertisement",
    "privacy policy",
    "all rights reserved",
)

# Matched as word prefixes, so "elect" also covers "election" and "elected"
POLITICAL_KEYWORDS: Tuple[str, ...] = (
    "politic", "elect", "vote", "voter", "poll", "campaign", "candidate", "party",
    "parliament", "senate", "senator", "mp", "mps", "mca", "governor", "county", "counties",
    "president", "deputy president", "cabinet", "minister", "ministry", "government",
    "state house", "iebc", "court", "constitution", "bill", "law", "policy", "budget",
    "tax", "levy", "finance", "economy", "corruption", "protest", "opposition", "coalition",
    "devolution", "governance", "security", "healthcare", "education", "housing",
    "unemployment", "cost of living", "infrastructure", "agriculture", "transparency",
    "ruto", "raila", "odinga", "gachagua", "kalonzo", "uda", "odm", "azimio", "kenya kwanza",
)


@dataclass(frozen=True)
class SelectorCascade:
    """
    Ordered CSS selector alternatives.

    containers: the first selector that matches anything defines the candidate set
    titles / contents: tried in order inside each container
    """
    containers: Tuple[str, ...]
    titles: Tuple[str, ...]
    contents: Tuple[str, ...]

    @classmethod
    def from_strings(cls, containers: str, titles: str, contents: str) -> "SelectorCascade":
        """Build from comma separated selector lists."""
        def _split(value: str) -> Tuple[str, ...]:
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return cls(_split(containers), _split(titles), _split(contents))


@dataclass(frozen=True)
class QualityRules:
    """Length bands (exclusive), boilerplate markers and relevance vocabulary."""
    title_min: int = 10
    title_max: int = 150
    content_min: int = 20
    content_max: int = 300
    max_containers: int = 10
    boilerplate_markers: Tuple[str, ...] = BOILERPLATE_MARKERS
    relevance_keywords: Tuple[str, ...] = POLITICAL_KEYWORDS
    query: Optional[str] = None

    def title_fits(self, text: str) -> bool:
        return self.title_min < len(text) < self.title_max

    def content_fits(self, text: str) -> bool:
        return self.content_min < len(text) < self.content_max


@dataclass
class HeuristicExtractor:
    """
    Stateless extractor; safe to share between concurrent source tasks.
    """
    cleaner: DataCleaner = field(default_factory=DataCleaner)

    def extract(
        self,
        html: str,
        cascade: SelectorCascade,
        rules: Optional[QualityRules] = None,
        *,
        source: str,
        category: Optional[SourceCategory] = None,
        base_url: Optional[str] = None,
    ) -> List[ScrapedItem]:
        """
        Extract zero or more items from a page.

        An empty list is a normal outcome.
        """
        rules = rules or QualityRules()
        if not html:
            return []

        soup = BeautifulSoup(html, "lxml")
        containers = self._find_containers(soup, cascade.containers)
        if not containers:
            logger.debug(f"[{source}] no container selector matched")
            return []

        relevance = _keyword_pattern(rules.relevance_keywords)
        fetched_at = datetime.now(timezone.utc)
        items: List[ScrapedItem] = []
        seen = set()

        for container in containers[: max(0, rules.max_containers)]:
            try:
                title, content = self._candidate(container, cascade, rules, relevance)
            except ExtractionMismatch as exc:
                logger.debug(f"[{source}] candidate skipped: {exc.message}")
                continue

            key = self.cleaner.normalize_key(title)
            if key in seen:
                continue
            seen.add(key)

            items.append(
                ScrapedItem(
                    title=title,
                    content=content,
                    source=source,
                    fetched_at=fetched_at,
                    url=self._item_url(container, base_url),
                    category=category,
                )
            )

        logger.debug(f"[{source}] extracted {len(items)} of {len(containers)} candidates")
        return items

    @staticmethod
    def _find_containers(soup: BeautifulSoup, selectors: Sequence[str]) -> List[Tag]:
        for selector in selectors:
            try:
                found = soup.select(selector)
            except ValueError as exc:
                # soupsieve rejects some selectors seen in the wild
                logger.debug(f"invalid container selector '{selector}': {exc}")
                continue
            if found:
                return list(found)
        return []

    def _first_in_band(self, container: Tag, selectors: Sequence[str], fits) -> str:
        for selector in selectors:
            try:
                node = container.select_one(selector)
            except ValueError:
                continue
            if node is None:
                continue
            text = self.cleaner.clean(node.get_text(" ", strip=True))
            if text and fits(text):
                return text
        return ""

    def _candidate(
        self,
        container: Tag,
        cascade: SelectorCascade,
        rules: QualityRules,
        relevance: Optional[re.Pattern],
    ) -> Tuple[str, str]:
        title = self._first_in_band(container, cascade.titles, rules.title_fits)
        content = self._first_in_band(container, cascade.contents, rules.content_fits)

        if not title or not content:
            raise ExtractionMismatch("missing title or content")
        if self.cleaner.contains_any(title, rules.boilerplate_markers) or self.cleaner.contains_any(
            content, rules.boilerplate_markers
        ):
            raise ExtractionMismatch("boilerplate", {"title": title})
        if relevance is not None and not (relevance.search(title) or relevance.search(content)):
            raise ExtractionMismatch("not relevant", {"title": title})
        if rules.query:
            needle = rules.query.lower()
            if needle not in title.lower() and needle not in content.lower():
                raise ExtractionMismatch("query not mentioned", {"title": title})
        return title, content

    @staticmethod
    def _item_url(container: Tag, base_url: Optional[str]) -> Optional[str]:
        anchor = container if container.name == "a" and container.get("href") else container.find("a", href=True)
        href = anchor.get("href") if anchor is not None else None
        if not href or str(href).startswith(("javascript:", "#", "mailto:")):
            return base_url
        return urljoin(base_url or "", str(href))


def _keyword_pattern(keywords: Sequence[str]) -> Optional[re.Pattern]:
    words = [re.escape(k.strip().lower()) for k in keywords if k and k.strip()]
    if not words:
        return None
    return re.compile(r"\b(?:" + "|".join(words) + ")", re.IGNORECASE)
