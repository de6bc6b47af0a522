"""
Source catalogue
Kenyan news, government and public-opinion pages with their selector cascades
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote_plus

from models import SourceCategory
from .extractor import SelectorCascade


@dataclass(frozen=True)
class SourceConfig:
    """One page to fetch and how to read it"""
    name: str
    url: str
    category: SourceCategory
    cascade: SelectorCascade
    timeout: Optional[float] = None
    max_containers: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)


NEWS_SOURCES: Tuple[SourceConfig, ...] = (
    SourceConfig(
        name="Daily Nation",
        url="https://www.nation.co.ke/kenya/news",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            ".teaser, .story-item, .card, .article-teaser, .story-card, [data-article], .news-story, .content-item",
            ".teaser-title, .story-headline, .card-title, .article-headline, h2 a, h3 a, .headline a, [class*='title'] a",
            ".teaser-summary, .story-summary, .card-summary, .article-summary, .teaser-text, .excerpt",
        ),
    ),
    SourceConfig(
        name="Citizen Digital",
        url="https://citizen.digital/news",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            ".post-item, .news-card, .article-card, .story-card, .content-block, .post-block, [data-post]",
            ".post-title a, .card-title a, .story-title a, .entry-title a, h2.title a, h3.headline a",
            ".post-excerpt, .card-excerpt, .story-excerpt, .entry-summary, .post-summary",
        ),
    ),
    SourceConfig(
        name="Capital FM",
        url="https://www.capitalfm.co.ke/news/",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            ".entry, .post-entry, .news-entry, .article-entry, .story-entry, .blog-post, [id*='post-']",
            ".entry-title a, .post-title a, h2.entry-title, h3.post-title, .headline a",
            ".entry-excerpt, .post-excerpt, .entry-summary, .post-summary, .excerpt p",
        ),
    ),
    SourceConfig(
        name="Tuko News",
        url="https://www.tuko.co.ke/",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            ".tuko-card, .news-card, .story-card, .article-card, [data-article-id], .post-card, .content-card",
            ".card-title a, .story-title a, .article-title a, h2 a, h3 a, .headline a, [class*='title'] a",
            ".card-summary, .story-summary, .article-summary, .card-excerpt, .story-excerpt",
        ),
    ),
    SourceConfig(
        name="BBC Kenya",
        url="https://www.bbc.com/news/topics/c40rjmqdlzzt",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            "[data-testid='card-text-wrapper'], .gs-c-promo, .media__content",
            "h2, h3, .gs-c-promo-heading__title, .media__title h3, .gs-c-promo-body__headline",
            "[data-testid='card-description'], .gs-c-promo-summary, .media__summary, .gs-c-promo-body__summary",
        ),
    ),
    SourceConfig(
        name="Kenya News Agency",
        url="https://www.kenyanews.go.ke/",
        category=SourceCategory.NEWS,
        cascade=SelectorCascade.from_strings(
            "[class*='post'], #main div, #content div, .news, [class*='news']",
            "h1, h2, h3, h4, h5, a",
            "p, .excerpt, .summary, div",
        ),
    ),
)

GOVERNMENT_SOURCES: Tuple[SourceConfig, ...] = (
    SourceConfig(
        name="State House Kenya",
        url="https://www.president.go.ke",
        category=SourceCategory.GOVERNMENT,
        max_containers=3,
        cascade=SelectorCascade.from_strings(
            ".post, article, .news-item, .content-item",
            "h1, h2, h3, .entry-title, .post-title, .title",
            "p, .entry-content, .post-content, .excerpt",
        ),
    ),
    SourceConfig(
        name="IEBC",
        url="https://www.iebc.or.ke",
        category=SourceCategory.GOVERNMENT,
        max_containers=3,
        cascade=SelectorCascade.from_strings(
            ".post, article, .news-post, .content-item",
            "h1, h2, h3, .post-title, .entry-title, .title",
            "p, .post-content, .entry-content, .excerpt",
        ),
    ),
)


def social_sources(subject: str) -> Tuple[SourceConfig, ...]:
    """Public discussion pages searched for a subject (usually a candidate name)."""
    return (
        SourceConfig(
            name="Nation Comments",
            url=f"https://www.nation.co.ke/kenya/news?search={quote_plus(subject)}",
            category=SourceCategory.SOCIAL,
            max_containers=8,
            cascade=SelectorCascade.from_strings(
                "article, .comment-item, .discussion-item",
                "h1, h2, h3, .comment-title",
                ".comment-text, .discussion-content, p",
            ),
        ),
    )


def default_sources(
    categories: Optional[Iterable[SourceCategory]] = None,
    subject: Optional[str] = None,
) -> List[SourceConfig]:
    """
    Catalogue filtered by category.

    Social sources need a subject and are skipped without one.
    """
    wanted = set(categories) if categories is not None else set(SourceCategory)
    configs: List[SourceConfig] = []
    if SourceCategory.NEWS in wanted:
        configs.extend(NEWS_SOURCES)
    if SourceCategory.GOVERNMENT in wanted:
        configs.extend(GOVERNMENT_SOURCES)
    if SourceCategory.SOCIAL in wanted and subject and subject.strip():
        configs.extend(social_sources(subject.strip()))
    return configs
