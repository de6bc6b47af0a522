"""
Data Aggregator
Concurrent fan-out over configured sources, merged into one AggregatedContext
"""
import asyncio
from typing import Iterable, List, Optional, Sequence, Union
import logging

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from config import get_scraper_settings
from models import (
    AggregatedContext,
    ScrapedItem,
    SourceCategory,
    SourceReport,
    TrendingTerm,
)
from processing.cleaner import normalize_title, top_terms
from scrapers import BaseScraper, Fetcher, PageScraper, SourceConfig, SourceFetcher, default_sources


logger = logging.getLogger(__name__)
console = Console(stderr=True)


class DataAggregator:
    """
    Runs one fetch+extract task per source and joins them after all settle.

    A failing or slow source contributes zero items; it never voids the others.
    The merge step after the join is the only place the context is mutated.
    """

    def __init__(
        self,
        scraper: Optional[BaseScraper] = None,
        fetcher: Optional[Fetcher] = None,
        max_items: Optional[int] = None,
        trending_top_k: Optional[int] = None,
        dedupe: bool = True,
        source_timeout_sec: Optional[float] = None,
    ):
        """
        Args:
            scraper: scraper used for every source (defaults to a PageScraper)
            fetcher: fetch capability for the default scraper (defaults to SourceFetcher)
            max_items: overall item cap after merging
            trending_top_k: number of trending terms derived
            dedupe: drop repeated (source, title) pairs
            source_timeout_sec: outer bound per source task
        """
        settings = get_scraper_settings()
        self.scraper = scraper or PageScraper(fetcher or SourceFetcher())
        self.max_items = int(max_items if max_items is not None else settings.max_items)
        self.trending_top_k = int(trending_top_k if trending_top_k is not None else settings.trending_top_k)
        self.dedupe = dedupe
        self.source_timeout_sec = float(
            source_timeout_sec if source_timeout_sec is not None else settings.request_timeout + 2.0
        )

    async def _run_source_task(
        self,
        config: SourceConfig,
        query: Optional[str],
    ) -> Union[List[ScrapedItem], Exception]:
        timeout = self.source_timeout_sec
        if config.timeout is not None:
            timeout = max(timeout, float(config.timeout))
        try:
            return await asyncio.wait_for(self.scraper.scrape(config, query), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(f"{config.name} source skipped: timed out after {timeout:.1f}s")
            return exc
        except Exception as exc:
            logger.warning(f"{config.name} source skipped: {exc}")
            return exc

    async def aggregate(
        self,
        source_configs: Sequence[SourceConfig],
        query: Optional[str] = None,
        show_progress: bool = False,
    ) -> AggregatedContext:
        """
        Scrape every source concurrently.

        Args:
            source_configs: sources to visit
            query: optional keyword every item must mention
            show_progress: show a Rich spinner and a summary table

        Returns:
            Merged context; never raises for source failures
        """
        configs = list(source_configs)
        context = AggregatedContext(query=query)
        if not configs:
            return context

        tasks = [self._run_source_task(config, query) for config in configs]

        if show_progress:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task(f"[cyan]Fetching from {len(tasks)} sources...", total=None)
                results = await asyncio.gather(*tasks, return_exceptions=True)
                progress.update(task, completed=True)
        else:
            results = await asyncio.gather(*tasks, return_exceptions=True)

        collected: List[ScrapedItem] = []
        for config, res in zip(configs, results):
            if isinstance(res, BaseException):
                context.source_reports.append(
                    SourceReport(name=config.name, ok=False, error=_describe(res))
                )
                continue
            collected.extend(res)
            context.source_reports.append(SourceReport(name=config.name, ok=True, item_count=len(res)))

        context.items = self.merge(collected)
        context.trending_terms = self.trending_terms(context.items, self.trending_top_k)

        failed = sum(1 for report in context.source_reports if not report.ok)
        logger.info(
            f"Aggregated {len(context.items)} items from {len(configs) - failed}/{len(configs)} sources"
        )

        if show_progress:
            self._print_summary(context)

        return context

    async def aggregate_categories(
        self,
        categories: Optional[Iterable[SourceCategory]] = None,
        query: Optional[str] = None,
        subject: Optional[str] = None,
        show_progress: bool = False,
    ) -> AggregatedContext:
        """Aggregate the built-in catalogue, restricted to some categories."""
        configs = default_sources(categories, subject=subject or query)
        return await self.aggregate(configs, query=query, show_progress=show_progress)

    def merge(self, items: Iterable[ScrapedItem]) -> List[ScrapedItem]:
        """Deduplicate by (source, normalized title) and apply the overall cap."""
        merged: List[ScrapedItem] = []
        seen = set()
        for item in items:
            if self.dedupe:
                key = (item.source, normalize_title(item.title))
                if key in seen:
                    continue
                seen.add(key)
            merged.append(item)
            if len(merged) >= self.max_items:
                break
        return merged

    @staticmethod
    def trending_terms(items: Iterable[ScrapedItem], top_k: int = 10) -> List[TrendingTerm]:
        """Most frequent content words over every item's content."""
        return [
            TrendingTerm(term=term, count=count)
            for term, count in top_terms((item.content for item in items), top_k)
        ]

    def _print_summary(self, context: AggregatedContext):
        console.print()

        table = Table(title="Aggregation Summary", show_header=True)
        table.add_column("Source", style="cyan")
        table.add_column("Status", style="magenta")
        table.add_column("Items", justify="right", style="green")

        for report in context.source_reports:
            status = "ok" if report.ok else f"[red]failed[/red] ({report.error})"
            table.add_row(report.name, status, str(report.item_count))

        table.add_row("", "", "")
        table.add_row("[bold]Kept[/bold]", "", f"[bold]{len(context.items)}[/bold]")

        console.print(table)
        if context.trending_terms:
            terms = ", ".join(f"{t.term} ({t.count})" for t in context.trending_terms)
            console.print(f"Trending: {terms}")
        console.print()


def _describe(exc: BaseException) -> str:
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


async def aggregate_sources(
    categories: Optional[Iterable[SourceCategory]] = None,
    query: Optional[str] = None,
    **kwargs,
) -> AggregatedContext:
    """
    Convenience wrapper over the built-in catalogue.

    Usage:
        context = await aggregate_sources([SourceCategory.NEWS])
        print(context.summary())
    """
    return await DataAggregator(**kwargs).aggregate_categories(categories, query=query)
