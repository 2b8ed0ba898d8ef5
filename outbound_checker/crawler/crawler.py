from __future__ import annotations

import asyncio
import logging
import time
from typing import FrozenSet, Iterable, Optional

from aiohttp import ClientSession, ClientTimeout

from outbound_checker.config import CheckerConfig
from outbound_checker.crawler.fetcher import Fetcher, FetchError
from outbound_checker.crawler.link_extractor import LinkKind, classify_url, extract_links, normalize_url
from outbound_checker.crawler.models import CrawlResult, FetchFailure, PageState
from outbound_checker.crawler.state import CrawlContext
from outbound_checker.logger import LOGGER_NAME

__all__ = ("AsyncCrawler",)


class AsyncCrawler:
    """
    Рекурсивный асинхронный обход сайта.

    Каждая внутренняя страница и каждая проверка внешней ссылки выполняются
    отдельной задачей одной asyncio.TaskGroup; crawl() возвращается, когда
    завершены все задачи этого запуска.
    """

    def __init__(self, config: CheckerConfig, known_dead: Iterable[str] = ()) -> None:
        self.config = config
        self.known_dead: FrozenSet[str] = frozenset(known_dead)
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.context: Optional[CrawlContext] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    async def __aenter__(self) -> AsyncCrawler:
        timeout = ClientTimeout(total=self.config.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if not self.session:
            raise RuntimeError("Session not initialized")
        start_url = str(self.config.starting_url)
        root = normalize_url(start_url, start_url)
        if root is None:
            raise ValueError(f"starting url is not crawlable: {start_url}")

        ctx = CrawlContext(self.config, self.known_dead)
        self.context = ctx
        self.fetcher = Fetcher(self.session, self.config, ctx.gate)

        self.logger.info("Старт обхода: %s (домен %s)", root, self.config.domain)
        start = time.monotonic()
        async with asyncio.TaskGroup() as tg:
            tg.create_task(self.visit(ctx, tg, root))
        duration = time.monotonic() - start

        pages = len(ctx.fetched_pages)
        self.logger.info(
            "Завершено: %d страниц за %.2f с, ошибок загрузки: %d",
            pages, duration, len(ctx.failed_pages),
        )
        return CrawlResult(
            root=root,
            domain=self.config.domain,
            link_graph=ctx.graph.snapshot(),
            pages_crawled=pages,
            failed_pages=list(ctx.failed_pages),
            dead_links=list(ctx.dead_links),
        )

    async def visit(self, ctx: CrawlContext, tg: asyncio.TaskGroup, url: str) -> PageState:
        """Process one internal page and spawn tasks for the links it contains."""
        # claim and budget charge must stay ahead of the first await
        if not ctx.visited.claim(url):
            self.logger.debug("Skipping already visited url %s", url)
            return PageState.SKIPPED_DUPLICATE

        count, within_budget = ctx.budget.charge()
        if not within_budget:
            self.logger.debug("Page limit %d reached, abandoning %s", ctx.budget.limit, url)
            return PageState.SKIPPED_OVER_BUDGET

        self.logger.info("Crawling [%d/%s] %s", count, "∞" if self.config.unlimited else ctx.budget.limit, url)
        ctx.fetched_pages.append(url)
        try:
            page = await self.fetcher.fetch(url)
        except FetchError as exc:
            self.logger.error("Error while fetching body of %s: %s", url, exc.cause)
            ctx.failed_pages.append(FetchFailure(url, str(exc.cause), exc.attempts))
            return PageState.FETCH_FAILED

        links = extract_links(page, self.config.extractor)
        self.logger.debug("Found %d links on %s", len(links), url)
        for raw in links:
            target = normalize_url(raw, url)
            if target is None:
                continue
            ctx.graph.record(url, target)
            if classify_url(target, self.config.domain) is LinkKind.INTERNAL:
                tg.create_task(self.visit(ctx, tg, target))
            elif self._should_check_liveness(ctx, target):
                tg.create_task(self.check_alive(ctx, target, url))
        return PageState.DONE

    def _should_check_liveness(self, ctx: CrawlContext, url: str) -> bool:
        return (
            self.config.show_dead_links
            and url not in ctx.known_dead
            and ctx.visited.claim(url)
        )

    async def check_alive(self, ctx: CrawlContext, url: str, source: str) -> None:
        result = await self.fetcher.check_liveness(url, source)
        if not result.alive:
            self.logger.warning("Dead outbound link %s on %s: %s", url, source, result.reason)
            ctx.dead_links.append(result)
