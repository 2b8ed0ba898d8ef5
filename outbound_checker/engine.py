# File: outbound_checker/engine.py
"""outbound_checker.engine: запуск обхода и сборка отчёта."""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional

from outbound_checker.aggregator import OutboundReport, aggregate_results
from outbound_checker.config import CheckerConfig
from outbound_checker.crawler.crawler import AsyncCrawler
from outbound_checker.crawler.models import CrawlResult
from outbound_checker.logger import logger
from outbound_checker.whitelist import Whitelist, load_known_dead_urls

__all__ = ["Engine", "start_crawl"]


async def start_crawl(cfg: CheckerConfig, known_dead: Iterable[str] = ()) -> CrawlResult:
    """Запускает асинхронный краулер в контексте и возвращает CrawlResult."""
    async with AsyncCrawler(cfg, known_dead) as crawler:
        return await crawler.crawl()


class Engine:
    """Фасад для CLI и тестов: входные файлы, обход, агрегация."""

    def __init__(self, config: CheckerConfig) -> None:
        self.config = config
        self.whitelist: Optional[Whitelist] = None
        self.known_dead: frozenset[str] = frozenset()

    def load_inputs(self) -> None:
        """Читает белый список и список мёртвых URL (последний обязан существовать)."""
        self.known_dead = load_known_dead_urls(self.config.dead_urls_file)
        self.whitelist = Whitelist.load(self.config.whitelist_file)

    def run(self, crawl_timeout: Optional[float] = None) -> OutboundReport:
        """Запускает обход (с необязательным общим таймаутом) и возвращает отчёт."""
        if self.whitelist is None:
            self.load_inputs()
        logger.info("Starting crawl…")
        coro = start_crawl(self.config, self.known_dead)
        try:
            if crawl_timeout:
                result = asyncio.run(asyncio.wait_for(coro, timeout=crawl_timeout))
            else:
                result = asyncio.run(coro)
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", crawl_timeout)
            raise
        return aggregate_results(result, self.whitelist)
