"""outbound_checker.crawler: concurrent crawl engine."""

from outbound_checker.crawler.crawler import AsyncCrawler
from outbound_checker.crawler.fetcher import FetchError, Fetcher
from outbound_checker.crawler.models import CrawlResult, FetchFailure, LivenessResult, PageData, PageState

__all__ = [
    "AsyncCrawler",
    "CrawlResult",
    "FetchError",
    "FetchFailure",
    "Fetcher",
    "LivenessResult",
    "PageData",
    "PageState",
]
