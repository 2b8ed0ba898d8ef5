"""
Data models for the OutboundChecker crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(slots=True)
class PageData:
    """Holds the normalized URL and the raw body of a fetched page."""

    url: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class PageState(str, Enum):
    """Terminal outcome of visiting one page."""

    DONE = "done"
    FETCH_FAILED = "fetch_failed"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_OVER_BUDGET = "skipped_over_budget"


@dataclass(slots=True)
class FetchFailure:
    """An internal page that could not be fetched after all retries."""

    url: str
    reason: str
    attempts: int


@dataclass(slots=True)
class LivenessResult:
    """Outcome of a single liveness check of an external link."""

    url: str
    source: str
    alive: bool
    status: Optional[int] = None
    reason: str = ""


@dataclass(slots=True)
class CrawlResult:
    """Everything one crawl run produced; read only after the run finished."""

    root: str
    domain: str
    link_graph: Dict[str, List[str]] = field(default_factory=dict)
    pages_crawled: int = 0
    failed_pages: List[FetchFailure] = field(default_factory=list)
    dead_links: List[LivenessResult] = field(default_factory=list)
