"""
Shared mutable state of one crawl run.

All tasks of a run share one event loop, and no method below awaits between
reading and writing its fields, so every mutation is atomic with respect to
other tasks.
"""
from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, DefaultDict, Dict, FrozenSet, List, Set

from outbound_checker.config import CheckerConfig
from outbound_checker.crawler.models import FetchFailure, LivenessResult


class VisitedSet:
    """Set of page identifiers claimed for crawling or liveness checking."""

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def claim(self, url: str) -> bool:
        """Insert *url* if absent; True iff this call performed the insertion."""
        if url in self._seen:
            return False
        self._seen.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class LinkGraph:
    """Append-only multimap source -> destinations; duplicates are preserved."""

    def __init__(self) -> None:
        self._edges: DefaultDict[str, List[str]] = defaultdict(list)

    def record(self, source: str, destination: str) -> None:
        self._edges[source].append(destination)

    def snapshot(self) -> Dict[str, List[str]]:
        return {source: list(dests) for source, dests in self._edges.items()}

    def __len__(self) -> int:
        return sum(len(d) for d in self._edges.values())


class CrawlBudget:
    """Monotonic counter of claimed pages compared against an optional limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.count = 0

    def charge(self) -> tuple[int, bool]:
        """Count one more claimed page; return (count, within_budget)."""
        self.count += 1
        return self.count, self.limit <= 0 or self.count <= self.limit


class ConcurrencyGate:
    """Caps simultaneous network operations; tracks the in-flight counter."""

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("concurrency limit must be >= 1")
        self.limit = limit
        self._semaphore = asyncio.Semaphore(limit)
        self.in_flight = 0
        self.peak = 0

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        async with self._semaphore:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            try:
                yield
            finally:
                self.in_flight -= 1


@dataclass
class CrawlContext:
    """State shared by every task of a single crawl run."""

    config: CheckerConfig
    known_dead: FrozenSet[str] = frozenset()
    visited: VisitedSet = field(default_factory=VisitedSet)
    graph: LinkGraph = field(default_factory=LinkGraph)
    budget: CrawlBudget = field(init=False)
    gate: ConcurrencyGate = field(init=False)
    failed_pages: List[FetchFailure] = field(default_factory=list)
    dead_links: List[LivenessResult] = field(default_factory=list)
    fetched_pages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.budget = CrawlBudget(self.config.page_limit)
        self.gate = ConcurrencyGate(self.config.max_concurrency)
