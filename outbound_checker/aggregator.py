"""outbound_checker.aggregator: сборка отчёта об исходящих ссылках из графа ссылок."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from outbound_checker.crawler.link_extractor import is_internal
from outbound_checker.crawler.models import CrawlResult, FetchFailure, LivenessResult
from outbound_checker.utils import extract_host, remove_duplicates, strip_www
from outbound_checker.whitelist import Whitelist


@dataclass(slots=True)
class OutboundLink:
    """Внешний адрес и страницы сайта, которые на него ссылаются."""

    url: str
    sources: List[str]

    @property
    def referrer(self) -> str:
        return self.sources[0]

    @property
    def domain(self) -> str:
        return strip_www(extract_host(self.url))


@dataclass(slots=True)
class OutboundReport:
    """Итог проверки: исходящие ссылки, мёртвые внешние ссылки, незагруженные страницы."""

    domain: str
    root: str
    pages_crawled: int = 0
    outbound: List[OutboundLink] = field(default_factory=list)
    dead_links: List[LivenessResult] = field(default_factory=list)
    failed_pages: List[FetchFailure] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        for entry, link in zip(data["outbound"], self.outbound):
            entry["domain"] = link.domain
        return data

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def collect_outbound(
    link_graph: Dict[str, List[str]], domain: str, whitelist: Optional[Whitelist] = None
) -> List[OutboundLink]:
    """Обращает граф: внешний адрес -> ссылающиеся страницы (без внутренних и разрешённых адресов)."""
    referrers: Dict[str, List[str]] = {}
    for source, destinations in link_graph.items():
        for destination in destinations:
            if is_internal(destination, domain):
                continue
            if whitelist is not None and whitelist.contains_url(destination):
                continue
            referrers.setdefault(destination, []).append(source)
    return [
        OutboundLink(url, remove_duplicates(sources))
        for url, sources in sorted(referrers.items())
    ]


def aggregate_results(
    result: CrawlResult, whitelist: Optional[Whitelist] = None
) -> OutboundReport:
    """Собирает OutboundReport из результата обхода."""
    return OutboundReport(
        domain=result.domain,
        root=result.root,
        pages_crawled=result.pages_crawled,
        outbound=collect_outbound(result.link_graph, result.domain, whitelist),
        dead_links=sorted(result.dead_links, key=lambda r: r.url),
        failed_pages=sorted(result.failed_pages, key=lambda f: f.url),
    )
