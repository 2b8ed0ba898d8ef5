"""Plain-text listing of an OutboundReport for the terminal."""
from __future__ import annotations

from typing import List

from outbound_checker.aggregator import OutboundReport


def render_text(report: OutboundReport) -> str:
    lines: List[str] = [
        f"Outbound links of {report.domain}: {len(report.outbound)} "
        f"(pages crawled: {report.pages_crawled})",
    ]
    total = len(report.outbound)
    for i, link in enumerate(report.outbound, start=1):
        lines.append(f"[{i}/{total}] {link.url} <- {link.referrer}")

    if report.dead_links:
        lines.append(f"Dead outbound links: {len(report.dead_links)}")
        for dead in report.dead_links:
            lines.append(f"  {dead.url} ({dead.reason}) <- {dead.source}")

    if report.failed_pages:
        lines.append(f"Internal pages that could not be fetched: {len(report.failed_pages)}")
        for failure in report.failed_pages:
            lines.append(f"  {failure.url}: {failure.reason}")
    return "\n".join(lines)
