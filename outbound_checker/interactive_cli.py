"""
Интерактивное пополнение белого списка доменов после обхода.
"""
from __future__ import annotations

from typing import Callable, List

import click

from outbound_checker.aggregator import OutboundReport
from outbound_checker.logger import logger
from outbound_checker.whitelist import Whitelist

PromptT = Callable[[str], bool]


def _confirm(question: str) -> bool:
    return click.confirm(question, default=False)


def review_interactively(
    report: OutboundReport,
    whitelist: Whitelist,
    prompt: PromptT = _confirm,
    *,
    show_links: bool = False,
) -> List[str]:
    """Для каждого нового домена из отчёта спрашивает, добавить ли его в белый список.

    show_links печатает строку ссылки перед вопросом (если отчёт не был выведен в терминал).
    Конец ввода (click.Abort / EOFError) означает «нет» и завершает опрос.
    Возвращает список принятых доменов. Ошибка записи файла (WhitelistWriteError) пробрасывается.
    """
    accepted: List[str] = []
    total = len(report.outbound)
    for i, link in enumerate(report.outbound, start=1):
        domain = link.domain
        if not domain or domain in whitelist:
            # уже добавлен в этом проходе
            continue
        if show_links:
            click.echo(f"[{i}/{total}] {link.url} <- {link.referrer}")
        try:
            answer = prompt(f'Whitelist domain "{domain}"')
        except (click.Abort, EOFError):
            click.echo()
            logger.info("No more input, interactive review stopped at %s", domain)
            break
        if answer:
            whitelist.accept(domain)
            accepted.append(domain)
        else:
            logger.info("Domain not whitelisted: %s", domain)
    return accepted


__all__ = ["review_interactively"]
