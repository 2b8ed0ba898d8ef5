"""outbound_checker.whitelist: белый список доменов и список известных мёртвых URL."""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Iterable, Set, Union

from outbound_checker.crawler.link_extractor import normalize_url
from outbound_checker.logger import logger
from outbound_checker.utils import extract_host, read_list_file, strip_www

__all__ = ["Whitelist", "WhitelistWriteError", "load_known_dead_urls"]


class WhitelistWriteError(OSError):
    """Не удалось дописать домен в файл белого списка."""


class Whitelist:
    """Набор доменов, ссылки на которые не попадают в отчёт.

    Каждый домен хранится в двух формах: без префикса и с префиксом ``www.``.
    """

    def __init__(self, path: Union[str, Path, None] = None, domains: Iterable[str] = ()) -> None:
        self.path = Path(path) if path is not None else None
        self._domains: Set[str] = set()
        for domain in domains:
            self.add(domain)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Whitelist:
        """Загружает белый список; отсутствующий файл даёт пустой список (файл будет создан позже)."""
        p = Path(path)
        try:
            entries = read_list_file(p)
        except FileNotFoundError:
            logger.warning("Domain whitelist file %s does not exist, it will be created later", p)
            entries = []
        logger.info("Domain whitelist file %s loaded: %d domains", p, len(entries))
        return cls(p, entries)

    def add(self, domain: str) -> None:
        domain = strip_www(domain.strip())
        if not domain:
            return
        self._domains.add(domain)
        self._domains.add(f"www.{domain}")

    def __contains__(self, host: object) -> bool:
        return host in self._domains

    def __len__(self) -> int:
        return len(self._domains)

    def contains_url(self, url: str) -> bool:
        return extract_host(url) in self._domains

    def accept(self, domain: str) -> None:
        """Добавляет домен и дописывает его строкой в файл белого списка."""
        domain = strip_www(domain.strip())
        self.add(domain)
        if self.path is None:
            return
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(f"{domain}\n")
        except OSError as exc:
            raise WhitelistWriteError(f"Error writing {self.path}: {exc}") from exc
        logger.info("Domain whitelisted: %s", domain)

    @property
    def domains(self) -> FrozenSet[str]:
        return frozenset(self._domains)


def load_known_dead_urls(path: Union[str, Path]) -> FrozenSet[str]:
    """Читает файл известных мёртвых/заблокированных внешних URL.

    Файл обязан существовать (пусть и пустым): FileNotFoundError пробрасывается.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"File does not exist: {p}, create an empty file.")
    urls: Set[str] = set()
    for line in read_list_file(p):
        url = normalize_url(line, line)
        if url is None or not extract_host(url):
            logger.warning("Skipping invalid url %r in %s", line, p)
            continue
        urls.add(url)
    logger.info("Known dead/blocked urls file %s loaded: %d urls", p, len(urls))
    return frozenset(urls)
