"""outbound_checker.utils: вспомогательные функции для списков в файлах и работы с хостами."""

from __future__ import annotations

from pathlib import Path
from typing import Collection, List, Sequence, Union
from urllib.parse import urlsplit

from outbound_checker.logger import logger

__all__: Sequence[str] = (
    "COMMENT_PREFIX",
    "read_list_file",
    "extract_host",
    "strip_www",
    "remove_duplicates",
)

COMMENT_PREFIX = "//"


def read_list_file(path: Union[str, Path]) -> List[str]:
    """Читает файл-список: по одному значению в строке, пустые строки и строки с `//` пропускаются.

    Отсутствующий файл приводит к FileNotFoundError; решать, фатально ли это, должен вызывающий.
    """
    p = Path(path).expanduser()
    entries: List[str] = []
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        entries.append(line)
    logger.debug("Loaded %d entries from %s", len(entries), p)
    return entries


def extract_host(url: str) -> str:
    """Возвращает host[:port] из URL; пустую строку, если URL не разбирается."""
    try:
        return urlsplit(url.strip()).netloc
    except ValueError:
        logger.warning("Cannot parse url %r", url)
        return ""


def strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def remove_duplicates(items: Collection[str]) -> List[str]:
    """Удаляет дубликаты, сохраняя порядок."""
    return list(dict.fromkeys(items))
