"""
Модуль для загрузки и валидации конфигурации OutboundChecker.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)

from outbound_checker import __version__

DEFAULT_PAGE_LIMIT = -1  # без ограничения
DEFAULT_MAX_CONCURRENCY = 20
DEFAULT_RETRY_COUNT = 3
DEFAULT_WHITELIST_FILE = "./{domain}_whitelisted_outbound_domains.txt"
# URL, которые краулер не может загрузить: мёртвые или блокирующие ботов.
DEFAULT_DEAD_URLS_FILE = "./{domain}_whitelisted_outbound_urls_known_dead_or_blocked.txt"


class CheckerConfig(BaseModel):
    """Конфигурация одного запуска проверки исходящих ссылок."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    starting_url: HttpUrl = Field(..., description="Страница, с которой начинается обход.")
    domain: str = Field(..., min_length=1, description="Домен сайта без схемы и без www.")
    page_limit: int = Field(
        DEFAULT_PAGE_LIMIT, description="Лимит числа страниц; значение <= 0 означает без лимита."
    )
    max_concurrency: int = Field(
        DEFAULT_MAX_CONCURRENCY, ge=1, description="Максимум одновременных сетевых запросов."
    )
    retry_count: int = Field(DEFAULT_RETRY_COUNT, ge=1, description="Число попыток загрузки страницы.")
    backoff_unit: float = Field(1.0, ge=0, description="Единица линейной задержки между попытками (секунд).")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(f"OutboundChecker/{__version__}", min_length=1, description="Заголовок User-Agent.")
    show_dead_links: bool = Field(False, description="Проверять доступность внешних ссылок.")
    interactive: bool = Field(True, description="Интерактивно пополнять белый список доменов.")
    whitelist_file: Optional[Path] = Field(None, description="Файл белого списка доменов.")
    dead_urls_file: Optional[Path] = Field(None, description="Файл известных мёртвых/заблокированных URL.")
    extractor: Literal["regex", "html"] = Field("regex", description="Способ извлечения ссылок.")

    @field_validator("domain", mode="before")
    def _check_bare_domain(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if "://" in v or "/" in v:
                raise ValueError("domain must be a bare host, e.g. example.com")
            if v.startswith("www."):
                raise ValueError("domain must not start with 'www.'")
        return v

    @model_validator(mode="after")
    def _fill_default_files(self) -> CheckerConfig:
        # frozen-модель: подставляем значения по умолчанию в обход __setattr__
        if self.whitelist_file is None:
            object.__setattr__(self, "whitelist_file", Path(DEFAULT_WHITELIST_FILE.format(domain=self.domain)))
        if self.dead_urls_file is None:
            object.__setattr__(self, "dead_urls_file", Path(DEFAULT_DEAD_URLS_FILE.format(domain=self.domain)))
        return self

    @property
    def unlimited(self) -> bool:
        return self.page_limit <= 0


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_data(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON файл конфигурации и возвращает сырой словарь."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path], **overrides: Any) -> CheckerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CheckerConfig.
    Значения из overrides (кроме None) перекрывают значения из файла.
    """
    data = read_config_data(path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CheckerConfig(**data)


__all__ = ["CheckerConfig", "load_config", "read_config_data"]
