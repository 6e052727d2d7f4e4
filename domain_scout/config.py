# File: domain_scout/config.py
"""
Модуль для загрузки и валидации конфигурации сканера DomainScout.
Используется Pydantic для описания схемы и проверки данных; модель
заморожена, поэтому запущенный скан работает с неизменяемым снимком настроек.
"""
from __future__ import annotations

import errno
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from domain_scout.crawler.fetcher import DEFAULT_USER_AGENT
from domain_scout.utils import ensure_scheme, is_http_url

__all__ = ("JSRenderMode", "ScanConfiguration", "load_config")


class JSRenderMode(str, Enum):
    """Когда страницу рендерить в браузере."""

    ALL_PAGES = "all_pages"
    FALLBACK = "fallback"
    SAMPLE = "sample"


class ScanConfiguration(BaseModel):
    """Конфигурация для одного запуска сканирования."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_urls: Tuple[str, ...] = Field(default=(), description="Стартовые сайты; схема https добавляется автоматически.")
    max_pages: int = Field(500, ge=1, description="Лимит страниц на один стартовый сайт.")
    max_depth: int = Field(10, ge=0, description="Максимальная глубина обхода ссылок.")
    crawl_workers: int = Field(10, ge=1, description="Одновременных загрузок страниц.")
    check_workers: int = Field(20, ge=1, description="Одновременных проверок доменов.")
    delay: float = Field(0.1, ge=0, description="Пауза перед каждым запросом (секунд).")
    retries: int = Field(3, ge=1, description="Число попыток WHOIS.")

    use_sitemaps: bool = Field(True, description="sitemap, robots.txt, RSS и WordPress API.")
    use_archives: bool = Field(False, description="Wayback Machine и Common Crawl.")
    js_rendering: bool = Field(False, description="Рендеринг страниц в headless-браузере.")
    js_render_mode: JSRenderMode = Field(JSRenderMode.FALLBACK)
    js_sample_size: int = Field(20, ge=0, description="Сколько первых страниц рендерить в режиме sample.")
    js_fallback_threshold: int = Field(3, ge=0, description="Порог числа ссылок для режима fallback.")

    excluded_domains: FrozenSet[str] = Field(default_factory=frozenset, description="Дополнительные исключения.")

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    request_timeout: float = Field(15.0, gt=0, description="Таймаут на один HTTP-запрос (секунд).")
    dns_timeout: float = Field(5.0, gt=0)
    whois_timeout: float = Field(10.0, gt=0)
    tld_whois_limit: int = Field(2, ge=1, description="Одновременных WHOIS-запросов на один TLD.")
    render_pool_size: int = Field(3, ge=1)
    render_timeout: float = Field(10.0, gt=0)

    @field_validator("seed_urls", mode="before")
    def _normalize_seeds(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            seeds = []
            for raw in v:
                url = ensure_scheme(str(raw)).rstrip("/")
                if is_http_url(url) and url not in seeds:
                    seeds.append(url)
            return tuple(seeds)
        return v

    @field_validator("excluded_domains", mode="before")
    def _split_excluded(cls, v: Any) -> Any:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(d.strip().lower().rstrip(".") for d in v if str(d).strip())
        return v

    @model_validator(mode="after")
    def _check_js_settings(self) -> ScanConfiguration:
        if self.js_rendering and self.js_render_mode is JSRenderMode.SAMPLE and self.js_sample_size < 1:
            raise ValueError("js_sample_size must be >= 1 in sample mode")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None] = None) -> ScanConfiguration:
    """
    Читает YAML или JSON и возвращает проверенный объект ScanConfiguration.
    Без пути берётся configs/default.yaml, а если его нет, встроенные значения.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScanConfiguration()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ScanConfiguration(**data)
