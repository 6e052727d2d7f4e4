# === FILE: domain_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска DomainScout через командную строку.

Команды:
  scan      Обойти сайты, проверить найденные домены и вывести/сохранить свободные
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  URLS...             Стартовые сайты (заменяют seed_urls из конфига)
  --limit INT         Макс. число страниц на сайт (override max_pages)
  --depth INT         Макс. глубина обхода (override max_depth)
  --exclude LIST      Дополнительные исключённые домены через запятую
  --archives          Добавить URL из Wayback Machine и Common Crawl
  --js                Включить рендеринг JavaScript
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего сканирования (секунд)

Дополнительно:
  --version, -v       Показать версию DomainScout

Пример:
  domain-scout scan example-forum.com --limit 200 --json reports/domains.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from domain_scout import __version__
from domain_scout.config import load_config
from domain_scout.engine import start_scan
from domain_scout.events import (
    DomainChecked,
    DomainDiscovered,
    PageFailed,
    PhaseChanged,
    ScanEvent,
    StatusMessage,
)
from domain_scout.logger import DEFAULT_FORMAT, init_logging, logger
from domain_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


def log_event(event: ScanEvent) -> None:
    """Приёмник событий для CLI: пишет значимые события в лог."""
    if isinstance(event, PhaseChanged):
        logger.info("Phase: %s", event.phase.value)
    elif isinstance(event, StatusMessage):
        logger.info(event.text)
    elif isinstance(event, DomainChecked):
        if event.available:
            logger.info("AVAILABLE: %s", event.domain)
        else:
            logger.debug("registered: %s", event.domain)
    elif isinstance(event, DomainDiscovered):
        logger.debug("Found %s on %s", event.domain, event.source_url)
    elif isinstance(event, PageFailed):
        logger.debug("Failed %s: %s", event.url, event.error)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="DomainScout, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Путь к файлу конфигурации YAML/JSON.",
)
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Уровень логирования",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Путь к файлу логов (stderr, если не указан)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Строка формата для логов",
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд DomainScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f"Ошибка загрузки конфигурации: {e}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("scan", context_settings=CONTEXT_SETTINGS)
@click.argument("urls", nargs=-1)
@click.option("--limit", "-l", "limit", type=click.IntRange(min=1), default=None,
              help="Макс. число страниц на сайт (override max_pages)")
@click.option("--depth", "-d", "depth", type=click.IntRange(min=0), default=None,
              help="Макс. глубина обхода (override max_depth)")
@click.option("--exclude", "-e", "exclude", default=None,
              help="Дополнительные исключённые домены через запятую")
@click.option("--archives/--no-archives", default=None,
              help="Использовать Wayback Machine и Common Crawl")
@click.option("--js/--no-js", "js", default=None, help="Рендеринг JavaScript")
@click.option(
    "--json", "-j", "json_output",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Сохранить JSON-отчёт в файл",
)
@click.option("--pretty", is_flag=True, help="Преформатировать JSON-вывод (отступ 2)")
@click.option(
    "--scan-timeout", "scan_timeout",
    type=float,
    default=None,
    help="Таймаут всего сканирования (секунд); по истечении выводится частичный результат",
)
@click.pass_context
def scan(ctx, urls, limit, depth, exclude, archives, js, json_output, pretty, scan_timeout):
    """Запустить сканирование и вывести свободные домены."""
    cfg = ctx.obj["config"]
    overrides = {}
    if urls:
        overrides["seed_urls"] = list(urls)
    if limit is not None:
        overrides["max_pages"] = limit
    if depth is not None:
        overrides["max_depth"] = depth
    if exclude:
        overrides["excluded_domains"] = set(cfg.excluded_domains) | {
            d.strip().lower() for d in exclude.split(",") if d.strip()
        }
    if archives is not None:
        overrides["use_archives"] = archives
    if js is not None:
        overrides["js_rendering"] = js
    if overrides:
        try:
            # model_copy не валидирует, поэтому собираем модель заново
            cfg = type(cfg)(**{**cfg.model_dump(), **overrides})
        except Exception as e:
            print_error(f"Неверные параметры: {e}")

    if not cfg.seed_urls:
        print_error("Не указаны стартовые URL")

    logger.debug("Starting scan of %s", ", ".join(cfg.seed_urls))
    try:
        report = asyncio.run(start_scan(cfg, sink=log_event, scan_timeout=scan_timeout))
    except Exception as e:
        print_error(f"Ошибка при сканировании: {e}")

    if report.cancelled:
        click.secho("Сканирование прервано, результат неполный", fg="yellow", err=True)

    if not json_output:
        indent = 2 if pretty else None
        results = [r.to_dict() for r in report.results]
        try:
            click.echo(json.dumps(results, ensure_ascii=False, indent=indent))
        except TypeError as e:
            print_error(f"Ошибка сериализации JSON: {e}")
        return

    try:
        saved_json = render_json(report, json_output)
        click.echo(f"JSON report: {saved_json}")
    except Exception as e:
        print_error(f"Ошибка при сохранении JSON: {e}")


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj["config"]
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
