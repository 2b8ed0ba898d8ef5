#!/usr/bin/env python3
"""
Точка входа для запуска OutboundChecker через командную строку.

Команды:
  check     Обойти сайт, вывести/сохранить отчёт об исходящих ссылках
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязателен, флаги его перекрывают)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию OutboundChecker

Пример:
  outbound-checker check --starting-url https://example.com --domain example.com \\
      --num-url-crawl-limit 100 --show-dead-links --no-interactive
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from outbound_checker import __version__
from outbound_checker.config import CheckerConfig, load_config
from outbound_checker.engine import Engine
from outbound_checker.interactive_cli import review_interactively
from outbound_checker.logger import DEFAULT_FORMAT, setup_logging
from outbound_checker.report import render_html, render_json, render_text
from outbound_checker.whitelist import WhitelistWriteError

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_config(ctx, **overrides) -> CheckerConfig:
    """Сливает значения из файла конфига с флагами командной строки и проверяет результат."""
    config_path = ctx.obj.get('config_path')
    try:
        if config_path is not None:
            return load_config(config_path, **overrides)
        return CheckerConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print_error(f'Ошибка конфигурации: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='OutboundChecker, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд OutboundChecker CLI."""
    setup_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.option('--starting-url', 'starting_url', default=None,
              help='Страница, с которой начинается обход, например https://example.com')
@click.option('--domain', 'domain', default=None,
              help='Домен сайта без схемы и www; всё остальное считается внешним')
@click.option('--num-url-crawl-limit', 'page_limit', type=int, default=None,
              help='Сколько страниц обойти (по умолчанию без лимита)')
@click.option('--num-concurrent-crawls', 'max_concurrency', type=int, default=None,
              help='Число одновременных запросов к сайту (по умолчанию 20)')
@click.option('--num-retry', 'retry_count', type=int, default=None,
              help='Число попыток загрузки страницы (по умолчанию 3)')
@click.option('--show-dead-links/--hide-dead-links', 'show_dead_links', default=None,
              help='Проверять и показывать недоступные внешние ссылки')
@click.option('--interactive/--no-interactive', 'interactive', default=None,
              help='Интерактивно добавлять новые домены в белый список')
@click.option('--domains-whitelist-file', 'whitelist_file', default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help='Файл белого списка доменов (пустые строки и строки с "//" игнорируются)')
@click.option('--dead-external-urls', 'dead_urls_file', default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help='Файл внешних URL, недоступных краулеру; должен существовать')
@click.option('--extractor', 'extractor', default=None,
              type=click.Choice(['regex', 'html']),
              help='Способ извлечения ссылок из страницы')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--html', '-h', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить HTML-отчёт в файл')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с Jinja2-шаблоном report.html.j2')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def check(ctx, json_output, html_output, template_dir, pretty, crawl_timeout, **overrides):
    """Обойти сайт и показать внешние ссылки, которых нет в белом списке."""
    cfg = build_config(ctx, **overrides)
    engine = Engine(cfg)
    try:
        engine.load_inputs()
    except FileNotFoundError as e:
        print_error(f'Ошибка конфигурации: {e}')

    click.echo(f'Starting crawl: {cfg.starting_url}', err=True)
    try:
        report = engine.run(crawl_timeout)
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    if not json_output and not html_output:
        click.echo(render_text(report))

    if cfg.interactive:
        try:
            # отчёт в файле: строки ссылок в терминал ещё не выводились
            review_interactively(report, engine.whitelist, show_links=bool(json_output or html_output))
        except WhitelistWriteError as e:
            print_error(f'Ошибка записи белого списка: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option('--starting-url', 'starting_url', default=None)
@click.option('--domain', 'domain', default=None)
@click.pass_context
def show_config(ctx, starting_url, domain):
    """Показать итоговую конфигурацию в JSON."""
    cfg = build_config(ctx, starting_url=starting_url, domain=domain)
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(prog_name='outbound-checker')


if __name__ == "__main__":
    main()
