"""Тесты для CLI (`outbound_checker.cli`) с использованием click.testing.CliRunner.
Проверяют команды `check`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import outbound_checker.engine as engine_module
from outbound_checker.cli import cli
from outbound_checker.crawler.models import CrawlResult


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Патчим start_crawl, чтобы возвращать фиктивный результат без сети."""
    calls = []

    async def fake_crawl(cfg, known_dead=()):
        calls.append((cfg, frozenset(known_dead)))
        return CrawlResult(
            root="https://a.test/",
            domain=cfg.domain,
            link_graph={
                "https://a.test/": ["https://a.test/about", "https://ext.test/x", "https://github.com/me"],
            },
            pages_crawled=2,
        )

    monkeypatch.setattr(engine_module, "start_crawl", fake_crawl)
    return calls


@pytest.fixture()
def base_args(dead_urls_file, whitelist_file):
    return [
        "check",
        "--starting-url", "https://a.test/",
        "--domain", "a.test",
        "--dead-external-urls", str(dead_urls_file),
        "--domains-whitelist-file", str(whitelist_file),
    ]


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "OutboundChecker" in result.output


def test_check_prints_outbound_links(base_args, patch_start_crawl):
    result = CliRunner().invoke(cli, base_args + ["--no-interactive", "--num-url-crawl-limit", "5"])
    assert result.exit_code == 0, result.output
    assert "https://ext.test/x <- https://a.test/" in result.output
    assert "https://github.com/me" in result.output
    assert "https://a.test/about" not in result.output
    cfg, _ = patch_start_crawl[0]
    assert cfg.page_limit == 5
    assert not cfg.interactive


def test_check_uses_existing_whitelist(base_args, whitelist_file):
    whitelist_file.write_text("// accepted\ngithub.com\n", encoding="utf-8")
    result = CliRunner().invoke(cli, base_args + ["--no-interactive"])
    assert result.exit_code == 0
    assert "github.com" not in result.output
    assert "https://ext.test/x" in result.output


def test_check_passes_known_dead_urls(base_args, dead_urls_file, patch_start_crawl):
    dead_urls_file.write_text("https://blocked.test/page#x\n", encoding="utf-8")
    result = CliRunner().invoke(cli, base_args + ["--no-interactive", "--show-dead-links"])
    assert result.exit_code == 0
    cfg, known_dead = patch_start_crawl[0]
    assert cfg.show_dead_links
    assert known_dead == {"https://blocked.test/page"}


def test_interactive_whitelisting(base_args, whitelist_file):
    result = CliRunner().invoke(cli, base_args + ["--interactive"], input="y\nn\n")
    assert result.exit_code == 0, result.output
    assert 'Whitelist domain "ext.test"' in result.output
    assert 'Whitelist domain "github.com"' in result.output
    assert whitelist_file.read_text(encoding="utf-8") == "ext.test\n"


def test_missing_dead_urls_file_is_fatal(base_args, dead_urls_file, patch_start_crawl):
    dead_urls_file.unlink()
    result = CliRunner().invoke(cli, base_args + ["--no-interactive"])
    assert result.exit_code == 1
    assert patch_start_crawl == []


def test_missing_domain_is_fatal(dead_urls_file, patch_start_crawl):
    result = CliRunner().invoke(
        cli, ["check", "--starting-url", "https://a.test/", "--dead-external-urls", str(dead_urls_file)]
    )
    assert result.exit_code == 1
    assert patch_start_crawl == []


def test_check_json_and_html_files(base_args, tmp_path):
    out_json = tmp_path / "out.json"
    out_html = tmp_path / "out.html"
    result = CliRunner().invoke(
        cli, base_args + ["--no-interactive", "--json", str(out_json), "--pretty", "--html", str(out_html)]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out_json.read_text(encoding="utf-8"))
    assert [link["url"] for link in data["outbound"]] == ["https://ext.test/x", "https://github.com/me"]
    assert "https://ext.test/x" in out_html.read_text(encoding="utf-8")


def test_crawl_timeout(monkeypatch, base_args):
    async def slow(cfg, known_dead=()):
        await asyncio.sleep(2)

    monkeypatch.setattr(engine_module, "start_crawl", slow)
    result = CliRunner().invoke(cli, base_args + ["--no-interactive", "--crawl-timeout", "0.1"])
    assert result.exit_code != 0
    assert "не завершён" in result.output


def test_config_file_and_show_config(tmp_path, dead_urls_file):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(
        json.dumps(
            {
                "starting_url": "https://a.test/",
                "domain": "a.test",
                "max_concurrency": 7,
                "dead_urls_file": str(dead_urls_file),
            }
        ),
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["domain"] == "a.test"
    assert data["max_concurrency"] == 7


def test_interactive_end_of_input_is_no(base_args, whitelist_file):
    result = CliRunner().invoke(cli, base_args + ["--interactive"], input="")
    assert result.exit_code == 0, result.output
    assert "Aborted!" not in result.output
    assert result.output.count('Whitelist domain "') == 1
    assert not whitelist_file.exists()


def test_interactive_text_mode_prints_each_link_once(base_args):
    result = CliRunner().invoke(cli, base_args + ["--interactive"], input="n\nn\n")
    assert result.exit_code == 0, result.output
    assert result.output.count("https://ext.test/x <- https://a.test/") == 1


def test_interactive_file_mode_prints_link_before_question(base_args, tmp_path):
    out_json = tmp_path / "out.json"
    result = CliRunner().invoke(cli, base_args + ["--interactive", "--json", str(out_json)], input="n\nn\n")
    assert result.exit_code == 0, result.output
    assert "[1/2] https://ext.test/x <- https://a.test/" in result.output


def test_whitelist_write_error_is_fatal(dead_urls_file, tmp_path):
    unwritable = tmp_path / "missing_dir" / "whitelist.txt"
    result = CliRunner().invoke(
        cli,
        [
            "check",
            "--starting-url", "https://a.test/",
            "--domain", "a.test",
            "--dead-external-urls", str(dead_urls_file),
            "--domains-whitelist-file", str(unwritable),
            "--interactive",
        ],
        input="y\n",
    )
    assert result.exit_code == 1
    assert "Ошибка записи белого списка" in result.output
    assert not unwritable.exists()


def test_flags_override_config_file(tmp_path, dead_urls_file):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        f"starting_url: https://a.test/\ndomain: a.test\nmax_concurrency: 7\ndead_urls_file: {dead_urls_file}\n",
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config", "--domain", "b.test"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["domain"] == "b.test"
    assert data["max_concurrency"] == 7


def test_broken_config_file_is_fatal(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("- just\n- a list\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output
