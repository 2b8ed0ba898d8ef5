# File: tests/conftest.py
from pathlib import Path
from typing import Callable

import pytest

from outbound_checker.config import CheckerConfig
from outbound_checker.crawler.models import PageData


@pytest.fixture()
def dead_urls_file(tmp_path) -> Path:
    """
    Empty known-dead/blocked urls file (it must exist for every run).
    """
    path = tmp_path / "dead.txt"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture()
def whitelist_file(tmp_path) -> Path:
    """
    Path of a whitelist file that does not exist yet.
    """
    return tmp_path / "whitelist.txt"


@pytest.fixture()
def make_config(dead_urls_file, whitelist_file) -> Callable[..., CheckerConfig]:
    """
    Factory for a valid CheckerConfig; keyword arguments override the defaults.
    """

    def _make(**overrides) -> CheckerConfig:
        data = dict(
            starting_url="https://a.test/",
            domain="a.test",
            timeout=2.0,
            backoff_unit=0.0,
            interactive=False,
            whitelist_file=whitelist_file,
            dead_urls_file=dead_urls_file,
        )
        data.update(overrides)
        return CheckerConfig(**data)

    return _make


@pytest.fixture()
def mock_page_data() -> PageData:
    """
    Root page of the reference scenario: one internal link, one bookmark, one external link.
    """
    html = (
        '<html><body><a href="/about">About</a>'
        '<a href="https://a.test/#top">Top</a>'
        "<a href='https://ext.test/x'>Ext</a></body></html>"
    )
    return PageData(url="https://a.test/", content=html.encode())
