import pytest

from outbound_checker.utils import read_list_file
from outbound_checker.whitelist import Whitelist, WhitelistWriteError, load_known_dead_urls


def test_read_list_file_skips_blank_and_comment_lines(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("// comment\n\n  github.com  \n//another\nexample.org\n", encoding="utf-8")
    assert read_list_file(path) == ["github.com", "example.org"]


def test_missing_whitelist_is_empty(tmp_path):
    whitelist = Whitelist.load(tmp_path / "nope.txt")
    assert len(whitelist) == 0
    assert not whitelist.contains_url("https://github.com/")


def test_whitelist_holds_bare_and_www_forms(tmp_path):
    path = tmp_path / "wl.txt"
    path.write_text("github.com\nwww.python.org\n", encoding="utf-8")
    whitelist = Whitelist.load(path)
    assert "github.com" in whitelist
    assert "www.github.com" in whitelist
    assert "python.org" in whitelist
    assert whitelist.contains_url("https://www.python.org/downloads")
    assert not whitelist.contains_url("https://gist.github.com/")


def test_accept_appends_to_file(tmp_path):
    path = tmp_path / "wl.txt"
    whitelist = Whitelist.load(path)
    whitelist.accept("www.example.org")
    whitelist.accept("ext.test")
    assert path.read_text(encoding="utf-8") == "example.org\next.test\n"
    assert Whitelist.load(path).domains == whitelist.domains


def test_accept_write_failure_is_fatal(tmp_path):
    whitelist = Whitelist(tmp_path / "missing-dir" / "wl.txt")
    with pytest.raises(WhitelistWriteError):
        whitelist.accept("example.org")


def test_known_dead_file_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_known_dead_urls(tmp_path / "dead.txt")


def test_known_dead_urls_are_normalized(tmp_path):
    path = tmp_path / "dead.txt"
    path.write_text(
        "// blocked by bot protection\nhttps://blocked.test\nhttps://ext.test/x#frag\nnot a url\n",
        encoding="utf-8",
    )
    assert load_known_dead_urls(path) == {"https://blocked.test/", "https://ext.test/x"}
