from __future__ import annotations

from pathlib import Path

import pytest

from indexping.sources.urls import chunk, collect_urls, read_urls_file, split_list


def test_read_urls_file_skips_comments_and_blanks(tmp_path: Path):
    path = tmp_path / "urls.txt"
    path.write_text(
        "# priority pages\nhttps://example.com/\n\n  https://example.com/about/#team  \n",
        encoding="utf-8",
    )

    assert read_urls_file(path) == ["https://example.com/", "https://example.com/about/#team"]


def test_collect_urls_merges_inline_and_file(tmp_path: Path):
    path = tmp_path / "urls.txt"
    path.write_text("https://example.com/\nhttps://example.com/blog/\n", encoding="utf-8")

    urls = collect_urls(["https://example.com/", "https://example.com/press/"], path)

    assert urls == (
        "https://example.com/",
        "https://example.com/press/",
        "https://example.com/blog/",
    )


def test_split_list_ignores_empty_items():
    assert split_list(" a, ,b ,") == ("a", "b")
    assert split_list(None) == ()


def test_chunk_sizes():
    assert chunk(("a", "b", "c"), 2) == [("a", "b"), ("c",)]
    assert chunk((), 2) == []
    with pytest.raises(ValueError):
        chunk(("a",), 0)
