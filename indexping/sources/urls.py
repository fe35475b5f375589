from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..validation.notifications import dedupe_urls

logger = logging.getLogger(__name__)


def split_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def read_urls_file(path: Path) -> list[str]:
    """Read one URL per line, ignoring blank lines and ``#`` comments."""
    urls: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        candidate = line.strip()
        if not candidate or candidate.startswith("#"):
            continue
        urls.append(candidate)
    logger.debug("Read %d URL(s) from %s", len(urls), path)
    return urls


def collect_urls(inline: Iterable[str], urls_file: Path | None = None) -> tuple[str, ...]:
    collected = list(inline)
    if urls_file is not None:
        collected.extend(read_urls_file(urls_file))
    return dedupe_urls(collected)


def chunk(urls: tuple[str, ...], size: int) -> list[tuple[str, ...]]:
    if size <= 0:
        raise ValueError("Chunk size must be positive.")
    return [urls[start : start + size] for start in range(0, len(urls), size)]
