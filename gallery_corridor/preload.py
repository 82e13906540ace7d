"""Concurrent asset preloading with a bounded wait."""
from __future__ import annotations

import asyncio
import logging
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, Optional, Set
from urllib.parse import urlparse

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[object]]


@dataclass
class PreloadReport:
    """Outcome of a preload pass; ``pending`` refs were still loading at the deadline."""

    loaded: Set[str] = field(default_factory=set)
    failed: Set[str] = field(default_factory=set)
    pending: Set[str] = field(default_factory=set)

    @property
    def timed_out(self) -> bool:
        return bool(self.pending)

    @property
    def complete(self) -> bool:
        return not self.pending


def _read_reference(ref: str, asset_root: Optional[Path], timeout: float) -> bytes:
    parsed = urlparse(ref)
    if parsed.scheme in ("http", "https"):
        with urllib.request.urlopen(ref, timeout=timeout) as response:
            return response.read()
    path = Path(ref.lstrip("/"))
    if asset_root is not None:
        path = asset_root / path
    return path.read_bytes()


def default_fetcher(asset_root: Optional[Path] = None, timeout: float = 10.0) -> Fetcher:
    """Fetch URLs over HTTP and everything else from ``asset_root`` on disk."""

    async def fetch(ref: str) -> bytes:
        return await asyncio.to_thread(_read_reference, ref, asset_root, timeout)

    return fetch


async def _settle(ref: str, fetch: Fetcher) -> bool:
    try:
        await fetch(ref)
    except Exception as exc:  # noqa: BLE001
        LOGGER.warning("Asset %s failed to load: %s", ref, exc)
        return False
    return True


async def preload_assets(refs: Iterable[str], fetch: Fetcher, timeout_s: float) -> PreloadReport:
    """Fetch every reference concurrently, giving up on stragglers after ``timeout_s``."""

    unique = list(dict.fromkeys(refs))
    report = PreloadReport()
    if not unique:
        return report
    tasks: Dict[asyncio.Task, str] = {asyncio.ensure_future(_settle(ref, fetch)): ref for ref in unique}
    done, pending = await asyncio.wait(tasks.keys(), timeout=timeout_s)
    for task in done:
        ref = tasks[task]
        if task.result():
            report.loaded.add(ref)
        else:
            report.failed.add(ref)
    for task in pending:
        task.cancel()
        report.pending.add(tasks[task])
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        LOGGER.info("Preload deadline reached with %d of %d assets outstanding", len(pending), len(unique))
    else:
        LOGGER.info("Preloaded %d assets (%d failed)", len(report.loaded), len(report.failed))
    return report


def run_preload(
    refs: Iterable[str],
    fetch: Fetcher,
    timeout_s: float,
    on_report: Optional[Callable[[PreloadReport], None]] = None,
) -> PreloadReport:
    """Run a preload pass on a fresh event loop.

    ``on_report`` fires as soon as the pass settles, before the loop waits for
    abandoned fetch threads to finish.
    """

    async def _run() -> PreloadReport:
        report = await preload_assets(refs, fetch, timeout_s)
        if on_report is not None:
            on_report(report)
        return report

    return asyncio.run(_run())
