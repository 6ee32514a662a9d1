"""
URL Frontier implementation for managing URLs to crawl.
Owns the visit record and decides which discovered URLs get crawled.
"""

import asyncio
import logging
from typing import Dict, Set, Optional
from dataclasses import dataclass

from .scope import Scope


@dataclass
class URLTask:
    """Represents a URL crawling task."""
    url: str
    depth: int
    parent_url: Optional[str] = None


class URLFrontier:
    """
    Pending URLs plus the record of every URL ever admitted.

    A URL is admitted at most once per run, and only when it is in scope and
    within the depth budget. Seeds have depth 1; ``max_depth`` 0 means no
    depth limit. Redirect targets enter the visit record through ``claim``
    without being queued.
    """

    def __init__(self, scope: Scope, max_depth: int = 0):
        self.scope = scope
        self.max_depth = max_depth
        self.logger = logging.getLogger(__name__)

        self.queue: "asyncio.Queue[URLTask]" = asyncio.Queue()
        self.seen_urls: Set[str] = set()

        self.stats = {
            'admitted': 0,
            'already_seen': 0,
            'out_of_scope': 0,
            'too_deep': 0
        }

    def within_depth(self, depth: int) -> bool:
        return self.max_depth == 0 or depth <= self.max_depth

    def add(self, task: URLTask) -> bool:
        """
        Admit a URL to the frontier.
        Returns True if the URL was queued.
        """
        if task.url in self.seen_urls:
            self.stats['already_seen'] += 1
            return False

        if not self.within_depth(task.depth):
            self.stats['too_deep'] += 1
            return False

        if not self.claim(task.url):
            return False

        self.queue.put_nowait(task)
        self.stats['admitted'] += 1
        return True

    def claim(self, url: str) -> bool:
        """
        Record an in-scope URL as visited without queueing it.
        Returns False if it was seen before or is out of scope.
        """
        if url in self.seen_urls:
            self.stats['already_seen'] += 1
            return False

        if not self.scope.allows(url):
            self.stats['out_of_scope'] += 1
            self.logger.debug(f"Out of scope: {url}")
            return False

        self.seen_urls.add(url)
        return True

    async def get(self) -> URLTask:
        return await self.queue.get()

    def task_done(self):
        self.queue.task_done()

    async def join(self):
        """Wait until every admitted URL has been processed."""
        await self.queue.join()

    def is_empty(self) -> bool:
        return self.queue.empty()

    def get_stats(self) -> Dict[str, int]:
        """Get frontier statistics."""
        stats = self.stats.copy()
        stats['total_queued'] = self.queue.qsize()
        stats['total_seen'] = len(self.seen_urls)
        return stats
