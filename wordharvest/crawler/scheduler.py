"""
Crawler scheduler that drives the traversal and feeds pages to the word
pipeline.
"""

import asyncio
import logging
import time
from typing import Iterable, List, Optional
from dataclasses import dataclass

from .url_frontier import URLFrontier, URLTask
from .fetcher import WebFetcher, FetchResult
from .parser import extract_links, is_crawlable_url, normalize_url
from .scope import Scope, to_uri
from .tokenizer import iter_text
from .word_filter import WordFilter
from ..storage.frequency_cache import FrequencyCache
from ..utils.config import Config


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    pages_fetched: int = 0
    pages_failed: int = 0
    links_queued: int = 0
    words_accepted: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class CrawlerScheduler:
    """
    Coordinates fetching, word extraction and link following.

    Each fetched page runs through the same steps inside one worker:
    fetch, extract words into the cache, extract links, queue links.
    Failed fetches are logged and dropped; they never stop the run.
    """

    def __init__(self, config: Config, cache: FrequencyCache, scope: Scope,
                 fetcher: Optional[WebFetcher] = None):
        self.config = config
        self.cache = cache
        self.scope = scope
        self.logger = logging.getLogger(__name__)

        crawler_config = config.crawler
        self.word_filter = WordFilter(
            min_length=crawler_config.min_word_length,
            max_length=crawler_config.max_word_length,
            enabled=not crawler_config.no_filter
        )
        self.frontier = URLFrontier(scope, max_depth=crawler_config.depth)

        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or WebFetcher(
            user_agent=crawler_config.user_agent,
            request_timeout=crawler_config.request_timeout,
            max_concurrent_requests=crawler_config.max_concurrent_requests,
            respect_robots_txt=crawler_config.respect_robots_txt
        )

        self.stats = CrawlStats(start_time=time.time())
        self.workers: List[asyncio.Task] = []

    def add_seed_urls(self, targets: Iterable[str]) -> int:
        """Add seed targets at depth 1. Returns the number admitted."""
        added_count = 0
        for target in targets:
            url = normalize_url(to_uri(target))
            if self.frontier.add(URLTask(url=url, depth=1)):
                added_count += 1
            else:
                self.logger.debug(f"Seed not crawled (out of scope or duplicate): {url}")
        return added_count

    async def run(self, targets: Iterable[str]) -> CrawlStats:
        """
        Crawl from the given targets until no pending URLs remain.

        Returns:
            Statistics of the finished run
        """
        self.stats = CrawlStats(start_time=time.time())
        self.add_seed_urls(targets)

        if self.frontier.is_empty():
            self.logger.warning("No seed URL is within the crawl scope")
            return self.stats

        num_workers = self.config.crawler.max_concurrent_requests
        try:
            self.workers = [
                asyncio.create_task(self._worker(f"worker-{i}"))
                for i in range(num_workers)
            ]
            await self.frontier.join()
        finally:
            await self._cleanup_workers()
            if self._owns_fetcher:
                await self.fetcher.close()

        self._log_final_stats()
        return self.stats

    async def _worker(self, worker_id: str):
        """Worker coroutine that processes URLs from the frontier."""
        while True:
            url_task = await self.frontier.get()
            try:
                await self.process_url(url_task)
            except Exception as e:
                self.stats.pages_failed += 1
                self.logger.error(f"{worker_id} failed processing {url_task.url}: {e}",
                                  exc_info=self.logger.isEnabledFor(logging.DEBUG))
            finally:
                self.frontier.task_done()

    async def process_url(self, url_task: URLTask):
        """Fetch one page, harvest its words and queue its links."""
        self.logger.debug(f"Visiting {url_task.url}")

        fetch_result = await self.fetcher.fetch(url_task.url, follow_redirect=self.claim_redirect)
        if fetch_result.error is not None:
            self.stats.pages_failed += 1
            self.logger.debug(f"Something went wrong: {url_task.url}: {fetch_result.error}")
            return

        self.logger.debug(f"Visited {url_task.url}")

        content = fetch_result.content or ""
        self.stats.words_accepted += self.extract_words(content)
        self._queue_new_urls(fetch_result, url_task)

        self.stats.pages_fetched += 1
        self.logger.info(f"Finished {url_task.url}")

    def claim_redirect(self, url: str) -> bool:
        """
        Decide whether a redirect target may be fetched.

        The target must be an in-scope http(s) URL nobody has visited yet;
        it then joins the visit record so it is not fetched again.
        """
        target = normalize_url(url)
        return is_crawlable_url(target) and self.frontier.claim(target)

    def extract_words(self, content: str) -> int:
        """Count the accepted words of a document. Returns how many were counted."""
        accepted = 0
        for segment in iter_text(content):
            words = self.word_filter(segment)
            self.cache.update(words)
            accepted += len(words)
        return accepted

    def _queue_new_urls(self, fetch_result: FetchResult, url_task: URLTask):
        depth = url_task.depth + 1
        if not self.frontier.within_depth(depth):
            return

        base_url = fetch_result.final_url or url_task.url
        added_count = 0
        for link in extract_links(fetch_result.content or "", base_url):
            task = URLTask(url=link, depth=depth, parent_url=url_task.url)
            if self.frontier.add(task):
                added_count += 1

        self.stats.links_queued += added_count
        if added_count:
            self.logger.debug(f"Queued {added_count} new URLs from {url_task.url}")

    async def _cleanup_workers(self):
        """Cancel and cleanup worker tasks."""
        for worker in self.workers:
            if not worker.done():
                worker.cancel()
        await asyncio.gather(*self.workers, return_exceptions=True)
        self.workers.clear()

    def _log_final_stats(self):
        frontier_stats = self.frontier.get_stats()
        self.logger.debug(
            f"Crawl completed: "
            f"Fetched={self.stats.pages_fetched}, "
            f"Failed={self.stats.pages_failed}, "
            f"Queued={self.stats.links_queued}, "
            f"OutOfScope={frontier_stats['out_of_scope']}, "
            f"Words={self.stats.words_accepted}, "
            f"Distinct={len(self.cache)}, "
            f"Time={self.stats.elapsed_time:.2f}s"
        )
        if self._owns_fetcher:
            self.logger.debug(f"Fetcher stats: {self.fetcher.get_stats()}")
