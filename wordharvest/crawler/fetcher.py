"""
Web page fetcher with concurrency limits and optional robots.txt support.
"""

import asyncio
import aiohttp
import logging
import time
from typing import Callable, Optional, Dict
from urllib.parse import urljoin, urlparse
from urllib.robotparser import RobotFileParser
from dataclasses import dataclass
from aiohttp import ClientResponse, ClientSession, ClientTimeout, ClientError


MAX_CONTENT_SIZE = 10 * 1024 * 1024
MAX_REDIRECTS = 10
REDIRECT_STATUSES = frozenset([301, 302, 303, 307, 308])

TEXT_CONTENT_TYPES = (
    'text/html',
    'text/plain',
    'text/xml',
    'application/xml',
    'application/xhtml+xml',
)


@dataclass
class FetchResult:
    """Outcome of fetching one URL; ``error`` is set when the fetch failed."""
    url: str
    status_code: int
    content: Optional[str] = None
    final_url: Optional[str] = None
    error: Optional[str] = None
    fetch_time: float = 0.0
    content_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RobotsChecker:
    """Caches one parsed robots.txt per origin."""

    def __init__(self, user_agent: str, cache_ttl: float = 3600):
        self.user_agent = user_agent
        self.cache_ttl = cache_ttl
        self.parsers: Dict[str, RobotFileParser] = {}
        self.fetched_at: Dict[str, float] = {}
        self.logger = logging.getLogger(__name__)

    async def can_fetch(self, url: str, session: ClientSession) -> bool:
        parsed = urlparse(url)
        origin = f"{parsed.scheme}://{parsed.netloc}"

        expired = time.time() - self.fetched_at.get(origin, 0) >= self.cache_ttl
        if origin not in self.parsers or expired:
            self.parsers[origin] = await self._load(origin, session)
            self.fetched_at[origin] = time.time()

        return self.parsers[origin].can_fetch(self.user_agent, url)

    async def _load(self, origin: str, session: ClientSession) -> RobotFileParser:
        robots_url = f"{origin}/robots.txt"
        parser = RobotFileParser(robots_url)
        lines = []
        try:
            async with session.get(robots_url) as response:
                # Anything but a readable robots.txt allows everything
                if response.status == 200:
                    lines = (await response.text()).splitlines()
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            self.logger.debug(f"Could not fetch {robots_url}: {e}")
        parser.parse(lines)
        return parser


class WebFetcher:
    """
    Fetches pages through one shared ``aiohttp`` session.

    At most ``max_concurrent_requests`` requests are in flight. Network
    problems, HTTP errors, non-text responses and oversized bodies never
    raise; they are reported through ``FetchResult.error``.
    """

    def __init__(self, user_agent: str, request_timeout: int = 30,
                 max_concurrent_requests: int = 10, respect_robots_txt: bool = False):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests

        self.logger = logging.getLogger(__name__)
        self.robots_checker = RobotsChecker(user_agent) if respect_robots_txt else None

        self.session: Optional[ClientSession] = None
        self.semaphore = asyncio.Semaphore(max_concurrent_requests)

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'robots_blocked': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.request_timeout),
                headers={'User-Agent': self.user_agent},
                connector=aiohttp.TCPConnector(
                    limit=self.max_concurrent_requests * 2,
                    limit_per_host=10,
                    ttl_dns_cache=300
                )
            )
            self.logger.debug("WebFetcher session started")

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("WebFetcher session closed")

    async def fetch(self, url: str,
                    follow_redirect: Optional[Callable[[str], bool]] = None) -> FetchResult:
        """
        Fetch a single URL, following redirects.

        Args:
            url: The URL to fetch
            follow_redirect: Asked about every redirect target before it is
                requested; a False answer ends the fetch with an error

        Returns:
            FetchResult with the decoded body, or with ``error`` set
        """
        if self.session is None:
            await self.start()

        started = time.time()
        async with self.semaphore:
            if self.robots_checker and not await self.robots_checker.can_fetch(url, self.session):
                self.stats['robots_blocked'] += 1
                return self._failed(url, "Blocked by robots.txt", started, status_code=403)

            self.stats['total_requests'] += 1
            try:
                return await self._follow(url, follow_redirect, started)
            except asyncio.TimeoutError:
                return self._failed(url, "Request timeout", started)
            except ClientError as e:
                return self._failed(url, f"Client error: {e}", started)
            except ValueError as e:
                # yarl rejects some URLs that urljoin produced
                return self._failed(url, f"Invalid URL: {e}", started)

    async def _follow(self, url: str, follow_redirect: Optional[Callable[[str], bool]],
                      started: float) -> FetchResult:
        current = url
        for _ in range(MAX_REDIRECTS + 1):
            async with self.session.get(current, allow_redirects=False) as response:
                location = response.headers.get('location')
                if response.status not in REDIRECT_STATUSES or not location:
                    return await self._handle_response(url, response, started)
                status = response.status
                target = urljoin(str(response.url), location)

            if follow_redirect is not None and not follow_redirect(target):
                return self._failed(url, f"Redirect not followed: {target}", started,
                                    status_code=status, final_url=target)
            self.logger.debug(f"Redirected {current} -> {target}")
            current = target

        return self._failed(url, "Too many redirects", started, final_url=current)

    async def _handle_response(self, url: str, response: ClientResponse,
                               started: float) -> FetchResult:
        content_type = response.headers.get('content-type', '').lower()
        details = {
            'status_code': response.status,
            'final_url': str(response.url),
            'content_type': content_type,
        }

        if response.status >= 400:
            return self._failed(url, f"HTTP {response.status}", started, **details)

        if not self._is_text_content(content_type):
            return self._failed(url, f"Non-text content type: {content_type}", started, **details)

        content = await self._read_body(response)
        if content is None:
            return self._failed(url, "Content too large", started, **details)

        self.stats['successful_requests'] += 1
        self.stats['total_bytes_downloaded'] += len(content)
        return FetchResult(url=url, content=content, fetch_time=time.time() - started, **details)

    def _failed(self, url: str, error: str, started: float, status_code: int = 0,
                **details) -> FetchResult:
        self.stats['failed_requests'] += 1
        return FetchResult(url=url, status_code=status_code, error=error,
                           fetch_time=time.time() - started, **details)

    @staticmethod
    def _is_text_content(content_type: str) -> bool:
        # A missing content type is parsed like HTML
        return not content_type or any(text_type in content_type for text_type in TEXT_CONTENT_TYPES)

    async def _read_body(self, response: ClientResponse,
                         max_size: int = MAX_CONTENT_SIZE) -> Optional[str]:
        """Read and decode the body, or return None when it exceeds ``max_size``."""
        declared = response.headers.get('content-length', '')
        if declared.isdigit() and int(declared) > max_size:
            return None

        body = bytearray()
        async for chunk in response.content.iter_chunked(8192):
            body.extend(chunk)
            if len(body) > max_size:
                return None

        return self._decode(bytes(body), response.charset)

    @staticmethod
    def _decode(content_bytes: bytes, charset: Optional[str]) -> str:
        for encoding in (charset, 'utf-8', 'cp1252'):
            if not encoding:
                continue
            try:
                return content_bytes.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue
        return content_bytes.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        return self.stats.copy()
