"""
Link discovery in fetched HTML documents.
"""

import logging
from typing import List, Union
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup


CRAWLABLE_SCHEMES = ('http', 'https')

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Normalize URL by lower-casing the host and removing the fragment."""
    try:
        parsed = urlparse(url)
        return urlunparse((
            parsed.scheme,
            parsed.netloc.lower(),
            parsed.path,
            parsed.params,
            parsed.query,
            ''  # Remove fragment
        ))
    except ValueError:
        return url


def is_crawlable_url(url: str) -> bool:
    """Check that URL is an absolute http(s) URL."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in CRAWLABLE_SCHEMES and bool(parsed.netloc)


def extract_links(html: Union[str, bytes], base_url: str) -> List[str]:
    """
    Extract absolute links from every ``a[href]`` of a document.

    Relative references are resolved against ``<base href>`` when the
    document declares one, otherwise against ``base_url``.

    Args:
        html: Raw HTML content
        base_url: URL the document was fetched from

    Returns:
        Normalized http(s) links in document order, without duplicates
    """
    try:
        soup = BeautifulSoup(html, 'lxml')
    except ParserRejectedMarkup as e:
        logger.debug(f"Unparseable document at {base_url}: {e}")
        return []

    base_tag = soup.find('base', href=True)
    if base_tag and base_tag['href'].strip():
        base_url = urljoin(base_url, base_tag['href'].strip())

    links = []
    seen = set()
    for anchor in soup.find_all('a', href=True):
        href = anchor['href'].strip()
        if not href or href.startswith('#'):
            continue

        try:
            absolute_url = urljoin(base_url, href)
        except ValueError:
            continue

        normalized = normalize_url(absolute_url)
        if normalized in seen or not is_crawlable_url(normalized):
            continue

        seen.add(normalized)
        links.append(normalized)

    return links
