"""
Web crawler core components.
"""

from .scope import Scope, ScopeError, extract_domain, to_uri, resolve_scope
from .tokenizer import iter_text
from .word_filter import WordFilter, filter_words
from .url_frontier import URLFrontier, URLTask
from .fetcher import WebFetcher, FetchResult
from .parser import extract_links
from .scheduler import CrawlerScheduler, CrawlStats

__all__ = [
    'Scope', 'ScopeError', 'extract_domain', 'to_uri', 'resolve_scope',
    'iter_text', 'WordFilter', 'filter_words',
    'URLFrontier', 'URLTask',
    'WebFetcher', 'FetchResult',
    'extract_links',
    'CrawlerScheduler', 'CrawlStats'
]
