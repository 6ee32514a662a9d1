"""
Crawl scope resolution: which URLs a run is allowed to fetch.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple
from urllib.parse import urlparse


WILDCARD = "*"

logger = logging.getLogger(__name__)


class ScopeError(ValueError):
    """Raised when the scope options cannot be turned into a usable scope."""
    pass


@dataclass(frozen=True)
class Scope:
    """
    Allowed domains or a single URL pattern.

    An empty ``domains`` tuple without a pattern means no domain restriction.
    When ``url_filter`` is set, ``domains`` is always empty.
    """
    domains: Tuple[str, ...] = ()
    url_filter: Optional[Pattern[str]] = None

    @property
    def unrestricted(self) -> bool:
        return self.url_filter is None and not self.domains

    def allows(self, url: str) -> bool:
        """Check whether ``url`` may be fetched under this scope."""
        if self.url_filter is not None:
            return self.url_filter.search(url) is not None

        if not self.domains:
            return True

        try:
            parsed = urlparse(url)
            host = parsed.hostname
            port = parsed.port
        except ValueError:
            return False
        if not host:
            return False

        # Entries keep an explicit port when the user gave one
        hosts = {host, f"{host}:{port}"} if port else {host}
        return any(domain.lower() in hosts for domain in self.domains)


def extract_domain(uri: str) -> str:
    """
    Reduce a URL or bare domain to the bare domain.

    https://example.com/docs/index.html -> example.com
    """
    if "/" not in uri:
        return uri

    no_proto = uri
    if no_proto.startswith("http://"):
        no_proto = no_proto[len("http://"):]
    if no_proto.startswith("https://"):
        no_proto = no_proto[len("https://"):]
    return no_proto.split("/")[0]


def to_uri(domain: str) -> str:
    """Promote a bare domain to an https URL; full URLs are returned as-is."""
    if domain.startswith("http://") or domain.startswith("https://"):
        return domain
    return "https://" + domain


def resolve_scope(targets: Iterable[str], scope: Iterable[str] = (),
                  url_filter: Optional[str] = None) -> Scope:
    """
    Build the effective scope of a run.

    Args:
        targets: Seed targets as given by the user
        scope: Additional scope entries (domains or URLs)
        url_filter: Optional regular expression; when set it replaces domain scope

    Returns:
        Scope with either allowed domains or a compiled URL pattern

    Raises:
        ScopeError: If ``url_filter`` is not a valid regular expression
    """
    if url_filter:
        try:
            pattern = re.compile(url_filter)
        except re.error as e:
            raise ScopeError(f"Invalid URL filter {url_filter!r}: {e}") from e
        logger.debug(f"URL filter active, ignoring domain scope: {url_filter}")
        return Scope(url_filter=pattern)

    domains = []
    for entry in list(scope) + list(targets):
        domain = extract_domain(entry.strip())
        if domain and domain not in domains:
            domains.append(domain)

    if WILDCARD in domains:
        logger.debug("Wildcard scope entry found, domain checks disabled")
        return Scope()

    return Scope(domains=tuple(domains))
