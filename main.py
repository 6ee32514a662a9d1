#!/usr/bin/env python3
"""
Main entry point for wordharvest.
"""

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from wordharvest import __version__
from wordharvest.crawler.scheduler import CrawlerScheduler
from wordharvest.crawler.scope import Scope, ScopeError, resolve_scope
from wordharvest.storage.frequency_cache import FrequencyCache
from wordharvest.storage.output import OutputError, write_results
from wordharvest.utils.config import Config, ConfigError, load_config, merge_overrides
from wordharvest.utils.logger import setup_logging


def report(message: str):
    """Print a diagnostic before logging is configured."""
    print(message, file=sys.stderr)


def parse_int_option(name: str, value: Optional[str], minimum: int = 0) -> Optional[int]:
    """
    Convert a numeric flag value.

    Invalid values are reported and None is returned so the configured
    default stays in effect.
    """
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        report(f"invalid value {value!r} for {name}, using default")
        return None
    if number < minimum:
        report(f"{name} must be at least {minimum}, got {number}, using default")
        return None
    return number


def split_scope(values: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten repeated, comma-separated --scope values."""
    if values is None:
        return None
    return [entry.strip() for value in values for entry in value.split(',') if entry.strip()]


class WordHarvestApp:
    """Main application class for wordharvest."""

    def __init__(self, config: Config, targets: List[str], debug: bool = False):
        self.config = config
        self.targets = targets
        self.debug = debug
        self.cache = FrequencyCache()
        self.logger = logging.getLogger(__name__)

    def build_scope(self) -> Scope:
        """Resolve the crawl scope; an invalid URL filter falls back to domain scope."""
        crawler_config = self.config.crawler
        try:
            return resolve_scope(self.targets, crawler_config.scope, crawler_config.url_filter)
        except ScopeError as e:
            self.logger.error(f"{e}, falling back to domain scope")
            return resolve_scope(self.targets, crawler_config.scope)

    def run(self) -> int:
        setup_logging(self.config.logging, debug=self.debug)

        scope = self.build_scope()
        self.logger.debug(f"Targets: {self.targets}")
        self.logger.debug(f"Scope: {list(scope.domains) or 'unrestricted'}"
                          + (f", URL filter: {scope.url_filter.pattern}" if scope.url_filter else ""))
        self.logger.debug(f"Depth: {self.config.crawler.depth}")

        scheduler = CrawlerScheduler(self.config, self.cache, scope)
        asyncio.run(scheduler.run(self.targets))

        try:
            write_results(self.cache, self.config.output.path, self.config.output.json)
        except OutputError as e:
            self.logger.critical(str(e))
            return 1

        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordharvest",
        description="Crawl websites and squeeze the words out of them to build wordlists.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wordharvest example.com                            # Crawl two levels deep, print words
  wordharvest example.com -d 0 -o words.txt          # Unlimited depth, write a wordlist
  wordharvest example.com --scope blog.example.com   # Also follow links to a subdomain
  wordharvest example.com -u "(.*\\.)?example\\.com" # Scope by URL pattern instead
  wordharvest example.com --json -o counts.json      # Word counts as JSON
        """
    )

    parser.add_argument(
        'targets',
        nargs='+',
        metavar='target',
        help='Domain or URL to start crawling from; bare domains use https'
    )

    parser.add_argument(
        '-d', '--depth',
        help='Depth to spider. 0 = unlimited, 1 = only the provided sites, '
             '2... = specific depth (default: 2)'
    )

    parser.add_argument(
        '-m', '--min-word-length',
        help='Words must be longer than this (default: 3)'
    )

    parser.add_argument(
        '-n', '--max-word-length',
        help='Words must be shorter than this (default: 24)'
    )

    parser.add_argument(
        '--scope',
        action='append',
        help='Additional comma-separated site scope, for example subdomains. '
             'If not set, only the targets\' domains are in scope. '
             'Using * disables scope checks (careful)'
    )

    parser.add_argument(
        '-u', '--url-filter',
        help='Only crawl URLs matching this regular expression, '
             'e.g. "(.*\\.)?domain\\.com.*". Setting this ignores --scope'
    )

    parser.add_argument(
        '-o', '--output',
        help='Write results to this file instead of standard output'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        default=None,
        help='Write words and their counts as JSON'
    )

    parser.add_argument(
        '--no-filter',
        action='store_true',
        default=None,
        help='Do not check that words look like words (start and end with an '
             'alphanumeric character). Also ignores --min-word-length and --max-word-length'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug output'
    )

    parser.add_argument(
        '-c', '--config',
        help='Optional YAML configuration file; flags override its values'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'wordharvest {__version__}'
    )

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Combine defaults, the optional configuration file and flags."""
    try:
        config = load_config(args.config)
    except ConfigError as e:
        report(f"{e}, using defaults")
        config = Config()

    config = merge_overrides(
        config, 'crawler',
        depth=parse_int_option('--depth', args.depth),
        min_word_length=parse_int_option('--min-word-length', args.min_word_length),
        max_word_length=parse_int_option('--max-word-length', args.max_word_length),
        scope=split_scope(args.scope),
        url_filter=args.url_filter,
        no_filter=args.no_filter
    )
    return merge_overrides(config, 'output', path=args.output, json=args.json)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = build_config(args)

    app = WordHarvestApp(config, args.targets, debug=args.debug)
    try:
        return app.run()
    except KeyboardInterrupt:
        report("\nInterrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
