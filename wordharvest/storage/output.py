"""
Wordlist serialization to files or standard output.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .frequency_cache import FrequencyCache


logger = logging.getLogger(__name__)


class OutputError(Exception):
    """Raised when the wordlist cannot be written to its destination."""
    pass


def render_text(cache: FrequencyCache) -> str:
    """One word per line, without counts."""
    return "".join(f"{word}\n" for word in cache.words())


def render_json(cache: FrequencyCache) -> str:
    """JSON object mapping each word to its count."""
    return json.dumps(cache.to_dict(), ensure_ascii=False)


def write_results(cache: FrequencyCache, path: Optional[str] = None,
                  json_output: bool = False, stream: Optional[TextIO] = None):
    """
    Write the collected words.

    Args:
        cache: Words collected during the crawl
        path: Destination file; when empty the words go to ``stream``
        json_output: Write word counts as JSON instead of a plain wordlist
        stream: Fallback stream, defaults to standard output

    Raises:
        OutputError: If the destination file cannot be opened or written
    """
    if json_output:
        content = render_json(cache) + "\n"
    else:
        content = render_text(cache)

    if not path:
        (stream or sys.stdout).write(content)
        return

    try:
        with open(Path(path), 'w', encoding='utf-8') as file:
            file.write(content)
    except OSError as e:
        raise OutputError(f"Cannot write output file {path}: {e}") from e

    logger.debug(f"Wrote {len(cache)} words to {path}")
