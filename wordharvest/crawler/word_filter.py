"""
Word candidate normalization and validation.
"""

import re
import string
from dataclasses import dataclass
from typing import List


# Starts and ends with an ASCII letter or digit, anything in between
VALID_WORD_PATTERN = re.compile(r'[a-zA-Z0-9](?:.*[a-zA-Z0-9])?')
STRIPPED_SYMBOLS = string.punctuation


def strip_symbols(candidate: str) -> str:
    """Remove punctuation from both ends of a candidate."""
    return candidate.strip(STRIPPED_SYMBOLS)


def is_valid_word(candidate: str, stripped: str, min_length: int, max_length: int) -> bool:
    """
    Check a candidate against the word rules.

    The shape is checked on the stripped form. Length bounds are exclusive
    and, like printability, are checked on the original candidate.
    """
    if not VALID_WORD_PATTERN.fullmatch(stripped):
        return False
    if not min_length < len(candidate) < max_length:
        return False
    return candidate.isprintable()


def filter_words(segment: str, min_length: int = 3, max_length: int = 24,
                 enabled: bool = True) -> List[str]:
    """
    Split a text segment into accepted words.

    Args:
        segment: Text segment from a document
        min_length: Words must be longer than this
        max_length: Words must be shorter than this
        enabled: When False every stripped candidate is accepted

    Returns:
        Accepted words in segment order
    """
    accepted = []
    for candidate in segment.split(" "):
        stripped = strip_symbols(candidate)
        if not enabled or is_valid_word(candidate, stripped, min_length, max_length):
            accepted.append(stripped)
    return accepted


@dataclass(frozen=True)
class WordFilter:
    """Word filter settings for one crawl."""
    min_length: int = 3
    max_length: int = 24
    enabled: bool = True

    def __call__(self, segment: str) -> List[str]:
        return filter_words(segment, self.min_length, self.max_length, self.enabled)
