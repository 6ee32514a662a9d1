"""
Word frequency cache shared by all pages of a crawl.
"""

import threading
from collections import Counter
from typing import Dict, Iterable, List


class FrequencyCache:
    """
    Thread-safe mapping from word to occurrence count.

    Words are compared exactly (case-sensitive). Entries are never evicted.
    """

    def __init__(self):
        self._counts: Counter = Counter()
        self._lock = threading.Lock()

    def increment(self, word: str) -> int:
        """Count one occurrence of ``word`` and return its new count."""
        with self._lock:
            self._counts[word] += 1
            return self._counts[word]

    def update(self, words: Iterable[str]):
        """Count one occurrence of each word."""
        words = list(words)
        with self._lock:
            self._counts.update(words)

    def count(self, word: str) -> int:
        with self._lock:
            return self._counts.get(word, 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __contains__(self, word: str) -> bool:
        with self._lock:
            return word in self._counts

    def words(self) -> List[str]:
        """Distinct words, in no particular order."""
        with self._lock:
            return list(self._counts)

    def to_dict(self) -> Dict[str, int]:
        """Snapshot of the word counts."""
        with self._lock:
            return dict(self._counts)
