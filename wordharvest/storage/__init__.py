"""
Word storage and output for wordharvest.
"""

from .frequency_cache import FrequencyCache
from .output import OutputError, write_results

__all__ = ['FrequencyCache', 'OutputError', 'write_results']
