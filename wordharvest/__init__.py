"""
wordharvest

A focused web crawler that builds wordlists from the visible text of web pages.
"""

__version__ = "1.0.0"
__description__ = "Crawl websites within a scope and harvest their words into a wordlist"
