"""Repository index: scanning, caching and preference patterns."""

from codeswitch.index.cache import CacheStore
from codeswitch.index.patterns import Pattern, first_match
from codeswitch.index.scanner import RepoScanner

__all__ = ["CacheStore", "Pattern", "RepoScanner", "first_match"]
