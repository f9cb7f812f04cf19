"""Interfaces for the Contract Timeline Analyzer components."""

from .completion import ICompletionClient
from .extractor import ITextExtractor
from .storage import IKeyValueStorage

__all__ = [
    "ICompletionClient",
    "ITextExtractor",
    "IKeyValueStorage",
]
