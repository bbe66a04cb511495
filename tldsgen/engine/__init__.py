"""Engine components: fetch → extract → normalise → merge."""

from .extract import ACE_PREFIX, Extractor, normalize
from .fetcher import Fetcher
from .merger import MergeSnapshot, Merger
from .source_task import SourceFetcher

__all__ = [
    "ACE_PREFIX",
    "Extractor",
    "Fetcher",
    "MergeSnapshot",
    "Merger",
    "SourceFetcher",
    "normalize",
]
