"""Concatenation components: file selection, tree rendering, build step and output."""

from .aggregator import AggregationSummary, Aggregator
from .build import BuildResult, BuildRunner
from .selection import Candidate, ExtensionFilter, extension_of, iter_candidates
from .tree import TreeRenderer
from .writer import OutputWriter

__all__ = [
    "AggregationSummary",
    "Aggregator",
    "BuildResult",
    "BuildRunner",
    "Candidate",
    "ExtensionFilter",
    "OutputWriter",
    "TreeRenderer",
    "extension_of",
    "iter_candidates",
]
