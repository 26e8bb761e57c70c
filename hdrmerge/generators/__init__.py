"""HDRMerge Generators: bracket CSV generation and batch merging."""

from .csv_generator import BracketCSVGenerator
from .merge_generator import BracketMerger

__all__ = ["BracketCSVGenerator", "BracketMerger"]
