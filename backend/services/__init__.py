"""Services module - Route review pipeline and collaborators"""

from .block_scanner import BlockScanner, closes_block, closes_single_line, split_lines
from .config_manager import ConfigManager, ReviewConfig
from .diff_generator import DiffGenerator
from .diff_parser import DiffRangeExtractor, parse_hunk_header, to_original_line
from .errors import ApiError, ParseError, ReadError, ReviewError
from .github_client import GitHubClient
from .matcher import find_removed_blocks, match_blocks
from .reconciler import AnnotationReconciler
from .review_runner import ReviewRunner, is_route_file

__all__ = [
    "BlockScanner",
    "closes_block",
    "closes_single_line",
    "split_lines",
    "ConfigManager",
    "ReviewConfig",
    "DiffGenerator",
    "DiffRangeExtractor",
    "parse_hunk_header",
    "to_original_line",
    "ApiError",
    "ParseError",
    "ReadError",
    "ReviewError",
    "GitHubClient",
    "find_removed_blocks",
    "match_blocks",
    "AnnotationReconciler",
    "ReviewRunner",
    "is_route_file",
]
