"""
ctxfile - snapshot a project into a single context file.

This package walks a directory tree, selects files with include/exclude glob
patterns, and writes one document holding a tree of the selected files
followed by their concatenated contents, for sharing with a reviewer or a
large language model.
"""

__version__ = "0.1.0"

from .core import ScanConfig, generate
from .matcher import is_included, split_patterns

__all__ = ["ScanConfig", "generate", "is_included", "split_patterns"]
