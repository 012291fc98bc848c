"""
git-dep-keeper - Keep a workspace of dependency repositories in sync with a manifest
"""

from .__version__ import __version__
from .core import DepKeeper
from .cli.main import main

__all__ = ["DepKeeper", "main", "__version__"]
