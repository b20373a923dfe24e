"""
Utility functions for cmdguard.

This package provides logging setup and the content digest helper used by
the backup store.
"""

from .logging import setup_logging, get_logger
from .hashing import calculate_file_hash

__all__ = ['setup_logging', 'get_logger', 'calculate_file_hash']
