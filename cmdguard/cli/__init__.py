# cmdguard/cli/__init__.py
"""Command-line interface for cmdguard."""
from .main import app

__all__ = ['app']
