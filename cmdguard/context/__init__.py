# cmdguard/context/__init__.py
"""Environment information used for annotations."""
from .environment import EnvProfile, OSKind, ShellKind, PackageManager, detect_environment

__all__ = ['EnvProfile', 'OSKind', 'ShellKind', 'PackageManager', 'detect_environment']
