# cmdguard/safety/extractor.py
"""
Heuristic extraction of file references from a command line.

The command is split on whitespace only. Quotes are not removed, globs are
not expanded and paths containing spaces are not recognized, so a token is
reported only when it literally names an existing regular file.

A file named more than once is reported once, at its first position. The
list feeds the backup store directly, and a repeated path would otherwise
be copied twice into the same backup.
"""
from pathlib import Path
from typing import List

from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)

# Command names that are never treated as file arguments
COMMON_COMMANDS = frozenset({
    "ls", "cd", "pwd", "echo", "cat", "grep", "find", "sed", "awk",
    "rm", "mv", "cp", "mkdir", "touch", "chmod", "chown", "sudo",
    "curl", "wget", "git", "docker", "npm", "yarn", "cargo",
    "python", "node", "bash", "sh", "zsh",
})


def is_common_command(word: str) -> bool:
    """Check whether a token is a known command name rather than a path."""
    return word in COMMON_COMMANDS


def _is_regular_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # e.g. a token longer than the platform allows for a file name
        return False


def extract_affected_paths(command: str) -> List[Path]:
    """
    Find the tokens of a command that name existing regular files.

    Relative tokens are resolved against the current working directory.
    Directories are never reported.

    Args:
        command: The shell command to inspect.

    Returns:
        The matching paths, in the order they appear in the command. Repeats
        of the same token are dropped.
    """
    paths: List[Path] = []

    for word in command.split():
        # Skip flags and common commands
        if word.startswith('-') or is_common_command(word):
            continue

        path = Path(word)
        if _is_regular_file(path) and path not in paths:
            paths.append(path)

    logger.debug(f"Affected files for '{command}': {[str(p) for p in paths]}")
    return paths
