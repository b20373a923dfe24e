"""
Tests for analysis rendering.
"""
import re

from rich.console import Console

from cmdguard.context.environment import EnvProfile, OSKind, ShellKind
from cmdguard.safety.classifier import classify_command
from cmdguard.safety.preview import format_analysis, preview_command_impact


def render(renderable) -> str:
    console = Console(width=120, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_preview_shows_analysis(sample_file):
    console = Console(width=120, record=True, color_system=None)

    analysis = preview_command_impact("rm notes.txt", console=console)
    text = console.export_text()

    assert analysis.requires_backup
    assert "Command Analysis" in text
    assert "Delete" in text
    assert "Dangerous" in text
    assert re.search(r"✓\s+notes\.txt", text)
    assert "Backup will be created" in text


def test_environment_line():
    text = render(format_analysis(
        classify_command("ls"), EnvProfile(os=OSKind.MACOS, shell=ShellKind.ZSH)
    ))

    assert "OS: macos, Shell: zsh" in text
    assert "Safe" in text
