"""
Tests for file reference extraction.
"""
from pathlib import Path

from cmdguard.safety.extractor import COMMON_COMMANDS, extract_affected_paths, is_common_command


def test_only_existing_regular_files(work_dir):
    (work_dir / "a.txt").write_text("a")
    (work_dir / "subdir").mkdir()

    paths = extract_affected_paths("rm -f a.txt subdir missing.txt")

    assert paths == [Path("a.txt")]


def test_flags_and_command_names_are_skipped(work_dir):
    # Files that happen to share a name with a flag or a command are ignored
    (work_dir / "-v").write_text("flag")
    (work_dir / "cat").write_text("command")
    (work_dir / "data.csv").write_text("1,2")

    assert extract_affected_paths("cat -v data.csv cat") == [Path("data.csv")]


def test_order_follows_command_and_duplicates_collapse(work_dir):
    (work_dir / "one").write_text("1")
    (work_dir / "two").write_text("2")

    assert extract_affected_paths("cp two one two") == [Path("two"), Path("one")]


def test_absolute_paths(tmp_path, work_dir):
    target = tmp_path / "elsewhere.log"
    target.write_text("log")

    assert extract_affected_paths(f"tail {target}") == [target]


def test_quotes_and_globs_are_not_interpreted(work_dir):
    (work_dir / "report.txt").write_text("r")

    assert extract_affected_paths("cat 'report.txt'") == []
    assert extract_affected_paths("rm *.txt") == []


def test_pipeline_is_scanned_as_a_whole(work_dir):
    (work_dir / "input.txt").write_text("x")
    (work_dir / "output.txt").write_text("y")

    paths = extract_affected_paths("grep foo input.txt | tee output.txt")

    assert paths == [Path("input.txt"), Path("output.txt")]


def test_very_long_token_is_not_a_file(work_dir):
    assert extract_affected_paths("cat " + "x" * 5000) == []


def test_common_commands():
    assert is_common_command("sudo")
    assert is_common_command("cargo")
    assert not is_common_command("README.md")
    assert "zsh" in COMMON_COMMANDS
