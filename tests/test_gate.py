"""
Tests for the safety gate.
"""
import pytest

from cmdguard.context.environment import EnvProfile, OSKind, ShellKind
from cmdguard.execution.backup import BackupIOError
from cmdguard.safety.gate import SafetyGate
from cmdguard.safety.models import Operation, SafetyLevel


def fixed_environment():
    return EnvProfile(os=OSKind.LINUX, shell=ShellKind.ZSH)


@pytest.fixture
def gate(backup_manager):
    return SafetyGate(backup_manager, env_provider=fixed_environment)


def test_risky_command_is_backed_up(gate, backup_manager, sample_file):
    decision = gate.protect("rm notes.txt")

    assert decision.analysis.operation == Operation.DELETE
    assert decision.analysis.safety_level == SafetyLevel.DANGEROUS
    assert decision.backed_up
    assert decision.backup.command == "rm notes.txt"
    assert [f.original_path for f in decision.backup.files] == [sample_file]
    assert [e.id for e in backup_manager.list_backups()] == [decision.backup.id]


def test_damage_can_be_undone(gate, backup_manager, sample_file):
    decision = gate.protect("sed -i s/Original/Changed/ notes.txt")
    assert decision.analysis.operation == Operation.MODIFY

    sample_file.write_text("Changed content\n")
    backup_manager.restore_backup(decision.backup.id)

    assert sample_file.read_text() == "Original content\n"


def test_read_only_command_is_not_backed_up(gate, backup_manager, sample_file):
    decision = gate.protect("cat notes.txt")

    assert decision.analysis.safety_level == SafetyLevel.SAFE
    assert not decision.backed_up
    assert backup_manager.list_backups() == []


def test_risky_command_without_files_is_not_backed_up(gate, backup_manager, work_dir):
    decision = gate.protect("rm -rf build")

    assert decision.analysis.safety_level == SafetyLevel.DANGEROUS
    assert decision.backup is None
    assert backup_manager.list_backups() == []


def test_copy_is_not_backed_up(gate, backup_manager, sample_file):
    assert not gate.protect("cp notes.txt copy.txt").backed_up


def test_keep_count_prunes_after_backup(backup_manager, sample_file):
    gate = SafetyGate(backup_manager, env_provider=fixed_environment, keep_count=2)

    ids = [gate.protect("rm notes.txt").backup.id for _ in range(4)]

    assert [e.id for e in backup_manager.list_backups()] == [ids[3], ids[2]]


def test_backup_failure_propagates(gate, backup_manager, sample_file, monkeypatch):
    def broken(command, paths):
        raise BackupIOError("disk full")

    monkeypatch.setattr(backup_manager, "create_backup", broken)

    with pytest.raises(BackupIOError):
        gate.protect("rm notes.txt")


def test_classify_does_not_touch_the_store(gate, backup_manager, sample_file):
    analysis = gate.classify("rm notes.txt")

    assert analysis.requires_backup
    assert backup_manager.list_backups() == []


def test_environment_is_detected_once(backup_manager):
    calls = []

    def provider():
        calls.append(1)
        return fixed_environment()

    gate = SafetyGate(backup_manager, env_provider=provider)
    gate.classify("ls")
    assert calls == []

    assert gate.describe_environment() == "OS: linux, Shell: zsh, Package manager: unknown"
    assert gate.environment.os == OSKind.LINUX
    assert calls == [1]
