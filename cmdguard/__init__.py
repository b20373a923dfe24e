# cmdguard/__init__.py
"""
cmdguard: pre-execution safety gate for shell commands proposed by an assistant.
"""

__version__ = '0.1.0'

from cmdguard.safety import (
    Operation, SafetyLevel, CommandAnalysis, SafetyGate, GateDecision,
    classify_command, extract_affected_paths,
)
from cmdguard.execution import BackupManager, BackupEntry, BackupFile
from cmdguard.utils.hashing import calculate_file_hash

__all__ = [
    'Operation',
    'SafetyLevel',
    'CommandAnalysis',
    'SafetyGate',
    'GateDecision',
    'classify_command',
    'extract_affected_paths',
    'BackupManager',
    'BackupEntry',
    'BackupFile',
    'calculate_file_hash',
]
