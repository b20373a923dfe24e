# cmdguard/safety/__init__.py
"""
Command risk analysis for cmdguard.

This package classifies commands, finds the files they reference and
decides whether a backup must be taken before they run.
"""
from .models import Operation, SafetyLevel, CommandAnalysis
from .extractor import extract_affected_paths
from .classifier import CommandRiskClassifier, classify_command, command_risk_classifier
from .gate import SafetyGate, GateDecision

__all__ = [
    'Operation',
    'SafetyLevel',
    'CommandAnalysis',
    'extract_affected_paths',
    'CommandRiskClassifier',
    'classify_command',
    'command_risk_classifier',
    'SafetyGate',
    'GateDecision',
]
