# cmdguard/safety/classifier.py
"""
Command risk classification for cmdguard.

This module maps a shell command to the kind of operation it performs and
an overall safety level, together with the warnings a user should see
before the command runs. Each pipeline stage is classified by its leading
command name; the most dangerous stage decides the operation of the whole
command.
"""
import re
from typing import Callable, Dict, List, Optional, Sequence, Union

from cmdguard.safety.extractor import extract_affected_paths
from cmdguard.safety.models import CommandAnalysis, Operation, SafetyLevel
from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)

# A table value is either a fixed operation or a rule that looks at the stage
StageRule = Callable[[str, Sequence[str]], Operation]


def _in_place_edit(stage: str, tokens: Sequence[str]) -> Operation:
    return Operation.MODIFY if "-i" in stage else Operation.UNKNOWN


def _redirected_echo(stage: str, tokens: Sequence[str]) -> Operation:
    return Operation.WRITE if ">" in stage else Operation.UNKNOWN


def _xargs_target(stage: str, tokens: Sequence[str]) -> Operation:
    arguments = tokens[1:]
    if "rm" in arguments:
        return Operation.DELETE
    if "mv" in arguments:
        return Operation.MOVE
    return Operation.UNKNOWN


OPERATION_TABLE: Dict[str, Union[Operation, StageRule]] = {
    # Deletion
    "rm": Operation.DELETE,
    "rmdir": Operation.DELETE,

    # Moving / renaming
    "mv": Operation.MOVE,
    "rename": Operation.MOVE,

    # Copying and creation
    "cp": Operation.COPY,
    "touch": Operation.CREATE,
    "mkdir": Operation.CREATE,

    # In-place editing
    "sed": _in_place_edit,
    "awk": _in_place_edit,

    # Reading
    "cat": Operation.READ,
    "less": Operation.READ,
    "more": Operation.READ,
    "grep": Operation.READ,
    "find": Operation.READ,
    "ls": Operation.READ,

    # Writing
    "echo": _redirected_echo,
    "tee": Operation.WRITE,

    # Network
    "curl": Operation.NETWORK,
    "wget": Operation.NETWORK,
    "ssh": Operation.NETWORK,
    "scp": Operation.NETWORK,
    "rsync": Operation.NETWORK,

    # System administration
    "sudo": Operation.SYSTEM,
    "systemctl": Operation.SYSTEM,
    "service": Operation.SYSTEM,

    # Interpreters
    "sh": Operation.EXECUTE,
    "bash": Operation.EXECUTE,
    "zsh": Operation.EXECUTE,
    "python": Operation.EXECUTE,
    "node": Operation.EXECUTE,
    "ruby": Operation.EXECUTE,

    # Commands run on behalf of a pipeline
    "xargs": _xargs_target,
}

# `rm -rf /` aimed at the filesystem root itself, not at a path below it.
# Only this exact spelling is matched; `rm -fr /` and extra spaces stay Dangerous.
ROOT_REMOVAL_PATTERN = re.compile(r"rm -rf /(?:\s|\*|$)")

WARNING_CRITICAL = "CRITICAL: This command requires elevated privileges or affects system files!"
WARNING_DANGEROUS = "DANGEROUS: This operation cannot be easily undone!"
WARNING_CAUTION = "CAUTION: This operation will modify files."
WARNING_RECURSIVE_DELETE = "Recursive delete - will remove directories and all contents!"
WARNING_WILDCARD = "Wildcard pattern - multiple files will be affected!"
NOTICE_MOVE = "Files will be moved/renamed."
NOTICE_BACKUP = "Backup will be created automatically before execution."


def classify_stage(stage: str) -> Optional[Operation]:
    """
    Classify a single pipeline stage by its leading command name.

    Args:
        stage: One segment of a command split on '|'.

    Returns:
        The stage's operation, or None for an empty stage.
    """
    tokens = stage.split()
    if not tokens:
        return None

    entry = OPERATION_TABLE.get(tokens[0], Operation.UNKNOWN)
    if isinstance(entry, Operation):
        return entry
    return entry(stage, tokens)


def most_dangerous(operations: Sequence[Operation]) -> Operation:
    """
    Pick the highest-ranked operation; ties keep the earliest one.
    """
    result: Optional[Operation] = None
    for op in operations:
        if result is None or op.danger_rank > result.danger_rank:
            result = op
    return result if result is not None else Operation.UNKNOWN


def _invokes_rm(command: str) -> bool:
    return " rm " in command or command.startswith("rm ")


def _invokes_mv(command: str) -> bool:
    return " mv " in command or command.startswith("mv ")


class CommandRiskClassifier:
    """Classifier for command operations and safety levels."""

    def __init__(self, path_extractor: Optional[Callable[[str], List]] = None):
        self._extract_paths = path_extractor or extract_affected_paths

    def analyze(self, command: str) -> CommandAnalysis:
        """
        Analyze a shell command.

        Args:
            command: The shell command to classify.

        Returns:
            A fresh CommandAnalysis for the command.
        """
        stage_ops = [op for op in (classify_stage(s) for s in command.split("|")) if op is not None]
        operation = most_dangerous(stage_ops)

        affected_files = self._extract_paths(command)
        warnings: List[str] = []

        if "sudo" in command or ROOT_REMOVAL_PATTERN.search(command):
            safety_level = SafetyLevel.CRITICAL
            warnings.append(WARNING_CRITICAL)
        elif operation.is_destructive:
            safety_level = SafetyLevel.DANGEROUS
            warnings.append(WARNING_DANGEROUS)
        elif operation.needs_backup:
            safety_level = SafetyLevel.CAUTION
            warnings.append(WARNING_CAUTION)
        else:
            safety_level = SafetyLevel.SAFE

        if _invokes_rm(command):
            if "-rf" in command or "-r" in command:
                warnings.append(WARNING_RECURSIVE_DELETE)
            if "*" in command or "?" in command:
                warnings.append(WARNING_WILDCARD)

        if _invokes_mv(command) and affected_files:
            warnings.append(NOTICE_MOVE)

        if operation.needs_backup and affected_files:
            warnings.append(NOTICE_BACKUP)

        logger.debug(
            f"Classified '{command}': operation={operation.value}, "
            f"level={safety_level.label}, stages={[op.value for op in stage_ops]}"
        )

        return CommandAnalysis(
            command=command,
            operation=operation,
            affected_files=tuple(affected_files),
            warnings=tuple(warnings),
            safety_level=safety_level,
        )


# Create a global instance of the classifier
command_risk_classifier = CommandRiskClassifier()


def classify_command(command: str) -> CommandAnalysis:
    """
    Classify a command with the default classifier.

    Args:
        command: The shell command to classify.

    Returns:
        The command analysis.
    """
    return command_risk_classifier.analyze(command)
