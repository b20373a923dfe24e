# cmdguard/safety/models.py
"""
Data models for command risk analysis.
"""
from enum import Enum, IntEnum
from pathlib import Path
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """Category of effect a command stage has on the system."""
    READ = "Read"
    WRITE = "Write"
    MODIFY = "Modify"
    DELETE = "Delete"
    MOVE = "Move"
    COPY = "Copy"
    CREATE = "Create"
    EXECUTE = "Execute"
    NETWORK = "Network"
    SYSTEM = "System"
    UNKNOWN = "Unknown"

    @property
    def danger_rank(self) -> int:
        """Rank used to pick the most dangerous stage of a pipeline."""
        return DANGER_RANKS[self]

    @property
    def is_destructive(self) -> bool:
        return self in DESTRUCTIVE_OPERATIONS

    @property
    def needs_backup(self) -> bool:
        return self in BACKUP_OPERATIONS


# Higher is more dangerous
DANGER_RANKS: Dict[Operation, int] = {
    Operation.DELETE: 5,
    Operation.SYSTEM: 4,
    Operation.MODIFY: 3,
    Operation.MOVE: 2,
    Operation.WRITE: 2,
    Operation.EXECUTE: 1,
    Operation.NETWORK: 1,
    Operation.COPY: 1,
    Operation.CREATE: 1,
    Operation.READ: 0,
    Operation.UNKNOWN: 0,
}

DESTRUCTIVE_OPERATIONS = frozenset({Operation.DELETE, Operation.MODIFY})
BACKUP_OPERATIONS = frozenset({
    Operation.DELETE,
    Operation.MODIFY,
    Operation.MOVE,
    Operation.WRITE,
})


class SafetyLevel(IntEnum):
    """Overall risk tier of a full command, ordered from least to most risky."""
    SAFE = 0
    CAUTION = 1
    DANGEROUS = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class CommandAnalysis(BaseModel):
    """Immutable result of classifying one command."""
    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="The command text as given")
    operation: Operation = Field(Operation.UNKNOWN, description="Most dangerous operation across pipeline stages")
    affected_files: Tuple[Path, ...] = Field(default=(), description="Existing files the command references")
    warnings: Tuple[str, ...] = Field(default=(), description="Human-readable warnings, in emission order")
    safety_level: SafetyLevel = Field(SafetyLevel.SAFE, description="Resolved safety level")

    @property
    def requires_backup(self) -> bool:
        """True when the operation calls for a snapshot and there is something to snapshot."""
        return self.operation.needs_backup and bool(self.affected_files)
