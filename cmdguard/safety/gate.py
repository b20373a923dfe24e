# cmdguard/safety/gate.py
"""
Pre-execution safety gate.

Classifies a candidate command and, when the command is risky, backs up
the files it references before the caller goes on to run it.
"""
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from cmdguard.context.environment import EnvProfile, detect_environment
from cmdguard.execution.backup import BackupEntry, BackupManager
from cmdguard.safety.classifier import CommandRiskClassifier, command_risk_classifier
from cmdguard.safety.models import CommandAnalysis
from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)


class GateDecision(BaseModel):
    """Outcome of passing one command through the gate."""
    model_config = ConfigDict(frozen=True)

    analysis: CommandAnalysis
    backup: Optional[BackupEntry] = None

    @property
    def backed_up(self) -> bool:
        return self.backup is not None


class SafetyGate:
    """Runs the classifier and, for risky commands, the backup store."""

    def __init__(
        self,
        backup_manager: BackupManager,
        classifier: Optional[CommandRiskClassifier] = None,
        env_provider: Callable[[], EnvProfile] = detect_environment,
        keep_count: Optional[int] = None,
    ):
        """
        Args:
            backup_manager: Store used for snapshots.
            classifier: Defaults to the shared classifier.
            env_provider: Produces the environment snapshot for annotations.
            keep_count: When set, older backups beyond this count are pruned
                after every new backup.
        """
        self.backup_manager = backup_manager
        self.classifier = classifier or command_risk_classifier
        self._env_provider = env_provider
        self._environment: Optional[EnvProfile] = None
        self.keep_count = keep_count

    @property
    def environment(self) -> EnvProfile:
        """The environment snapshot, detected on first use."""
        if self._environment is None:
            self._environment = self._env_provider()
        return self._environment

    def describe_environment(self) -> str:
        return self.environment.summary()

    def classify(self, command: str) -> CommandAnalysis:
        return self.classifier.analyze(command)

    def protect(self, command: str) -> GateDecision:
        """
        Classify a command and snapshot its files if it needs a backup.

        Args:
            command: The command about to be executed.

        Returns:
            The analysis and, if one was made, the backup entry.

        Raises:
            BackupError: If the snapshot could not be taken. The caller
                should not run the command in that case.
        """
        analysis = self.classify(command)
        if not analysis.requires_backup:
            logger.debug(f"No backup needed for '{command}' ({analysis.operation.value})")
            return GateDecision(analysis=analysis)

        entry = self.backup_manager.create_backup(command, analysis.affected_files)

        if self.keep_count is not None:
            self.backup_manager.cleanup_old_backups(self.keep_count)

        return GateDecision(analysis=analysis, backup=entry)
