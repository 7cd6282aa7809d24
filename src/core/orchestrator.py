"""
Provisioning orchestrator: runs the stages in order and stops at the first failure.
"""

import logging
import time
from typing import Iterable, List, Optional

from .artifact_manager import ArtifactManager
from .context import ExecutionContext
from .errors import ProvisioningError
from ..models.provisioning import ProvisioningResult, StageResult, StageStatus
from ..stages import BaseStage, default_stages


class ProvisioningOrchestrator:
    """Runs provisioning stages sequentially with fail-fast semantics."""

    def __init__(self,
                 ctx: ExecutionContext,
                 stages: Optional[Iterable[BaseStage]] = None,
                 artifact_manager: Optional[ArtifactManager] = None):
        """
        Initialize the orchestrator.

        Args:
            ctx: Execution context shared by every stage
            stages: Stages to run; the standard sequence if omitted
            artifact_manager: Where to record the run, or None to skip recording
        """
        self.logger = logging.getLogger(__name__)
        self.ctx = ctx
        self.stages: List[BaseStage] = list(stages) if stages is not None else default_stages()
        self.artifact_manager = artifact_manager

    def run(self) -> ProvisioningResult:
        """
        Main orchestration method.

        Returns:
            Result of the run; ``exit_code`` is 0 only if no stage failed
        """
        run_id = self.artifact_manager.run_id if self.artifact_manager else time.strftime("%Y%m%d_%H%M%S")
        result = ProvisioningResult(run_id=run_id)
        history_start = len(self.ctx.runner.history)

        self.logger.info(f"Starting provisioning run {run_id} in {self.ctx.cwd}")
        if self.ctx.runner.dry_run:
            self.logger.info("Dry-run mode: mutating commands will only be logged")

        success = True
        for stage in self.stages:
            stage_result = self._run_stage(stage, result)
            result.stages.append(stage_result)
            if not stage_result.succeeded:
                success = False
                self.logger.error(f"Halting provisioning due to failure in stage '{stage.name}'")
                break

        result.app_dir = str(self.ctx.app_dir) if self.ctx.app_dir else None
        result.commands = [c.to_dict() for c in self.ctx.runner.history[history_start:]]
        result.complete(success)

        if success and result.warnings:
            self.logger.info(f"Setup complete with {len(result.warnings)} warning(s).")
        elif success:
            self.logger.info("Setup complete!")

        if self.artifact_manager:
            try:
                summary_path = self.artifact_manager.save_run(result)
                self.logger.info(f"Run summary saved to {summary_path}")
            except OSError as e:
                self.logger.warning(f"Could not save run summary: {e}")

        return result

    def _run_stage(self, stage: BaseStage, result: ProvisioningResult) -> StageResult:
        """Run one stage and turn a fatal error into a failed stage result."""
        self.logger.info(f"Starting stage '{stage.name}': {stage.description}")
        start = time.monotonic()
        try:
            stage_result = stage.execute(self.ctx)
        except ProvisioningError as e:
            self.logger.error(str(e))
            result.error = str(e)
            result.error_kind = e.kind.value
            stage_result = StageResult(name=stage.name, status=StageStatus.FAILED,
                                       message=str(e), warnings=list(stage.warnings))
        except Exception as e:
            self.logger.error(f"Unexpected error in stage '{stage.name}': {e}", exc_info=True)
            result.error = str(e)
            stage_result = StageResult(name=stage.name, status=StageStatus.FAILED,
                                       message=str(e), warnings=list(stage.warnings))

        stage_result.duration_seconds = time.monotonic() - start
        self.logger.info(f"Stage '{stage.name}' finished with {stage_result.status.value}")
        return stage_result
