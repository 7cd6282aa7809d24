"""
Base class for provisioning stages.

Each stage receives the shared :class:`ExecutionContext`, performs one step
of the setup and returns a :class:`StageResult`. A stage signals a fatal
problem by raising :class:`ProvisioningError`; non-fatal problems are
recorded as warnings and the stage reports ``degraded``.
"""

import logging
from typing import List, Optional

from ..core.context import ExecutionContext
from ..models.provisioning import StageResult, StageStatus


class BaseStage:
    """Base class for all provisioning stages."""

    name: str = "base"
    description: str = ""

    def __init__(self):
        self.logger = logging.getLogger(type(self).__module__)
        self.warnings: List[str] = []

    def run(self, ctx: ExecutionContext) -> StageResult:
        raise NotImplementedError

    def warn(self, message: str) -> None:
        self.logger.warning(f"Warning: {message}")
        self.warnings.append(message)

    def result(self, message: Optional[str] = None, status: Optional[StageStatus] = None) -> StageResult:
        """Build the stage result, degraded if any warning was recorded."""
        if status is None:
            status = StageStatus.DEGRADED if self.warnings else StageStatus.COMPLETED
        return StageResult(name=self.name, status=status, message=message, warnings=list(self.warnings))

    def execute(self, ctx: ExecutionContext) -> StageResult:
        """Run the stage with a fresh warning list."""
        self.warnings = []
        return self.run(ctx)
