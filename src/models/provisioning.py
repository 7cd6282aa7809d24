"""
Stage and run result models.
"""

from enum import Enum
from typing import Optional, Dict, Any, List
from datetime import datetime
from pydantic import BaseModel, Field


class StageStatus(str, Enum):
    """Status of a provisioning stage."""
    COMPLETED = "completed"
    DEGRADED = "degraded"
    SKIPPED = "skipped"
    FAILED = "failed"


class StageResult(BaseModel):
    """Result of a single stage."""
    name: str = Field(..., description="Stage name")
    status: StageStatus = Field(..., description="Stage status")
    message: Optional[str] = Field(None, description="Summary or error message")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems")
    duration_seconds: Optional[float] = Field(None, description="Stage duration")

    @property
    def succeeded(self) -> bool:
        return self.status != StageStatus.FAILED

    class Config:
        json_schema_extra = {
            "example": {
                "name": "runtime",
                "status": "degraded",
                "warnings": ["torchaudio installation failed. Proceeding with torch and torchvision only."],
                "duration_seconds": 312.4
            }
        }


class ProvisioningResult(BaseModel):
    """Complete result of a provisioning run."""
    run_id: str = Field(..., description="Run identifier")
    success: bool = Field(default=False, description="Overall success status")
    stages: List[StageResult] = Field(default_factory=list)
    commands: List[Dict[str, Any]] = Field(default_factory=list, description="Command transcript")
    error: Optional[str] = Field(None, description="Fatal error message")
    error_kind: Optional[str] = Field(None, description="Category of the fatal error")
    app_dir: Optional[str] = Field(None, description="Cloned application directory")

    # Timing
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    @property
    def warnings(self) -> List[str]:
        return [w for stage in self.stages for w in stage.warnings]

    def complete(self, success: bool) -> None:
        """Mark the run as complete."""
        self.success = success
        self.completed_at = datetime.utcnow()
        if self.started_at:
            self.duration_seconds = (self.completed_at - self.started_at).total_seconds()
