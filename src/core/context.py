"""
Execution context shared by all provisioning stages.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from config.settings import Settings
from .command_runner import CommandRunner
from ..models.host import HostProfile

if TYPE_CHECKING:
    from ..utils.prompt import ConfirmationGate


@dataclass
class ExecutionContext:
    """Working directory, activated environment and host facts for one run.

    Stages never call ``os.chdir`` or rely on an activated shell; they read
    ``cwd`` and ``env`` from here and pass them to the runner.
    """
    settings: Settings
    runner: CommandRunner
    gate: "ConfirmationGate"
    cwd: Path
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    host: Optional[HostProfile] = None
    app_dir: Optional[Path] = None
    venv_dir: Optional[Path] = None
    temp_files: List[Path] = field(default_factory=list)

    @classmethod
    def create(cls, settings: Settings, runner: CommandRunner, gate: "ConfirmationGate") -> "ExecutionContext":
        return cls(settings=settings, runner=runner, gate=gate, cwd=settings.workdir.resolve())

    def enter(self, path: Path) -> None:
        """Make ``path`` the working directory for later stages."""
        self.cwd = path

    def activate_venv(self, venv_dir: Path) -> None:
        """Scope all later commands to the virtual environment."""
        bin_dir = venv_dir / "bin"
        self.venv_dir = venv_dir
        self.env["VIRTUAL_ENV"] = str(venv_dir)
        self.env["PATH"] = os.pathsep.join([str(bin_dir), self.env.get("PATH", "")]).rstrip(os.pathsep)
        self.env.pop("PYTHONHOME", None)

    def set_env(self, name: str, value: str) -> None:
        """Set a variable for this process and its children only."""
        os.environ[name] = value
        self.env[name] = value
