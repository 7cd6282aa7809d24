"""
Virtual environment and pip integration.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from ..core.command_runner import CommandRunner, CommandResult


class VirtualEnv:
    """A venv directory and the pip inside it."""

    def __init__(self, runner: CommandRunner, path: Path, env: Optional[Dict[str, str]] = None):
        """
        Initialize a virtual environment handle.

        Args:
            runner: Command runner
            path: venv directory
            env: Environment for commands run with the venv interpreter
        """
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.path = path
        self.env = env

    @property
    def python(self) -> Path:
        return self.path / "bin" / "python"

    @property
    def activate_script(self) -> Path:
        return self.path / "bin" / "activate"

    def create(self, base_python: str = "python3") -> CommandResult:
        """Create the venv with the system interpreter."""
        return self.runner.run([base_python, "-m", "venv", str(self.path)],
                               check=False, cwd=self.path.parent)

    def pip_install(self,
                    packages: Sequence[str] = (),
                    *,
                    upgrade: bool = False,
                    requirements: Optional[Path] = None,
                    extra_index_url: Optional[str] = None,
                    check: bool = True) -> CommandResult:
        """Run pip install inside the venv."""
        cmd = [str(self.python), "-m", "pip", "install"]
        if upgrade:
            cmd.append("--upgrade")
        cmd += list(packages)
        if requirements is not None:
            cmd += ["-r", str(requirements)]
        if extra_index_url:
            cmd += ["--extra-index-url", extra_index_url]
        return self.runner.run(cmd, check=check, capture=False, cwd=self.path.parent, env=self.env)

    def pip_check(self) -> CommandResult:
        """Verify installed packages have compatible dependencies."""
        return self.runner.run([str(self.python), "-m", "pip", "check"],
                               check=False, cwd=self.path.parent, env=self.env)

    def run_python(self, code: str) -> CommandResult:
        """Run a snippet in a throwaway interpreter."""
        return self.runner.run([str(self.python), "-c", code],
                               check=False, cwd=self.path.parent, env=self.env)
