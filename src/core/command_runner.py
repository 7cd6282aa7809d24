"""
Command runner for executing external tools on the host.
"""

import logging
import os
import shlex
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import CommandFailedError


@dataclass
class CommandResult:
    """Outcome of one external command."""
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    skipped: bool = False
    cwd: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def display(self) -> str:
        return shlex.join(self.argv)

    def to_dict(self) -> Dict[str, object]:
        return {
            "command": self.display,
            "returncode": self.returncode,
            "duration_seconds": round(self.duration_seconds, 3),
            "skipped": self.skipped,
            "cwd": self.cwd,
        }


class CommandRunner:
    """Runs host commands synchronously and keeps a transcript of every call."""

    def __init__(self, dry_run: bool = False, use_sudo: bool = True):
        """
        Initialize command runner.

        Args:
            dry_run: Log mutating commands instead of executing them
            use_sudo: Prefix privileged commands with sudo when not running as root
        """
        self.logger = logging.getLogger(__name__)
        self.dry_run = dry_run
        self.use_sudo = use_sudo
        self.history: List[CommandResult] = []

    @property
    def needs_sudo(self) -> bool:
        return self.use_sudo and os.geteuid() != 0

    def which(self, name: str) -> Optional[str]:
        """Locate an executable on PATH."""
        return shutil.which(name)

    def run(self,
            argv: Sequence[str],
            *,
            check: bool = True,
            sudo: bool = False,
            capture: bool = True,
            read_only: bool = False,
            cwd: Optional[Path] = None,
            env: Optional[Mapping[str, str]] = None) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            argv: Command and arguments
            check: Raise CommandFailedError on a non-zero exit
            sudo: Command needs root privileges
            capture: Capture output instead of streaming it to the console
            read_only: Command only inspects the host and runs even in dry-run mode
            cwd: Working directory
            env: Full environment for the child process

        Returns:
            Command result
        """
        cmd = [str(a) for a in argv]
        if sudo and self.needs_sudo:
            cmd = ["sudo"] + cmd

        display = shlex.join(cmd)
        if self.dry_run and not read_only:
            self.logger.info(f"[dry-run] {display}")
            result = CommandResult(argv=cmd, returncode=0, skipped=True,
                                   cwd=str(cwd) if cwd else None)
            self.history.append(result)
            return result

        self.logger.info(f"Running: {display}")
        start = time.monotonic()
        returncode, stdout, stderr = self._execute(cmd, cwd=cwd, env=env, capture=capture)
        result = CommandResult(
            argv=cmd,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=time.monotonic() - start,
            cwd=str(cwd) if cwd else None
        )
        self.history.append(result)

        if stdout:
            self.logger.debug(f"stdout: {stdout.strip()}")
        if stderr:
            self.logger.debug(f"stderr: {stderr.strip()}")

        if check and not result.ok:
            raise CommandFailedError(result)
        return result

    def _execute(self,
                 cmd: List[str],
                 cwd: Optional[Path],
                 env: Optional[Mapping[str, str]],
                 capture: bool) -> Tuple[int, str, str]:
        """Spawn the process. Returns (returncode, stdout, stderr)."""
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                capture_output=capture,
                text=True
            )
        except FileNotFoundError:
            return 127, "", f"{cmd[0]}: command not found"
        except PermissionError as e:
            return 126, "", str(e)
        return completed.returncode, completed.stdout or "", completed.stderr or ""

    def remove_tree(self, path: Path) -> None:
        """Delete a directory tree if it exists."""
        if not path.exists():
            return
        if self.dry_run:
            self.logger.info(f"[dry-run] rm -rf {path}")
            return
        self.logger.info(f"Removing {path}")
        shutil.rmtree(path)

    def remove_file(self, path: Path) -> None:
        """Delete a file, treating absence as success."""
        if self.dry_run:
            if path.exists():
                self.logger.info(f"[dry-run] rm -f {path}")
            return
        path.unlink(missing_ok=True)

    def make_dirs(self, path: Path) -> None:
        if self.dry_run:
            if not path.exists():
                self.logger.info(f"[dry-run] mkdir -p {path}")
            return
        path.mkdir(parents=True, exist_ok=True)
