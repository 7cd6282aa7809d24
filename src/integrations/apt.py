"""
APT integration for package and repository management.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..core.command_runner import CommandRunner, CommandResult
from ..core.errors import CommandFailedError


class AptClient:
    """Thin wrapper over apt-get, dpkg, apt-key and add-apt-repository."""

    def __init__(self, runner: CommandRunner, cwd: Optional[Path] = None):
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.cwd = cwd

    def update(self) -> CommandResult:
        """Refresh the package index."""
        return self.runner.run(["apt-get", "update"], sudo=True, capture=False, cwd=self.cwd)

    def install(self, packages: Sequence[str], no_install_recommends: bool = False) -> CommandResult:
        """Install packages non-interactively."""
        cmd = ["apt-get", "install", "-y", *packages]
        if no_install_recommends:
            cmd.append("--no-install-recommends")
        return self.runner.run(cmd, sudo=True, capture=False, cwd=self.cwd)

    def is_installed(self, package: str) -> bool:
        """Check dpkg status for a package."""
        result = self.runner.run(["dpkg", "-s", package], check=False, read_only=True, cwd=self.cwd)
        return result.ok and "install ok installed" in result.stdout

    def add_repository(self, source_line: str) -> CommandResult:
        return self.runner.run(["add-apt-repository", "-y", source_line], sudo=True, cwd=self.cwd)

    def remove_repository(self, source_line: str) -> CommandResult:
        return self.runner.run(["add-apt-repository", "-y", "-r", source_line], sudo=True, cwd=self.cwd)

    @contextmanager
    def temporary_repository(self, source_line: str) -> Iterator[None]:
        """
        Register a package source for the duration of the block.

        The source is removed and the index refreshed on exit, whether or not
        the block raised. If the block raised, a failing cleanup is logged and
        the original error propagates.
        """
        self.logger.info(f"Adding temporary repository: {source_line}")
        self.add_repository(source_line)
        failed = False
        try:
            self.update()
            yield
        except Exception as e:
            failed = True
            self.logger.error(f"Failed while using temporary repository {source_line}: {e}")
            raise
        finally:
            self.logger.info(f"Removing temporary repository: {source_line}")
            try:
                self.remove_repository(source_line)
                self.update()
            except CommandFailedError as cleanup_error:
                if not failed:
                    raise
                self.logger.error(f"Could not remove temporary repository {source_line}: {cleanup_error}")

    def fetch_key(self, key_url: str) -> CommandResult:
        return self.runner.run(["apt-key", "adv", "--fetch-keys", key_url], sudo=True, cwd=self.cwd)

    def delete_key(self, key_id: str) -> CommandResult:
        """Delete a signing key. A missing key is not an error."""
        result = self.runner.run(["apt-key", "del", key_id], sudo=True, check=False, cwd=self.cwd)
        if not result.ok:
            self.logger.debug(f"apt-key del {key_id} exited {result.returncode}; treating as absent")
        return result

    def remove_files(self, paths: Sequence[Path]) -> List[CommandResult]:
        """Remove root-owned configuration files. Missing files are ignored."""
        results = []
        for path in paths:
            results.append(self.runner.run(["rm", "-f", str(path)], sudo=True, cwd=self.cwd))
        return results

    def move_into_place(self, source: Path, destination: Path) -> CommandResult:
        return self.runner.run(["mv", str(source), str(destination)], sudo=True, cwd=self.cwd)
