"""
File downloads via wget.
"""

import logging
from pathlib import Path

from ..core.command_runner import CommandRunner, CommandResult


class Downloader:
    """Fetches URLs to local files. No retries and no checksum."""

    def __init__(self, runner: CommandRunner):
        self.logger = logging.getLogger(__name__)
        self.runner = runner

    def fetch(self, url: str, destination: Path) -> CommandResult:
        """Download ``url`` to ``destination``, overwriting it."""
        self.logger.info(f"Downloading {url} -> {destination}")
        return self.runner.run(["wget", "-O", str(destination), url], capture=False, cwd=destination.parent)
