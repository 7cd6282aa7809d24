"""
Git integration for fetching the application source.
"""

import re
import logging
from pathlib import Path
from typing import Optional, Tuple

from ..core.command_runner import CommandRunner, CommandResult


def parse_repository_url(url: str) -> Tuple[Optional[str], Optional[str]]:
    """Parse owner and repo from a GitHub-style URL."""
    patterns = [
        r'github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?/?$',
        r'[/:]([^/:]+)/([^/]+?)(?:\.git)?/?$'
    ]

    for pattern in patterns:
        match = re.search(pattern, url)
        if match:
            return match.group(1), match.group(2)

    return None, None


def directory_for(url: str) -> str:
    """Directory name git clone would pick for a URL."""
    _, repo = parse_repository_url(url)
    if not repo:
        raise ValueError(f"Cannot derive a directory name from repository URL: {url}")
    return repo


class GitClient:
    """Clones repositories with the git command line."""

    def __init__(self, runner: CommandRunner):
        self.logger = logging.getLogger(__name__)
        self.runner = runner

    def clone(self, url: str, destination: Path, branch: Optional[str] = None) -> CommandResult:
        cmd = ["git", "clone"]
        if branch:
            cmd += ["--branch", branch]
        cmd += [url, str(destination)]
        return self.runner.run(cmd, capture=False, cwd=destination.parent)

    def head_commit(self, repo_dir: Path) -> Optional[str]:
        result = self.runner.run(["git", "rev-parse", "HEAD"], check=False, read_only=True, cwd=repo_dir)
        return result.stdout.strip() or None if result.ok else None
