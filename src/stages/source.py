"""
Source stage: fresh clone of the application.
"""

from .base import BaseStage
from ..core.context import ExecutionContext
from ..integrations.git import GitClient, directory_for
from ..models.provisioning import StageResult


class SourceStage(BaseStage):
    """Deletes any previous checkout and clones the application again."""

    name = "source"
    description = "Clone the application repository"

    def run(self, ctx: ExecutionContext) -> StageResult:
        source = ctx.settings.source
        app_dir = ctx.cwd / (source.directory_name or directory_for(source.repository_url))

        self.logger.info(f"Cloning {source.repository_url} into {app_dir}...")
        ctx.runner.make_dirs(ctx.cwd)
        ctx.runner.remove_tree(app_dir)

        git = GitClient(ctx.runner)
        git.clone(source.repository_url, app_dir, branch=source.branch)

        ctx.app_dir = app_dir
        ctx.enter(app_dir)

        commit = None if ctx.runner.dry_run else git.head_commit(app_dir)
        return self.result(f"{app_dir} at {commit}" if commit else str(app_dir))
