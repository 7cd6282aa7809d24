"""
Asset stage: model checkpoint download.
"""

from .base import BaseStage
from ..core.context import ExecutionContext
from ..integrations.downloads import Downloader
from ..models.provisioning import StageResult


class AssetStage(BaseStage):
    """Downloads the model checkpoint into the application tree."""

    name = "assets"
    description = "Download the model checkpoint"

    def run(self, ctx: ExecutionContext) -> StageResult:
        assets = ctx.settings.assets
        model_dir = ctx.cwd / assets.model_dir
        target = model_dir / assets.target_filename()

        self.logger.info(f"Downloading {target.name}...")
        ctx.runner.make_dirs(model_dir)
        Downloader(ctx.runner).fetch(assets.model_url, target)

        return self.result(str(target))
