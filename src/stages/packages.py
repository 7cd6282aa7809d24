"""
Package stage: apt baseline, compatibility library and CUDA toolkit.
"""

from .base import BaseStage
from ..core.context import ExecutionContext
from ..core.errors import CommandFailedError
from ..integrations.apt import AptClient
from ..integrations.downloads import Downloader
from ..integrations.nvidia import NvidiaProbe
from ..models.provisioning import StageResult


class PackageStage(BaseStage):
    """Brings OS packages to a known baseline."""

    name = "packages"
    description = "Install OS packages and the CUDA toolkit"

    def run(self, ctx: ExecutionContext) -> StageResult:
        if ctx.host is None:
            raise RuntimeError("Package stage needs a host profile; run the probe first")

        apt = AptClient(ctx.runner)
        cuda = ctx.settings.cuda

        self.logger.info("Cleaning up existing CUDA repositories...")
        self.clean_cuda_sources(ctx, apt)
        apt.update()

        self.logger.info("Installing prerequisites...")
        apt.install(ctx.settings.apt.base_packages)

        self.ensure_compat_package(ctx, apt)

        nvidia = NvidiaProbe(ctx.runner)
        if nvidia.has_toolkit(cuda.release_marker, cuda.nvcc_paths):
            self.logger.info(f"CUDA Toolkit {cuda.version} already installed, skipping")
            toolkit = "present"
        else:
            self.install_cuda_toolkit(ctx, apt)
            toolkit = "installed"

        return self.result(f"CUDA Toolkit {cuda.version} {toolkit}")

    def clean_cuda_sources(self, ctx: ExecutionContext, apt: AptClient) -> None:
        """Drop stale CUDA source lists, the pin file and the signing key."""
        settings = ctx.settings
        stale = sorted(settings.apt.sources_dir.glob("cuda*.list"))
        stale.append(settings.apt.preferences_dir / settings.cuda.pin_name)
        apt.remove_files(stale)
        apt.delete_key(settings.cuda.signing_key_id)

    def ensure_compat_package(self, ctx: ExecutionContext, apt: AptClient) -> None:
        """Install the compatibility library, borrowing an older source if needed."""
        package = ctx.settings.apt.compat_package
        if apt.is_installed(package):
            self.logger.info(f"{package} already installed")
            return

        self.logger.info(f"Installing {package}...")
        try:
            apt.install([package])
        except CommandFailedError:
            source = ctx.settings.apt.compat_fallback_source
            self.logger.info(f"Direct install of {package} failed, retrying from: {source}")
            with apt.temporary_repository(source):
                apt.install([package])

    def install_cuda_toolkit(self, ctx: ExecutionContext, apt: AptClient) -> None:
        cuda = ctx.settings.cuda
        repo = ctx.host.cuda_repo
        repo_url = cuda.repo_url(repo)
        self.logger.info(f"Installing CUDA Toolkit {cuda.version}...")

        pin_file = ctx.cwd / f"cuda-{repo}.pin"
        ctx.runner.make_dirs(ctx.cwd)
        ctx.temp_files.append(pin_file)
        Downloader(ctx.runner).fetch(f"{repo_url}/cuda-{repo}.pin", pin_file)
        apt.move_into_place(pin_file, ctx.settings.apt.preferences_dir / cuda.pin_name)

        apt.fetch_key(f"{repo_url}/{cuda.signing_key_id}.pub")
        apt.add_repository(f"deb {repo_url}/ /")
        apt.update()
        apt.install([cuda.toolkit_package], no_install_recommends=True)
