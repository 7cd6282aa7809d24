"""
Runtime stage: virtual environment and Python dependencies.
"""

from .base import BaseStage
from ..core.context import ExecutionContext
from ..core.errors import RuntimeEnvironmentError
from ..integrations.venv import VirtualEnv
from ..models.provisioning import StageResult


class RuntimeStage(BaseStage):
    """Builds a clean venv inside the application tree and installs into it."""

    name = "runtime"
    description = "Create the virtual environment and install dependencies"

    def run(self, ctx: ExecutionContext) -> StageResult:
        runtime = ctx.settings.runtime
        venv_dir = ctx.cwd / runtime.venv_name

        self.logger.info("Creating and activating virtual environment...")
        ctx.runner.remove_tree(venv_dir)
        venv = VirtualEnv(ctx.runner, venv_dir, env=ctx.env)
        if not venv.create(runtime.python_executable).ok:
            raise RuntimeEnvironmentError("Failed to create virtual environment")
        if not ctx.runner.dry_run and not venv.activate_script.exists():
            raise RuntimeEnvironmentError("Virtual environment activation script not found")
        ctx.activate_venv(venv_dir)

        self.logger.info("Installing Python dependencies...")
        venv.pip_install(["pip"], upgrade=True)
        self.install_torch(venv, ctx)
        venv.pip_install(runtime.extra_packages)
        self.install_requirements(venv, ctx)

        return self.result(f"venv at {venv_dir}")

    def install_torch(self, venv: VirtualEnv, ctx: ExecutionContext) -> None:
        """Install the CUDA torch stack, dropping torchaudio if it will not install."""
        runtime = ctx.settings.runtime
        result = venv.pip_install(runtime.torch_packages, extra_index_url=runtime.torch_index_url, check=False)
        if result.ok:
            return

        dropped = sorted(set(runtime.torch_packages) - set(runtime.torch_fallback_packages))
        self.warn(
            f"{', '.join(dropped) or 'torch stack'} installation failed. "
            f"Proceeding with {' and '.join(runtime.torch_fallback_packages)} only."
        )
        venv.pip_install(runtime.torch_fallback_packages, extra_index_url=runtime.torch_index_url)

    def install_requirements(self, venv: VirtualEnv, ctx: ExecutionContext) -> None:
        """Install the requirements file once, then verify with pip check."""
        requirements = ctx.cwd / ctx.settings.runtime.requirements_file
        venv.pip_install(requirements=requirements)

        check = venv.pip_check()
        if check.ok:
            return

        self.logger.info("pip check reported broken requirements, running one more install pass")
        venv.pip_install(requirements=requirements)
        check = venv.pip_check()
        if check.ok:
            return

        detail = (check.stdout or check.stderr).strip()
        if ctx.settings.runtime.strict_dependency_check:
            raise RuntimeEnvironmentError(f"Dependency resolution failed:\n{detail}")
        self.warn(f"Dependency check still failing: {detail}")
