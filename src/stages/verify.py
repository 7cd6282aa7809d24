"""
Verification stage: import smoke test. Never fatal.
"""

from .base import BaseStage
from ..core.context import ExecutionContext
from ..integrations.venv import VirtualEnv
from ..models.provisioning import StageResult


class VerifyStage(BaseStage):
    """Imports the key libraries in a throwaway venv interpreter."""

    name = "verify"
    description = "Verify the installation"

    def run(self, ctx: ExecutionContext) -> StageResult:
        modules = ctx.settings.verification.modules
        self.logger.info("Verifying installation...")

        code = "; ".join(f"import {m}" for m in modules) + "; print('Dependencies installed successfully')"
        if ctx.venv_dir is None:
            raise RuntimeError("Verification needs an activated virtual environment")
        venv = VirtualEnv(ctx.runner, ctx.venv_dir, env=ctx.env)
        result = venv.run_python(code)

        if result.ok:
            self.logger.info("ComfyUI dependencies installed successfully.")
            return self.result(f"Imported {', '.join(modules)}")

        self.warn("Some dependencies (e.g., torchaudio) may not be installed, but ComfyUI may still work.")
        detail = (result.stderr or result.stdout).strip()
        if detail:
            self.logger.debug(f"Import check output: {detail}")
        return self.result("Import check failed")
