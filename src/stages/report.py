"""
Report stage: allocator setting, run instructions and temp file cleanup.
"""

import shlex

from .base import BaseStage
from ..core.context import ExecutionContext
from ..models.provisioning import StageResult

ALLOC_CONF_VAR = "PYTORCH_CUDA_ALLOC_CONF"


class ReportStage(BaseStage):
    """Prints how to start the application and removes transient files."""

    name = "report"
    description = "Print run instructions and clean up"

    def run(self, ctx: ExecutionContext) -> StageResult:
        report = ctx.settings.report

        self.logger.info(f"Setting {ALLOC_CONF_VAR} for memory optimization...")
        ctx.set_env(ALLOC_CONF_VAR, report.alloc_conf)

        print(self.instructions(ctx))

        self.logger.info("Cleaning up temporary files...")
        for path in ctx.temp_files:
            ctx.runner.remove_file(path)
        ctx.temp_files.clear()

        return self.result("Instructions printed")

    @staticmethod
    def instructions(ctx: ExecutionContext) -> str:
        report = ctx.settings.report
        app_dir = ctx.app_dir or ctx.cwd
        venv_name = ctx.settings.runtime.venv_name
        launch = " ".join(["python", "main.py", *report.launch_args])
        lines = [
            "Installation complete! You can now run ComfyUI.",
            "To start ComfyUI:",
            f"  cd {shlex.quote(str(app_dir))}",
            f"  . ./{venv_name}/bin/activate",
            f"  export {ALLOC_CONF_VAR}={report.alloc_conf}",
            f"  {launch}",
            f"Access the web interface at http://localhost:{report.port}",
        ]
        return "\n".join(lines)
