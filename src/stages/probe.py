"""
Environment probe: GPU, memory and OS release checks.
"""

import platform
from typing import Optional, Tuple

import psutil

from .base import BaseStage
from ..core.context import ExecutionContext
from ..core.errors import MissingHardwareError, UnsupportedPlatformError
from ..integrations.nvidia import NvidiaProbe
from ..models.host import HostProfile, OsCodename
from ..models.provisioning import StageResult

MB = 1024 * 1024


class ProbeStage(BaseStage):
    """Reads the host profile and gates the run on it."""

    name = "probe"
    description = "Check GPU, memory and OS release"

    def run(self, ctx: ExecutionContext) -> StageResult:
        requirements = ctx.settings.requirements
        nvidia = NvidiaProbe(ctx.runner)

        # GPU
        if not nvidia.driver_available():
            raise MissingHardwareError(
                "NVIDIA GPU not detected or nvidia-smi not installed. ComfyUI requires CUDA support."
            )
        gpu = nvidia.query_gpu(0)
        if gpu is None:
            raise MissingHardwareError("nvidia-smi did not report a GPU. ComfyUI requires CUDA support.")
        self.logger.info(f"Detected GPU: {gpu.name} ({gpu.memory_total_mb}MB)")

        if gpu.memory_total_mb < requirements.min_vram_mb:
            self.warn(
                f"GPU VRAM is {gpu.memory_total_mb}MB. ComfyUI recommends "
                f"~{requirements.min_vram_mb // 1000}GB for basic models."
            )
            ctx.gate.confirm_or_abort("low GPU VRAM")

        # Memory
        ram_mb, swap_mb = self.read_memory()
        total = ram_mb + swap_mb
        if total < requirements.min_memory_mb:
            self.warn(
                f"Total memory (RAM + swap) is {total}MB, but "
                f"~{requirements.min_memory_mb // 1000}GB is recommended. Consider increasing swap or adding RAM."
            )
            ctx.gate.confirm_or_abort("low system memory")

        # OS release
        raw_codename = self.read_codename(ctx)
        codename = OsCodename.parse(raw_codename or "")
        if codename is None:
            raise UnsupportedPlatformError(
                f"Unsupported Ubuntu version: {raw_codename or 'unknown'}. "
                "Supported: focal (20.04), jammy (22.04), noble (24.04)."
            )

        ctx.host = HostProfile(
            gpu_present=True,
            gpu_name=gpu.name,
            vram_mb=gpu.memory_total_mb,
            ram_mb=ram_mb,
            swap_mb=swap_mb,
            os_codename=codename
        )
        self.logger.info(
            f"Detected Ubuntu version: {codename.value} (using CUDA repo: {codename.cuda_repo})"
        )
        return self.result(f"{gpu.name}, {gpu.memory_total_mb}MB VRAM, {total}MB memory, {codename.value}")

    @staticmethod
    def read_memory() -> Tuple[int, int]:
        """Return (RAM, swap) in MB."""
        return psutil.virtual_memory().total // MB, psutil.swap_memory().total // MB

    def read_codename(self, ctx: ExecutionContext) -> Optional[str]:
        """Ubuntu codename from lsb_release, or /etc/os-release if it is missing."""
        result = ctx.runner.run(["lsb_release", "-cs"], check=False, read_only=True)
        if result.ok and result.stdout.strip():
            return result.stdout.strip()

        try:
            return platform.freedesktop_os_release().get("VERSION_CODENAME")
        except OSError:
            self.logger.debug("No /etc/os-release available")
            return None
