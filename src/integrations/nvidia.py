"""
NVIDIA driver and CUDA toolkit probes.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.command_runner import CommandRunner


@dataclass
class GpuInfo:
    """What nvidia-smi reports for one GPU."""
    name: str
    memory_total_mb: int


class NvidiaProbe:
    """Queries nvidia-smi and nvcc without changing the host."""

    def __init__(self, runner: CommandRunner):
        self.logger = logging.getLogger(__name__)
        self.runner = runner

    def driver_available(self) -> bool:
        return self.runner.which("nvidia-smi") is not None

    def query_gpu(self, index: int = 0) -> Optional[GpuInfo]:
        """
        Read name and total memory of one GPU.

        Returns:
            GpuInfo, or None if nvidia-smi fails or reports no GPU
        """
        result = self.runner.run(
            ["nvidia-smi", "--query-gpu=name,memory.total", "--format=csv,noheader,nounits", "-i", str(index)],
            check=False,
            read_only=True
        )
        if not result.ok:
            self.logger.debug(f"nvidia-smi exited {result.returncode}: {result.stderr.strip()}")
            return None
        return self.parse_gpu_line(result.stdout)

    @staticmethod
    def parse_gpu_line(output: str) -> Optional[GpuInfo]:
        """Parse the last 'name, memory' line of nvidia-smi CSV output."""
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines:
            return None
        fields = [f.strip() for f in lines[-1].rsplit(",", 1)]
        if len(fields) != 2:
            return None
        name, memory = fields
        memory = memory.split()[0] if memory else ""
        if not memory.isdigit():
            return None
        return GpuInfo(name=name, memory_total_mb=int(memory))

    def toolkit_release(self, nvcc_paths: List[str]) -> Optional[str]:
        """
        Return the output of the first nvcc that answers --version.

        Args:
            nvcc_paths: Executable names or absolute paths to try in order
        """
        for candidate in nvcc_paths:
            result = self.runner.run([candidate, "--version"], check=False, read_only=True)
            if result.ok:
                return result.stdout
        return None

    def has_toolkit(self, release_marker: str, nvcc_paths: List[str]) -> bool:
        output = self.toolkit_release(nvcc_paths)
        return output is not None and release_marker in output
