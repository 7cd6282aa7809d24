"""
Wrappers around the external tools the provisioner drives.
"""

from .apt import AptClient
from .nvidia import NvidiaProbe, GpuInfo
from .git import GitClient
from .venv import VirtualEnv
from .downloads import Downloader

__all__ = ["AptClient", "NvidiaProbe", "GpuInfo", "GitClient", "VirtualEnv", "Downloader"]
