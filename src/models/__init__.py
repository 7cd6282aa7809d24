"""
Data models for the ComfyUI provisioner.
"""

from .host import HostProfile, OsCodename
from .provisioning import ProvisioningResult, StageResult, StageStatus

__all__ = [
    "HostProfile",
    "OsCodename",
    "ProvisioningResult",
    "StageResult",
    "StageStatus"
]
