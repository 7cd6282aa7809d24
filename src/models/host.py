"""
Host profile models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class OsCodename(str, Enum):
    """Supported Ubuntu releases."""
    FOCAL = "focal"
    JAMMY = "jammy"
    NOBLE = "noble"

    @property
    def cuda_repo(self) -> str:
        """CUDA repository identifier for this release."""
        return _CUDA_REPOS[self]

    @classmethod
    def parse(cls, value: str) -> Optional["OsCodename"]:
        try:
            return cls(value.strip())
        except ValueError:
            return None


_CUDA_REPOS = {
    OsCodename.FOCAL: "ubuntu2004",
    OsCodename.JAMMY: "ubuntu2204",
    OsCodename.NOBLE: "ubuntu2404",
}


class HostProfile(BaseModel):
    """Hardware and OS facts read once at the start of a run."""
    gpu_present: bool = Field(..., description="An NVIDIA GPU answered nvidia-smi")
    gpu_name: Optional[str] = Field(None, description="Name of GPU 0")
    vram_mb: int = Field(..., ge=0, description="Total memory of GPU 0 in MB")
    ram_mb: int = Field(..., ge=0, description="Physical memory in MB")
    swap_mb: int = Field(..., ge=0, description="Swap space in MB")
    os_codename: OsCodename = Field(..., description="Ubuntu release codename")

    @property
    def total_memory_mb(self) -> int:
        return self.ram_mb + self.swap_mb

    @property
    def cuda_repo(self) -> str:
        return self.os_codename.cuda_repo

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "gpu_present": True,
                "gpu_name": "NVIDIA GeForce RTX 3060",
                "vram_mb": 12288,
                "ram_mb": 32000,
                "swap_mb": 2048,
                "os_codename": "jammy"
            }
        }
