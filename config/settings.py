"""
Configuration settings for the ComfyUI provisioner.
"""

import re
from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings


class HostRequirements(BaseModel):
    """Minimum host resources before the operator is asked to confirm."""
    min_vram_mb: int = Field(default=6000, description="Recommended GPU VRAM in MB")
    min_memory_mb: int = Field(default=16000, description="Recommended RAM + swap in MB")

    @validator('min_vram_mb', 'min_memory_mb')
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Resource thresholds must be positive")
        return v


class AptConfig(BaseModel):
    """OS package configuration."""
    base_packages: List[str] = Field(
        default_factory=lambda: ["git", "python3", "python3-venv", "python3-pip", "wget", "unzip"],
        description="Packages installed on every run"
    )
    compat_package: str = Field(default="libtinfo5", description="Compatibility library installed if missing")
    compat_fallback_source: str = Field(
        default="deb http://archive.ubuntu.com/ubuntu focal main universe",
        description="Older-release source registered only while installing the compat library"
    )
    sources_dir: Path = Field(default=Path("/etc/apt/sources.list.d"))
    preferences_dir: Path = Field(default=Path("/etc/apt/preferences.d"))


class CudaConfig(BaseModel):
    """CUDA toolkit configuration."""
    version: str = Field(default="12-8", description="Toolkit version in apt package form")
    repo_base_url: str = Field(default="https://developer.download.nvidia.com/compute/cuda/repos")
    architecture: str = Field(default="x86_64")
    signing_key_id: str = Field(default="3bf863cc")
    pin_name: str = Field(default="cuda-repository-pin-600", description="Pin file name under preferences.d")
    nvcc_paths: List[str] = Field(
        default_factory=lambda: ["nvcc", "/usr/local/cuda/bin/nvcc"],
        description="Locations probed for an installed toolkit"
    )

    @validator('version')
    def validate_version(cls, v):
        if not re.fullmatch(r"\d+-\d+", v):
            raise ValueError(f"CUDA version must look like '12-8', got: {v}")
        return v

    @property
    def release_marker(self) -> str:
        """String `nvcc --version` prints for this toolkit version."""
        return f"release {self.version.replace('-', '.')}"

    @property
    def toolkit_package(self) -> str:
        return f"cuda-toolkit-{self.version}"

    def repo_url(self, cuda_repo: str) -> str:
        """Get the apt repository URL for a CUDA repository identifier."""
        return f"{self.repo_base_url}/{cuda_repo}/{self.architecture}"


class SourceConfig(BaseModel):
    """Application source configuration."""
    repository_url: str = Field(default="https://github.com/comfyanonymous/ComfyUI.git")
    directory_name: Optional[str] = Field(None, description="Clone directory; derived from the URL if unset")
    branch: Optional[str] = Field(None, description="Branch or tag to clone")


class RuntimeConfig(BaseModel):
    """Virtual environment and Python dependency configuration."""
    python_executable: str = Field(default="python3", description="Interpreter used to create the venv")
    venv_name: str = Field(default="venv")
    torch_index_url: str = Field(default="https://download.pytorch.org/whl/cu128")
    torch_packages: List[str] = Field(default_factory=lambda: ["torch", "torchvision", "torchaudio"])
    torch_fallback_packages: List[str] = Field(default_factory=lambda: ["torch", "torchvision"])
    extra_packages: List[str] = Field(default_factory=lambda: ["safetensors"])
    requirements_file: str = Field(default="requirements.txt")
    strict_dependency_check: bool = Field(default=False, description="Fail instead of warn when pip check stays broken")


class AssetConfig(BaseModel):
    """Model checkpoint download configuration."""
    model_dir: Path = Field(default=Path("models/checkpoints"))
    model_url: str = Field(
        default="https://huggingface.co/Lykon/DreamShaper/resolve/main/DreamShaper_8_pruned.safetensors"
    )
    model_filename: Optional[str] = Field(None, description="Target file name; derived from the URL if unset")

    def target_filename(self) -> str:
        return self.model_filename or self.model_url.rstrip("/").rsplit("/", 1)[-1]


class VerificationConfig(BaseModel):
    """Post-install smoke test configuration."""
    modules: List[str] = Field(default_factory=lambda: ["torch", "safetensors", "torchaudio"])


class ReportConfig(BaseModel):
    """Final instructions configuration."""
    alloc_conf: str = Field(default="expandable_segments:True", description="PYTORCH_CUDA_ALLOC_CONF value")
    launch_args: List[str] = Field(default_factory=lambda: ["--force-fp16", "--lowvram"])
    port: int = Field(default=8188)


class ArtifactConfig(BaseModel):
    """Run record configuration."""
    enabled: bool = Field(default=True, description="Write a summary and transcript per run")
    base_path: Path = Field(default=Path("logs/runs"), description="Base path for run records")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        description="Log format"
    )
    file_path: Optional[Path] = Field(default=Path("logs/comfyui_setup.log"))
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")


class Settings(BaseSettings):
    """Main application settings."""
    # Component configs
    requirements: HostRequirements = Field(default_factory=HostRequirements)
    apt: AptConfig = Field(default_factory=AptConfig)
    cuda: CudaConfig = Field(default_factory=CudaConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Operational settings
    assume_yes: bool = Field(default=False, description="Answer yes to resource confirmation prompts")
    dry_run: bool = Field(default=False, description="Log mutating commands instead of running them")
    use_sudo: bool = Field(default=True, description="Prefix privileged commands with sudo when not root")
    workdir: Path = Field(default=Path("."), description="Directory the application is cloned into")

    class Config:
        env_prefix = "COMFY_SETUP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Ignore extra fields from environment
