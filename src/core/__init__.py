"""
Core modules for the ComfyUI provisioner.
"""

from .errors import (
    ErrorKind,
    ProvisioningError,
    MissingHardwareError,
    UserAbortedError,
    UnsupportedPlatformError,
    RuntimeEnvironmentError,
    CommandFailedError
)
from .command_runner import CommandRunner, CommandResult
from .context import ExecutionContext
from .artifact_manager import ArtifactManager

__all__ = [
    "ErrorKind",
    "ProvisioningError",
    "MissingHardwareError",
    "UserAbortedError",
    "UnsupportedPlatformError",
    "RuntimeEnvironmentError",
    "CommandFailedError",
    "CommandRunner",
    "CommandResult",
    "ExecutionContext",
    "ArtifactManager"
]
