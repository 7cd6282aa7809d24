"""
Error types raised while provisioning.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .command_runner import CommandResult


class ErrorKind(str, Enum):
    """Category of a fatal provisioning failure."""
    MISSING_HARDWARE = "missing_hardware"
    USER_ABORTED = "user_aborted"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    COMMAND_FAILED = "command_failed"
    RUNTIME_ENVIRONMENT = "runtime_environment"


class ProvisioningError(Exception):
    """Base class for failures that stop the run."""
    kind: ErrorKind = ErrorKind.COMMAND_FAILED


class MissingHardwareError(ProvisioningError):
    kind = ErrorKind.MISSING_HARDWARE


class UserAbortedError(ProvisioningError):
    kind = ErrorKind.USER_ABORTED


class UnsupportedPlatformError(ProvisioningError):
    kind = ErrorKind.UNSUPPORTED_PLATFORM


class RuntimeEnvironmentError(ProvisioningError):
    kind = ErrorKind.RUNTIME_ENVIRONMENT


class CommandFailedError(ProvisioningError):
    """An external command exited non-zero."""
    kind = ErrorKind.COMMAND_FAILED

    def __init__(self, result: "CommandResult", message: Optional[str] = None):
        self.result = result
        if message is None:
            message = f"Command failed with exit code {result.returncode}: {result.display}"
            detail = (result.stderr or result.stdout or "").strip()
            if detail:
                message += f"\n{detail.splitlines()[-1]}"
        super().__init__(message)
