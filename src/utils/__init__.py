"""
Utility modules for the ComfyUI provisioner.
"""

from .logging import setup_root_logger

__all__ = ["setup_root_logger"]
