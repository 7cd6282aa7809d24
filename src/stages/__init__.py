"""
Provisioning stages, in execution order.
"""

from .base import BaseStage
from .probe import ProbeStage
from .packages import PackageStage
from .source import SourceStage
from .runtime import RuntimeStage
from .assets import AssetStage
from .verify import VerifyStage
from .report import ReportStage


def default_stages():
    """Return a fresh instance of every stage in run order."""
    return [
        ProbeStage(),
        PackageStage(),
        SourceStage(),
        RuntimeStage(),
        AssetStage(),
        VerifyStage(),
        ReportStage(),
    ]


__all__ = [
    "BaseStage",
    "ProbeStage",
    "PackageStage",
    "SourceStage",
    "RuntimeStage",
    "AssetStage",
    "VerifyStage",
    "ReportStage",
    "default_stages"
]
