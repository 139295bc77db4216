"""Stages — prerequisites that always run, and the selectable stacks."""

from devsetup.core.stages.base import Stage, StageContext, StageResult
from devsetup.core.stages.prerequisites import (
    PackageManagerStage,
    PowerCheckStage,
    ToolchainStage,
)
from devsetup.core.stages.stacks import (
    AcademicStage,
    DataScienceStage,
    WebJsStage,
    WebPythonStage,
)

__all__ = [
    "AcademicStage",
    "DataScienceStage",
    "PackageManagerStage",
    "PowerCheckStage",
    "Stage",
    "StageContext",
    "StageResult",
    "ToolchainStage",
    "WebJsStage",
    "WebPythonStage",
]
