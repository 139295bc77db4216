"""
Domain models — pydantic types for the installer.

    from devsetup.core.models import Action, Receipt, Settings, ToolSpec
"""

from devsetup.core.models.action import Action, Receipt
from devsetup.core.models.settings import (
    AcademicTools,
    DataScienceTools,
    HomebrewSettings,
    Settings,
    WebJsTools,
    WebPythonTools,
)
from devsetup.core.models.tool import ToolSpec

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # settings.py
    "AcademicTools",
    "DataScienceTools",
    "HomebrewSettings",
    "Settings",
    "WebJsTools",
    "WebPythonTools",
    # tool.py
    "ToolSpec",
]
