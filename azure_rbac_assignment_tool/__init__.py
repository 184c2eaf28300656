"""
Azure RBAC Assignment Tool

Batch tool for platform engineers to add or remove Azure role assignments
listed in an Excel workbook.
"""

__version__ = "1.0.0"
__author__ = "OI Technologies Platform Engineering"
__license__ = "Internal"

from .models import (
    Action,
    Level,
    PrincipalType,
    ResolvedScope,
    RoleAssignmentRequest,
    RowOutcome,
)
from .azure_client import AzureClient
from .processor import RowProcessor
from .workbook import RequestWorkbook

__all__ = [
    "Action",
    "Level",
    "PrincipalType",
    "ResolvedScope",
    "RoleAssignmentRequest",
    "RowOutcome",
    "AzureClient",
    "RowProcessor",
    "RequestWorkbook",
]
