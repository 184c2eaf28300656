"""
Request, scope and outcome models for role assignment processing.
"""

from enum import Enum
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict


class Level(Enum):
    """Scope level a role assignment is made at."""

    SUBSCRIPTION = "SubscriptionLevel"
    RESOURCE_GROUP = "ResourceGroupLevel"
    RESOURCE = "ResourceLevel"
    NESTED_RESOURCE = "NestedResourceLevel"  # recognised, not supported yet


# Spellings used in the workbook header row
LEVEL_ALIASES = {
    "Subscription-level": Level.SUBSCRIPTION,
    "ResourceGroup-level": Level.RESOURCE_GROUP,
    "Resource-level": Level.RESOURCE,
    "NestedResource-level": Level.NESTED_RESOURCE,
}


class Action(Enum):
    """What to do with the role assignment."""

    ADD = "Add"
    REMOVE = "Remove"


class PrincipalType(Enum):
    """Kind of directory object receiving the role."""

    USER = "User"
    GROUP = "Group"
    SERVICE_PRINCIPAL = "ServicePrincipal"


def normalize(value) -> Optional[str]:
    """
    Trim a raw cell value.

    Returns None for missing or blank cells, otherwise the value as stripped text.
    Already-normalized values are returned unchanged.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class RoleAssignmentRequest(BaseModel):
    """One row of the request sheet, fields normalized but not yet validated."""

    Level: Optional[str] = None
    SubscriptionName: Optional[str] = None
    ResourceGroupName: Optional[str] = None
    ResourceName: Optional[str] = None
    RoleName: Optional[str] = None
    PrincipalName: Optional[str] = None
    PrincipalType: Optional[str] = None
    Action: Optional[str] = None

    @classmethod
    def from_cells(cls, cells) -> "RoleAssignmentRequest":
        """
        Build a request from the eight input cells of a row (columns A-H).

        Args:
            cells: Sequence of raw cell values in column order

        Returns:
            RoleAssignmentRequest with every field normalized
        """
        values = [normalize(c) for c in cells]
        values += [None] * (len(cls.model_fields) - len(values))
        return cls(**dict(zip(cls.model_fields, values)))


class ResolvedScope(BaseModel):
    """Fully qualified scope a role assignment applies to."""

    model_config = ConfigDict(frozen=True)

    level: Level
    subscription_id: str
    resource_group: Optional[str] = None
    resource_name: Optional[str] = None
    resource_type: Optional[str] = None

    @property
    def path(self) -> str:
        path = f"/subscriptions/{self.subscription_id}"
        if self.level is Level.SUBSCRIPTION:
            return path
        path += f"/resourceGroups/{self.resource_group}"
        if self.level is Level.RESOURCE_GROUP:
            return path
        return f"{path}/providers/{self.resource_type}/{self.resource_name}"


class RowOutcome(BaseModel):
    """Result of processing one row. The status text is written back to the sheet."""

    SUCCESS_TEXT: ClassVar[str] = "Success"

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    message: str

    @classmethod
    def success(cls) -> "RowOutcome":
        return cls(succeeded=True, message=cls.SUCCESS_TEXT)

    @classmethod
    def failure(cls, message: str) -> "RowOutcome":
        return cls(succeeded=False, message=message)
