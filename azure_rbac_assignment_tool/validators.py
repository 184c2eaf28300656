"""
Field validators for role assignment requests.

Each validator turns one raw request field into a canonical value or an
identifier resolved through the Azure client, raising ValidationError with
the message that ends up in the row's status cell.
"""

from typing import Optional

from .azure_client import AzureClient
from .exceptions import ValidationError
from .models import LEVEL_ALIASES, Action, Level, PrincipalType


LEVEL_INCORRECT = "Level is incorrect"
NESTED_LEVEL_UNSUPPORTED = "Nested resource level is not supported"
ACTION_INCORRECT = "Action is incorrect"
SUBSCRIPTION_MISSING = "Subscription name is missing"
SUBSCRIPTION_NOT_FOUND = "Subscription not found in the Tenant"
RESOURCE_GROUP_MISSING = "Resource Group name is missing"
RESOURCE_GROUP_NOT_FOUND = "Resource Group not found in the Subscription"
RESOURCE_MISSING = "Resource name is missing"
RESOURCE_NOT_FOUND = "Resource not found in the Resource Group and Subscription"
ROLE_MISSING = "RBAC role name is missing"
ROLE_NOT_FOUND = "RBAC role name not found"
PRINCIPAL_MISSING = "AD Object name is missing"
PRINCIPAL_TYPE_INCORRECT = "AD Object type is incorrect"

PRINCIPAL_NOT_FOUND = {
    PrincipalType.USER: "User not found in Azure AD",
    PrincipalType.GROUP: "Group not found in Azure AD",
    PrincipalType.SERVICE_PRINCIPAL: "Service Principal not found in Azure AD",
}


class RequestValidator:
    """Validators for every field domain of a RoleAssignmentRequest."""

    def __init__(self, client: AzureClient):
        self.client = client

    @staticmethod
    def validate_level(value: Optional[str]) -> Level:
        """
        Validate the Level literal.

        Accepts "SubscriptionLevel" style values and the "Subscription-level"
        spelling of the workbook header.

        Raises:
            ValidationError: For unknown literals, and for the nested resource
                level which is recognised but has no resolver
        """
        level = LEVEL_ALIASES.get(value)
        if level is None:
            try:
                level = Level(value)
            except ValueError:
                raise ValidationError(LEVEL_INCORRECT)
        if level is Level.NESTED_RESOURCE:
            raise ValidationError(NESTED_LEVEL_UNSUPPORTED)
        return level

    @staticmethod
    def validate_action(value: Optional[str]) -> Action:
        """Validate the Action literal ("Add" or "Remove")."""
        try:
            return Action(value)
        except ValueError:
            raise ValidationError(ACTION_INCORRECT)

    def validate_subscription(self, name: Optional[str]) -> str:
        """
        Resolve a subscription display name to its ID and make it the active context.

        Service errors are reported with their own message rather than a
        generic one, since they usually explain the real cause (expired
        login, missing permissions).

        Returns:
            Subscription ID
        """
        if not name:
            raise ValidationError(SUBSCRIPTION_MISSING)
        try:
            sub = self.client.get_subscription_by_name(name)
        except Exception as e:
            raise ValidationError(getattr(e, "message", None) or str(e))
        if not sub:
            raise ValidationError(SUBSCRIPTION_NOT_FOUND)

        self.client.use_subscription(sub["subscription_id"])
        return sub["subscription_id"]

    def validate_resource_group(self, subscription_id: str, name: Optional[str]) -> str:
        """Check a resource group exists in the subscription and return its name."""
        if not name:
            raise ValidationError(RESOURCE_GROUP_MISSING)
        self.client.use_subscription(subscription_id)
        try:
            group = self.client.get_resource_group(name)
        except Exception:
            raise ValidationError(RESOURCE_GROUP_NOT_FOUND)
        return getattr(group, "name", None) or name

    def validate_resource(self, resource_group: str, name: Optional[str]) -> str:
        """
        Find a resource in a resource group.

        Returns:
            The resource type (e.g. "Microsoft.Storage/storageAccounts")
        """
        if not name:
            raise ValidationError(RESOURCE_MISSING)
        resource = self.client.find_resource(resource_group, name)
        if resource is None:
            raise ValidationError(RESOURCE_NOT_FOUND)
        return resource.type

    def validate_role(self, subscription_id: str, role_name: Optional[str]) -> str:
        """
        Resolve a role name to its role definition ID in the subscription.

        Returns:
            Full role definition resource ID
        """
        if not role_name:
            raise ValidationError(ROLE_MISSING)
        self.client.use_subscription(subscription_id)
        role = self.client.get_role_definition(role_name)
        if not role:
            raise ValidationError(ROLE_NOT_FOUND)
        return role["id"]

    def validate_principal(self, name: Optional[str], principal_type: Optional[str]) -> str:
        """
        Resolve a principal to its directory object ID.

        Users are looked up by user principal name (with domain), groups and
        service principals by display name.

        Returns:
            Object ID of the principal
        """
        try:
            kind = PrincipalType(principal_type)
        except ValueError:
            raise ValidationError(PRINCIPAL_TYPE_INCORRECT)
        if not name:
            raise ValidationError(PRINCIPAL_MISSING)

        lookups = {
            PrincipalType.USER: self.client.get_user,
            PrincipalType.GROUP: self.client.get_group,
            PrincipalType.SERVICE_PRINCIPAL: self.client.get_service_principal,
        }
        object_id = lookups[kind](name)
        if not object_id:
            raise ValidationError(PRINCIPAL_NOT_FOUND[kind])
        return object_id
