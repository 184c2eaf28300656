"""
Row processing: validation, scope resolution and role assignment dispatch.
"""

from enum import Enum
from typing import Optional

from .azure_client import AzureClient
from .exceptions import ValidationError
from .models import Action, Level, ResolvedScope, RoleAssignmentRequest, RowOutcome
from .validators import NESTED_LEVEL_UNSUPPORTED, RequestValidator


class RowState(Enum):
    """Steps a row moves through. The first failure ends the row as FAILED."""

    START = "start"
    LEVEL_VALIDATED = "level-validated"
    ACTION_VALIDATED = "action-validated"
    SCOPE_RESOLVED = "scope-resolved"
    PRINCIPAL_RESOLVED = "principal-resolved"
    ROLE_RESOLVED = "role-resolved"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def resolve_scope(
    level: Level,
    subscription_id: str,
    resource_group: Optional[str] = None,
    resource_name: Optional[str] = None,
    resource_type: Optional[str] = None,
) -> ResolvedScope:
    """
    Build the scope an assignment is made at.

    Args:
        level: Validated scope level
        subscription_id: Subscription ID
        resource_group: Resource group name (ResourceGroup and Resource levels)
        resource_name: Resource name (Resource level)
        resource_type: Resource type (Resource level)

    Returns:
        ResolvedScope
    """
    if level is Level.SUBSCRIPTION:
        return ResolvedScope(level=level, subscription_id=subscription_id)
    if level is Level.RESOURCE_GROUP:
        return ResolvedScope(level=level, subscription_id=subscription_id, resource_group=resource_group)
    if level is Level.RESOURCE:
        return ResolvedScope(
            level=level,
            subscription_id=subscription_id,
            resource_group=resource_group,
            resource_name=resource_name,
            resource_type=resource_type,
        )
    raise ValidationError(NESTED_LEVEL_UNSUPPORTED)


def dispatch(
    client: AzureClient,
    scope: ResolvedScope,
    principal_id: str,
    role_definition_id: str,
    action: Action,
) -> None:
    """Create (Add) or delete (Remove) the role assignment at exactly the given scope."""
    if action is Action.ADD:
        client.create_role_assignment(scope.path, principal_id, role_definition_id)
    else:
        client.delete_role_assignment(scope.path, principal_id, role_definition_id)


def failure_message(exc: Exception) -> str:
    """Status text for a failed row; never empty so the row reads as processed."""
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


class RowProcessor:
    """Turns one RoleAssignmentRequest into exactly one RowOutcome."""

    def __init__(self, client: AzureClient):
        """
        Initialize RowProcessor.

        Args:
            client: Session handle used by every validator and the dispatcher
        """
        self.client = client
        self.validator = RequestValidator(client)
        self.state = RowState.START
        self.scope: Optional[ResolvedScope] = None

    def process(self, request: RoleAssignmentRequest) -> RowOutcome:
        """
        Validate and apply one request.

        Never raises: any failure is returned as a failed outcome carrying the
        failure's message.
        """
        self.state = RowState.START
        self.scope = None
        try:
            self._run(request)
        except Exception as e:
            self.state = RowState.FAILED
            return RowOutcome.failure(failure_message(e))

        self.state = RowState.SUCCEEDED
        return RowOutcome.success()

    def _run(self, request: RoleAssignmentRequest) -> None:
        v = self.validator

        level = v.validate_level(request.Level)
        self.state = RowState.LEVEL_VALIDATED

        action = v.validate_action(request.Action)
        self.state = RowState.ACTION_VALIDATED

        subscription_id = v.validate_subscription(request.SubscriptionName)
        resource_group = resource_type = None
        if level in (Level.RESOURCE_GROUP, Level.RESOURCE):
            resource_group = v.validate_resource_group(subscription_id, request.ResourceGroupName)
        if level is Level.RESOURCE:
            resource_type = v.validate_resource(resource_group, request.ResourceName)

        self.scope = resolve_scope(
            level, subscription_id, resource_group, request.ResourceName, resource_type
        )
        self.state = RowState.SCOPE_RESOLVED

        principal_id = v.validate_principal(request.PrincipalName, request.PrincipalType)
        self.state = RowState.PRINCIPAL_RESOLVED

        role_definition_id = v.validate_role(subscription_id, request.RoleName)
        self.state = RowState.ROLE_RESOLVED

        dispatch(self.client, self.scope, principal_id, role_definition_id, action)
        self.state = RowState.DISPATCHED
