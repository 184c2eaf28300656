"""
Azure SDK integration for resolving request fields and managing role assignments.
"""

import uuid
from urllib.parse import quote
from typing import Dict, List, Optional

import requests
from dotenv import load_dotenv
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import AzureCliCredential, ChainedTokenCredential, DefaultAzureCredential
from azure.mgmt.authorization import AuthorizationManagementClient
from azure.mgmt.authorization.models import RoleAssignmentCreateParameters
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.subscription import SubscriptionClient

from .exceptions import AuthenticationError, DispatchError


load_dotenv()

ARM_SCOPE = "https://management.azure.com/.default"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_TIMEOUT = 30

MISSING_ASSIGNMENT_MESSAGE = "The role assignment does not exist at the given scope"


def _credential_for_tenant(tenant_id: str):
    # Azure CLI login first (local development), then environment (.env / AZURE_*)
    # and managed identity
    return ChainedTokenCredential(
        AzureCliCredential(tenant_id=tenant_id),
        DefaultAzureCredential(
            exclude_cli_credential=True,
            additionally_allowed_tenants=[tenant_id],
        ),
    )


def _odata_quote(value: str) -> str:
    return value.replace("'", "''")


class GraphClient:
    """Minimal Microsoft Graph client for directory object lookups."""

    def __init__(self, credential, base_url: str = GRAPH_BASE_URL):
        self.credential = credential
        self.base_url = base_url
        self.session = requests.Session()

    def _headers(self) -> Dict[str, str]:
        token = self.credential.get_token(GRAPH_SCOPE).token
        return {"Authorization": f"Bearer {token}"}

    def get(self, path: str, params: Optional[Dict] = None) -> Optional[Dict]:
        """
        GET a Graph resource.

        Args:
            path: Path relative to the Graph base URL
            params: Optional query parameters

        Returns:
            Decoded JSON body, or None when Graph answers 404
        """
        response = self.session.get(
            f"{self.base_url}/{path}",
            headers=self._headers(),
            params=params,
            timeout=GRAPH_TIMEOUT,
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def find_one(self, collection: str, display_name: str) -> Optional[Dict]:
        """Return the first object in a collection with the given display name."""
        body = self.get(
            collection,
            params={"$filter": f"displayName eq '{_odata_quote(display_name)}'"},
        )
        values = (body or {}).get("value", [])
        return values[0] if values else None


class AzureClient:
    """
    Session handle shared by every validator and the dispatcher.

    Holds the credential for one tenant and the management clients of the
    currently selected subscription. Successful lookups are cached for the
    lifetime of the client.
    """

    def __init__(self, tenant_id: str, credential=None):
        """
        Initialize Azure client.

        Args:
            tenant_id: Azure AD tenant (directory) ID to operate against
            credential: Optional credential (defaults to Azure CLI, then DefaultAzureCredential)
        """
        if not tenant_id:
            raise ValueError("Tenant ID not set in environment or parameters")

        self.tenant_id = tenant_id
        self.credential = credential or _credential_for_tenant(tenant_id)

        self.subscription_client = SubscriptionClient(self.credential)
        self.graph = GraphClient(self.credential)

        self.subscription_id: Optional[str] = None
        self.resource_client = None
        self.auth_client = None

        self._cache: Dict[tuple, object] = {}

    def authenticate(self) -> None:
        """
        Make sure the credential can obtain a management token.

        Raises:
            AuthenticationError: If no token could be acquired for the tenant
        """
        try:
            self.credential.get_token(ARM_SCOPE)
        except ClientAuthenticationError as e:
            raise AuthenticationError(f"Failed to authenticate to tenant {self.tenant_id}: {e.message}")

    def _cached(self, key: tuple, lookup):
        if key in self._cache:
            return self._cache[key]
        value = lookup()
        if value is not None:
            self._cache[key] = value
        return value

    # ------------------------------------------------------------------
    # Subscriptions and resources
    # ------------------------------------------------------------------

    def list_subscriptions(self) -> List[Dict]:
        """
        List subscriptions visible in the tenant.

        Returns:
            List of subscription dictionaries with subscription_id, display_name, state
        """
        return [
            {
                "subscription_id": sub.subscription_id,
                "display_name": sub.display_name,
                "state": sub.state,
            }
            for sub in self.subscription_client.subscriptions.list()
            if getattr(sub, "tenant_id", None) in (None, self.tenant_id)
        ]

    def get_subscription_by_name(self, name: str) -> Optional[Dict]:
        """
        Get a subscription by display name (case-insensitive).

        Service errors are not wrapped so callers can report them as-is.

        Args:
            name: The subscription display name

        Returns:
            Subscription dictionary or None if not found
        """

        def lookup():
            subs = [s for s in self.list_subscriptions() if s["display_name"].lower() == name.lower()]
            return subs[0] if subs else None

        return self._cached(("subscription", name.lower()), lookup)

    def use_subscription(self, subscription_id: str) -> None:
        """
        Switch the active subscription context.

        Args:
            subscription_id: Subscription to create management clients for
        """
        if subscription_id == self.subscription_id:
            return
        self.subscription_id = subscription_id
        self.resource_client = ResourceManagementClient(self.credential, subscription_id)
        self.auth_client = AuthorizationManagementClient(self.credential, subscription_id)

    def _require_subscription(self) -> str:
        if not self.subscription_id:
            raise RuntimeError("No subscription selected. Call use_subscription() first.")
        return self.subscription_id

    def get_resource_group(self, name: str):
        """
        Get a resource group in the active subscription.

        Raises:
            azure.core.exceptions.ResourceNotFoundError: If it does not exist
        """
        self._require_subscription()
        return self.resource_client.resource_groups.get(name)

    def find_resource(self, resource_group: str, name: str):
        """
        Find a resource by name inside a resource group.

        Args:
            resource_group: Resource group name
            name: Resource name

        Returns:
            The generic resource (with .type) or None if not found
        """
        self._require_subscription()
        matches = self.resource_client.resources.list_by_resource_group(
            resource_group, filter=f"name eq '{_odata_quote(name)}'"
        )
        for resource in matches:
            if resource.name.lower() == name.lower():
                return resource
        return None

    # ------------------------------------------------------------------
    # Role definitions and assignments
    # ------------------------------------------------------------------

    def get_role_definition(self, role_name: str) -> Optional[Dict]:
        """
        Get a role definition by exact role name in the active subscription.

        Args:
            role_name: Role display name (e.g. "Reader")

        Returns:
            Dictionary with id and name, or None if not found
        """
        subscription_id = self._require_subscription()

        def lookup():
            roles = self.auth_client.role_definitions.list(
                f"/subscriptions/{subscription_id}",
                filter=f"roleName eq '{_odata_quote(role_name)}'",
            )
            for r in roles:
                if r.role_name == role_name:
                    return {"id": r.id, "name": r.role_name}
            return None

        return self._cached(("role", subscription_id, role_name), lookup)

    def create_role_assignment(self, scope: str, principal_id: str, role_definition_id: str) -> Dict:
        """
        Create a role assignment at a scope.

        Args:
            scope: Fully qualified scope path
            principal_id: Directory object ID of the principal
            role_definition_id: Full role definition resource ID

        Returns:
            Created assignment dictionary

        Raises:
            DispatchError: If the service rejects the assignment
        """
        self._require_subscription()
        parameters = RoleAssignmentCreateParameters(
            role_definition_id=role_definition_id,
            principal_id=principal_id,
        )
        try:
            created = self.auth_client.role_assignments.create(scope, str(uuid.uuid4()), parameters)
        except Exception as e:
            raise DispatchError(_service_message(e))
        return {"id": created.id, "name": created.name, "scope": created.scope}

    def delete_role_assignment(self, scope: str, principal_id: str, role_definition_id: str) -> bool:
        """
        Delete the role assignment of a principal and role at exactly a scope.

        Args:
            scope: Fully qualified scope path
            principal_id: Directory object ID of the principal
            role_definition_id: Full role definition resource ID

        Returns:
            True if successful

        Raises:
            DispatchError: If no such assignment exists or the service rejects the delete
        """
        self._require_subscription()
        try:
            assignments = self.auth_client.role_assignments.list_for_scope(
                scope, filter=f"principalId eq '{principal_id}'"
            )
            matching = [
                a for a in assignments
                if a.scope.lower() == scope.lower()
                and a.role_definition_id.lower() == role_definition_id.lower()
            ]
            if not matching:
                raise DispatchError(MISSING_ASSIGNMENT_MESSAGE)
            for assignment in matching:
                self.auth_client.role_assignments.delete(scope, assignment.name)
        except DispatchError:
            raise
        except Exception as e:
            raise DispatchError(_service_message(e))
        return True

    # ------------------------------------------------------------------
    # Directory objects
    # ------------------------------------------------------------------

    def get_user(self, user_principal_name: str) -> Optional[str]:
        """Return the object ID of a user by UPN (e.g. jane@contoso.com)."""

        def lookup():
            user = self.graph.get(f"users/{quote(user_principal_name)}")
            return user["id"] if user else None

        return self._cached(("user", user_principal_name.lower()), lookup)

    def get_group(self, display_name: str) -> Optional[str]:
        """Return the object ID of a group by display name."""

        def lookup():
            group = self.graph.find_one("groups", display_name)
            return group["id"] if group else None

        return self._cached(("group", display_name), lookup)

    def get_service_principal(self, display_name: str) -> Optional[str]:
        """Return the object ID of a service principal by display name."""

        def lookup():
            sp = self.graph.find_one("servicePrincipals", display_name)
            return sp["id"] if sp else None

        return self._cached(("servicePrincipal", display_name), lookup)


def _service_message(exc: Exception) -> str:
    """Raw message of a service error, falling back to str()."""
    return getattr(exc, "message", None) or str(exc)
