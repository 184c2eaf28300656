import pytest
from openpyxl import Workbook

from azure_rbac_assignment_tool.azure_client import MISSING_ASSIGNMENT_MESSAGE
from azure_rbac_assignment_tool.exceptions import DispatchError
from azure_rbac_assignment_tool.workbook import DEFAULT_SHEET_NAME


class DummyResourceGroup:
    def __init__(self, name):
        self.name = name


class DummyResource:
    def __init__(self, name, type):
        self.name = name
        self.type = type


class DummyAzureClient:
    """Stand-in for AzureClient that records every call made to it."""

    def __init__(self):
        self.calls = []
        self.subscription_id = None
        self.subscriptions = {"Production": "sub-123", "Development": "sub-456"}
        self.resource_groups = {("sub-123", "rg-app")}
        self.resources = {("sub-123", "rg-app", "stapp01"): "Microsoft.Storage/storageAccounts"}
        self.roles = {
            "Reader": "/subscriptions/sub-123/providers/Microsoft.Authorization/roleDefinitions/reader-id",
            "Contributor": "/subscriptions/sub-123/providers/Microsoft.Authorization/roleDefinitions/contrib-id",
        }
        self.users = {"jane@contoso.com": "user-oid"}
        self.groups = {"Platform Engineers": "group-oid"}
        self.service_principals = {"deploy-sp": "sp-oid"}
        self.assignments = set()
        self.subscription_error = None
        self.dispatch_error = None

    def get_subscription_by_name(self, name):
        self.calls.append(("subscription", name))
        if self.subscription_error:
            raise self.subscription_error
        sub_id = self.subscriptions.get(name)
        return {"subscription_id": sub_id, "display_name": name, "state": "Enabled"} if sub_id else None

    def use_subscription(self, subscription_id):
        self.calls.append(("use_subscription", subscription_id))
        self.subscription_id = subscription_id

    def get_resource_group(self, name):
        self.calls.append(("resource_group", name))
        if (self.subscription_id, name) not in self.resource_groups:
            raise RuntimeError("ResourceGroupNotFound: raw service text")
        return DummyResourceGroup(name)

    def find_resource(self, resource_group, name):
        self.calls.append(("resource", resource_group, name))
        resource_type = self.resources.get((self.subscription_id, resource_group, name))
        return DummyResource(name, resource_type) if resource_type else None

    def get_role_definition(self, role_name):
        self.calls.append(("role", role_name))
        role_id = self.roles.get(role_name)
        return {"id": role_id, "name": role_name} if role_id else None

    def get_user(self, upn):
        self.calls.append(("user", upn))
        return self.users.get(upn)

    def get_group(self, name):
        self.calls.append(("group", name))
        return self.groups.get(name)

    def get_service_principal(self, name):
        self.calls.append(("servicePrincipal", name))
        return self.service_principals.get(name)

    def create_role_assignment(self, scope, principal_id, role_definition_id):
        self.calls.append(("create", scope, principal_id, role_definition_id))
        if self.dispatch_error:
            raise DispatchError(self.dispatch_error)
        self.assignments.add((scope, principal_id, role_definition_id))
        return {"id": "assignment-id", "name": "assignment-name", "scope": scope}

    def delete_role_assignment(self, scope, principal_id, role_definition_id):
        self.calls.append(("delete", scope, principal_id, role_definition_id))
        key = (scope, principal_id, role_definition_id)
        if key not in self.assignments:
            raise DispatchError(MISSING_ASSIGNMENT_MESSAGE)
        self.assignments.remove(key)
        return True

    def call_kinds(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def client():
    return DummyAzureClient()


def write_workbook(path, rows, sheet_name=DEFAULT_SHEET_NAME):
    """Create a request workbook with the two header rows followed by rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append(["RBAC access requests"])
    ws.append(
        [
            "Level",
            "Subscription",
            "Resource Group",
            "Resource",
            "Role",
            "Principal",
            "Principal Type",
            "Action",
            "Status",
        ]
    )
    for row in rows:
        ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def make_workbook(tmp_path):
    def factory(rows, sheet_name=DEFAULT_SHEET_NAME, name="requests.xlsx"):
        return write_workbook(tmp_path / name, rows, sheet_name=sheet_name)

    return factory
