"""
Error types raised while processing a workbook of role assignment requests.
"""


class RbacToolError(Exception):
    """Base class for all tool errors."""


class ValidationError(RbacToolError):
    """A request field could not be validated or resolved. Aborts one row."""


class DispatchError(RbacToolError):
    """The authorization service rejected a create or delete call. Aborts one row."""


class AuthenticationError(RbacToolError):
    """No working session could be established against the tenant."""


class WorkbookNotFoundError(RbacToolError):
    """The input workbook does not exist."""


class SheetNotFoundError(RbacToolError):
    """The input workbook has no request sheet."""


class InvalidWorkbookError(RbacToolError):
    """The input file exists but cannot be read as an Excel workbook."""


class WorkbookSaveError(RbacToolError):
    """The workbook could not be written back (e.g. locked by Excel)."""
