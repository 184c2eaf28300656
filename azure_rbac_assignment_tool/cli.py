#!/usr/bin/env python
"""
Azure RBAC Assignment Tool CLI

Applies the role assignment requests listed in an Excel workbook and writes
each row's result back into the workbook.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .azure_client import AzureClient
from .batch import run_batch
from .exceptions import (
    AuthenticationError,
    InvalidWorkbookError,
    SheetNotFoundError,
    WorkbookNotFoundError,
    WorkbookSaveError,
)
from .models import RoleAssignmentRequest, RowOutcome
from .processor import RowProcessor
from .workbook import DEFAULT_SHEET_NAME, RequestWorkbook
from . import __version__

term = Console()

EXIT_INPUT_ERROR = 1
EXIT_AUTH_ERROR = 2


# ============================================================================
# HELPER FUNCTIONS - Output Formatting
# ============================================================================


def error(message: str, exit_code: int = EXIT_INPUT_ERROR):
    """Print error message and exit."""
    term.print(f"[red]✗ Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(exit_code)


def success(message: str):
    """Print success message."""
    term.print(f"[green]✓[/green] {message}")


def warn(message: str):
    """Print warning message."""
    term.print(f"[yellow]⚠[/yellow] {message}")


def info(message: str):
    """Print info message."""
    term.print(f"[cyan]ℹ[/cyan] {message}")


def print_row_progress(row: int, request: RoleAssignmentRequest, outcome: RowOutcome):
    """Print one progress line for a processed row."""
    label = (
        f"Row {row}: {request.Action or '?'} '{request.RoleName or '?'}' "
        f"for {request.PrincipalName or '?'} at {request.Level or '?'} level"
    )
    label = escape(label)
    if outcome.succeeded:
        term.print(f"[green]✓[/green] {label} - {outcome.message}", soft_wrap=True)
    else:
        term.print(f"[red]✗[/red] {label} - [red]{escape(outcome.message)}[/red]", soft_wrap=True)


def print_summary(results) -> None:
    """Render the end-of-run summary table."""
    succeeded = sum(1 for _, _, outcome in results if outcome.succeeded)
    failed = len(results) - succeeded

    table = Table(title="Run Summary")
    table.add_column("Rows", style="cyan")
    table.add_column("Succeeded", style="green")
    table.add_column("Failed", style="red")
    table.add_row(str(len(results)), str(succeeded), str(failed))
    term.print(table)


# ============================================================================


@click.command()
@click.version_option(version=__version__, prog_name="azure-rbac-assignment-tool")
@click.argument("workbook_path", metavar="WORKBOOK")
@click.argument("tenant_id", envvar="AZURE_TENANT_ID")
@click.option(
    "--sheet",
    default=DEFAULT_SHEET_NAME,
    show_default=True,
    help="Name of the sheet holding the requests",
)
def cli(workbook_path: str, tenant_id: str, sheet: str):
    """Add or remove the Azure role assignments listed in WORKBOOK.

    TENANT_ID is the Azure AD tenant to work in (defaults to $AZURE_TENANT_ID).
    The outcome of every row is written to its Status column.
    """
    try:
        workbook = RequestWorkbook(workbook_path, sheet_name=sheet)
    except (WorkbookNotFoundError, InvalidWorkbookError, SheetNotFoundError) as e:
        error(str(e))

    try:
        with term.status("[bold blue]Authenticating to Azure...[/bold blue]"):
            client = AzureClient(tenant_id=tenant_id)
            client.authenticate()
    except AuthenticationError as e:
        error(str(e), exit_code=EXIT_AUTH_ERROR)
    except Exception as e:
        error(f"Failed to authenticate to tenant {tenant_id}: {e}", exit_code=EXIT_AUTH_ERROR)
    success(f"Authenticated to tenant [bold]{tenant_id}[/bold]")

    try:
        results = run_batch(workbook, RowProcessor(client), on_row=print_row_progress)
    except WorkbookSaveError as e:
        error(f"{e}. Row changes were applied in Azure but their statuses were not saved.")

    if not results:
        warn(f"No requests found in sheet '{sheet}'")
    else:
        print_summary(results)
    info(f"Statuses written to {workbook.path}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
