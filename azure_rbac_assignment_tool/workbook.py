"""
Excel workbook access for the RBAC request sheet.

Layout: two header rows, data from row 3. Columns A-H hold the request
fields, column I receives the status written by the tool.
"""

from pathlib import Path
from typing import Iterator, Tuple
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import (
    InvalidWorkbookError,
    SheetNotFoundError,
    WorkbookNotFoundError,
    WorkbookSaveError,
)
from .models import RoleAssignmentRequest, normalize


DEFAULT_SHEET_NAME = "RBAC_Access_Request"
HEADER_ROWS = 2
FIRST_DATA_ROW = HEADER_ROWS + 1
REQUEST_COLUMNS = 8  # A-H
STATUS_COLUMN = 9  # I


class RequestWorkbook:
    """Loaded request workbook with one sheet of role assignment requests."""

    def __init__(self, path: Path, sheet_name: str = DEFAULT_SHEET_NAME):
        """
        Load the workbook.

        Args:
            path: Path to the .xlsx file
            sheet_name: Name of the request sheet

        Raises:
            WorkbookNotFoundError: If the file does not exist
            InvalidWorkbookError: If the file is not a readable .xlsx workbook
            SheetNotFoundError: If the workbook has no such sheet
        """
        self.path = Path(path)
        if not self.path.is_file():
            raise WorkbookNotFoundError(f"Workbook not found: {self.path}")

        try:
            self.workbook = load_workbook(self.path)
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            raise InvalidWorkbookError(f"Cannot read {self.path} as an Excel workbook: {e}")
        if sheet_name not in self.workbook.sheetnames:
            raise SheetNotFoundError(
                f"Sheet '{sheet_name}' not found in {self.path.name} "
                f"(available: {', '.join(self.workbook.sheetnames)})"
            )
        self.sheet = self.workbook[sheet_name]

    def requests(self) -> Iterator[Tuple[int, RoleAssignmentRequest]]:
        """
        Yield (row number, request) pairs in sheet order.

        Stops at the first row whose Level cell is empty; that row and
        everything below it are not part of the data.
        """
        rows = self.sheet.iter_rows(
            min_row=FIRST_DATA_ROW, max_col=REQUEST_COLUMNS, values_only=True
        )
        for row_number, cells in enumerate(rows, start=FIRST_DATA_ROW):
            if normalize(cells[0]) is None:
                return
            yield row_number, RoleAssignmentRequest.from_cells(cells)

    def set_status(self, row: int, status: str) -> None:
        """Write a row's status, replacing whatever was there before."""
        self.sheet.cell(row=row, column=STATUS_COLUMN, value=status)

    def get_status(self, row: int):
        """Current status cell value of a row."""
        return self.sheet.cell(row=row, column=STATUS_COLUMN).value

    def save(self) -> Path:
        """
        Persist the workbook back to its original path.

        Raises:
            WorkbookSaveError: If the file cannot be written
        """
        try:
            self.workbook.save(self.path)
        except OSError as e:
            raise WorkbookSaveError(f"Failed to save {self.path}: {e}")
        return self.path
