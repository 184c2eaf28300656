"""
Batch driver: runs every request row of a workbook through the row processor.
"""

from typing import Callable, List, Optional, Tuple

from .models import RoleAssignmentRequest, RowOutcome
from .processor import RowProcessor
from .workbook import RequestWorkbook


RowResult = Tuple[int, RoleAssignmentRequest, RowOutcome]


def run_batch(
    workbook: RequestWorkbook,
    processor: RowProcessor,
    on_row: Optional[Callable[[int, RoleAssignmentRequest, RowOutcome], None]] = None,
) -> List[RowResult]:
    """
    Process all request rows in order and write each outcome to its status cell.

    Rows are processed one at a time; a failed row never stops the batch.
    The workbook is saved once, after the last row.

    Args:
        workbook: Loaded request workbook
        processor: Row processor bound to an Azure session
        on_row: Optional progress callback called after each row

    Returns:
        List of (row number, request, outcome) in row order
    """
    results: List[RowResult] = []

    for row_number, request in workbook.requests():
        outcome = processor.process(request)
        workbook.set_status(row_number, outcome.message)
        results.append((row_number, request, outcome))
        if on_row:
            on_row(row_number, request, outcome)

    workbook.save()
    return results
