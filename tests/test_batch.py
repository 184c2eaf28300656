"""Tests for the batch driver."""

from azure_rbac_assignment_tool.batch import run_batch
from azure_rbac_assignment_tool.processor import RowProcessor
from azure_rbac_assignment_tool.workbook import RequestWorkbook


VALID = ["SubscriptionLevel", "Production", None, None, "Reader", "jane@contoso.com", "User", "Add"]
UNKNOWN_ROLE = ["SubscriptionLevel", "Production", None, None, "Nope", "jane@contoso.com", "User", "Add"]
RG_LEVEL = ["ResourceGroup-level", "Production", "rg-app", None, "Contributor", "Platform Engineers", "Group", "Add"]


def statuses(path, rows):
    saved = RequestWorkbook(path)
    return [saved.get_status(r) for r in rows]


def test_batch_writes_every_outcome(client, make_workbook):
    path = make_workbook([VALID, ["Tenant"] + VALID[1:], UNKNOWN_ROLE, RG_LEVEL])

    results = run_batch(RequestWorkbook(path), RowProcessor(client))

    assert [row for row, _, _ in results] == [3, 4, 5, 6]
    assert statuses(path, [3, 4, 5, 6]) == [
        "Success",
        "Level is incorrect",
        "RBAC role name not found",
        "Success",
    ]


def test_batch_stops_at_sentinel_row(client, make_workbook):
    path = make_workbook([VALID, [None] + VALID[1:] + ["untouched"], RG_LEVEL])

    results = run_batch(RequestWorkbook(path), RowProcessor(client))

    assert len(results) == 1
    assert statuses(path, [3, 4, 5]) == ["Success", "untouched", None]
    assert [c for c in client.call_kinds() if c == "create"] == ["create"]


def test_batch_overwrites_previous_statuses(client, make_workbook):
    path = make_workbook([VALID + ["Failed last time"], UNKNOWN_ROLE + ["Success"]])

    run_batch(RequestWorkbook(path), RowProcessor(client))

    assert statuses(path, [3, 4]) == ["Success", "RBAC role name not found"]


def test_batch_reports_progress_and_saves_once(client, make_workbook, monkeypatch):
    path = make_workbook([VALID, UNKNOWN_ROLE])
    workbook = RequestWorkbook(path)
    seen = []
    saves = []

    original_save = workbook.save

    def counting_save():
        saves.append(1)
        return original_save()

    monkeypatch.setattr(workbook, "save", counting_save)

    run_batch(workbook, RowProcessor(client), on_row=lambda row, req, out: seen.append((row, out.succeeded)))

    assert seen == [(3, True), (4, False)]
    assert saves == [1]
