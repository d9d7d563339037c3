"""Grievances page — row decoration, submission, detail and resolution."""

from __future__ import annotations

from portal.grievances.service import priority_color, resolver_label, status_color
from tests.conftest import auth_headers

GRIEVANCES = [
    {
        "_id": "g-1",
        "ticketNumber": "GRV-0001",
        "type": "Complaint",
        "category": "IT Support",
        "title": "Laptop overheating",
        "description": "Shuts down after an hour",
        "priority": "Urgent",
        "status": "Open",
        "employeeId": {"_id": "e-emp", "employeeId": "EMP001", "personalInfo": {"fullName": "Asha Rao"}},
    },
    {
        "_id": "g-2",
        "ticketNumber": "GRV-0002",
        "type": "Query",
        "category": "Salary Issues",
        "title": "Payslip missing",
        "priority": "Low",
        "status": "Resolved",
        "employeeId": {"_id": "e-2", "employeeId": "EMP002"},
        "resolution": {
            "resolutionDetails": "Re-issued",
            "resolvedAt": "2026-10-10T10:00:00.000Z",
            "resolvedBy": {"_id": "u-hr", "role": "hr"},
        },
    },
]


class TestDecoration:
    def test_status_colors(self):
        assert status_color("Resolved") == "green"
        assert status_color("In Progress") == "blue"
        assert status_color("Closed") == "gray"
        assert status_color("Open") == "yellow"

    def test_priority_colors(self):
        assert priority_color("Urgent") == "red"
        assert priority_color("High") == "orange"
        assert priority_color("Medium") == "yellow"
        assert priority_color("Low") == "gray"

    def test_resolver_label_only_for_resolved(self):
        assert resolver_label(GRIEVANCES[1]) == "Solved by HR"
        assert resolver_label(GRIEVANCES[0]) is None


async def test_employee_view_hides_employee_column(client, backend):
    backend.on("GET", "/api/grievances", GRIEVANCES)

    resp = await client.get("/api/v1/grievances/", headers=auth_headers("employee"))

    view = resp.json()
    assert view["can_submit"]
    assert not view["show_employee_column"]
    assert view["form"]["defaults"]["type"] == "Query"
    assert view["grievances"][0]["employee_name"] is None
    assert not any(row["can_resolve"] for row in view["grievances"])


async def test_manager_view_marks_resolvable_rows(client, backend):
    backend.on("GET", "/api/grievances", GRIEVANCES)

    resp = await client.get("/api/v1/grievances/", headers=auth_headers("manager"))

    view = resp.json()
    assert not view["can_submit"]
    assert view["form"] is None
    first, second = view["grievances"]
    assert first["employee_name"] == "Asha Rao"
    assert second["employee_name"] == "EMP002"
    assert first["can_resolve"] and not second["can_resolve"]
    assert second["resolved_by"] == "Solved by HR"
    assert second["resolved_at"] == "October 10, 2026"


async def test_detail_modes_and_missing_ticket(client, backend):
    backend.on("GET", "/api/grievances", GRIEVANCES)

    resolve = await client.get("/api/v1/grievances/g-1", headers=auth_headers("manager"))
    readonly = await client.get("/api/v1/grievances/g-2", headers=auth_headers("manager"))
    missing = await client.get("/api/v1/grievances/g-404", headers=auth_headers("manager"))

    assert resolve.json()["mode"] == "resolve"
    assert readonly.json()["mode"] == "view"
    assert missing.status_code == 404
    assert missing.json()["type"].endswith("/not-found")


async def test_submit_and_refetch(client, backend):
    backend.on("GET", "/api/grievances", [])
    backend.on("POST", "/api/grievances", {"_id": "g-3"}, status=201)

    resp = await client.post(
        "/api/v1/grievances/",
        json={
            "type": "Grievance",
            "category": "HR Issues",
            "title": "Shift roster",
            "description": "Roster published late",
            "priority": "High",
        },
        headers=auth_headers("employee"),
    )

    assert resp.status_code == 200
    assert resp.json()["notices"][0]["message"] == "Grievance submitted successfully!"
    assert backend.last_json("POST", "/api/grievances")["category"] == "HR Issues"
    assert len(backend.calls("GET", "/api/grievances")) == 2


async def test_submit_failure_shows_backend_message(client, backend):
    backend.on("GET", "/api/grievances", [])
    backend.on("POST", "/api/grievances", {"message": "Employee profile not found"}, status=404)

    resp = await client.post(
        "/api/v1/grievances/",
        json={
            "type": "Query",
            "category": "Policy Queries",
            "title": "WFH policy",
            "description": "How many days?",
            "priority": "Low",
        },
        headers=auth_headers("employee"),
    )

    assert resp.status_code == 404
    assert resp.json()["notices"][0]["message"] == "Employee profile not found"


async def test_blank_resolution_is_rejected_locally(client, backend):
    backend.on("GET", "/api/grievances", GRIEVANCES)

    resp = await client.post(
        "/api/v1/grievances/g-1/resolve",
        json={"resolution_details": "   "},
        headers=auth_headers("manager"),
    )

    assert resp.status_code == 422
    assert resp.json()["notices"][0]["message"] == "Please provide resolution details"
    assert backend.calls("PUT") == []


async def test_resolve_sends_details(client, backend):
    backend.on("GET", "/api/grievances", GRIEVANCES)
    backend.on("PUT", "/api/grievances/g-1/resolve", {"message": "ok"})

    resp = await client.post(
        "/api/v1/grievances/g-1/resolve",
        json={"resolution_details": "Replaced the fan"},
        headers=auth_headers("manager"),
    )

    assert resp.status_code == 200
    assert resp.json()["notices"][0]["message"] == "Grievance resolved successfully!"
    assert backend.last_json("PUT", "/api/grievances/g-1/resolve") == {"resolutionDetails": "Replaced the fan"}
