"""Dashboard page — role sub-views, announcement ticker, HR-profile queue."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx

from portal.config import settings
from portal.dashboard.service import (
    DashboardPage,
    active_announcements,
    department_slices,
    employee_dashboard,
)
from tests.conftest import auth_headers

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


class TestDerivations:
    def test_announcement_ticker_drops_expired_and_caps(self, monkeypatch):
        monkeypatch.setattr(settings, "DASHBOARD_ANNOUNCEMENT_LIMIT", 2)
        announcements = [
            {"_id": "a-1", "expiryDate": "2026-10-01T00:00:00Z"},
            {"_id": "a-2"},
            {"_id": "a-3", "expiryDate": "2026-12-01T00:00:00Z"},
            {"_id": "a-4"},
        ]

        active = active_announcements(announcements, NOW)

        assert [a["_id"] for a in active] == ["a-2", "a-3"]

    def test_department_slices_from_object_and_list(self):
        from_object = department_slices({"IT": 4, "Sales": 2})
        from_list = department_slices([{"name": "IT", "value": 4}, {"value": 1}])

        assert [(s.name, s.value) for s in from_object] == [("IT", 4), ("Sales", 2)]
        assert [(s.name, s.value) for s in from_list] == [("IT", 4), ("Unassigned", 1)]
        assert department_slices(None) == []

    def test_employee_attendance_and_balance(self):
        view = employee_dashboard({
            "monthlyStats": {"presentDays": 15, "totalDays": 20, "absentDays": 5},
            "leaveBalance": {"CL": 2, "PL": 4, "SL": 1.5},
            "attendanceToday": {"status": "Present", "totalWorkingHours": 6.25},
        })

        assert view.attendance_percentage == 75.0
        assert view.attendance_color == "yellow"
        assert view.total_leave_balance == 7.5
        assert [(s.name, s.color) for s in view.leave_breakdown] == [
            ("CL", "#3b82f6"), ("PL", "#10b981"), ("SL", "#f59e0b"),
        ]
        assert view.today.status_color == "green"
        assert view.today.hours_worked == 6.2

    def test_employee_without_month_data(self):
        view = employee_dashboard(None)
        assert view.attendance_percentage == 0
        assert view.today.status == "Not Marked"


async def test_employee_dashboard(client, backend):
    backend.on("GET", "/api/dashboard/stats", {"monthlyStats": {"presentDays": 9, "totalDays": 10}})
    backend.on("GET", "/api/engagement/announcements", [{"_id": "a-1", "title": "Diwali"}])
    backend.on("GET", "/api/profile/my-profile", {"personalInfo": {"fullName": "Asha Rao"}})

    resp = await client.get("/api/v1/dashboard/", headers=auth_headers("employee"))

    view = resp.json()
    assert view["display_name"] == "Asha Rao"
    assert view["employee"]["attendance_percentage"] == 90.0
    assert view["employee"]["attendance_color"] == "green"
    assert view["manager"] is None and view["hr"] is None and view["admin"] is None
    assert view["announcements"][0]["title"] == "Diwali"


async def test_failed_fetches_do_not_fail_page(client, backend):
    backend.on("GET", "/api/dashboard/stats", {"message": "boom"}, status=500)
    backend.on("GET", "/api/engagement/announcements", {"message": "boom"}, status=500)
    backend.on("GET", "/api/hr-profile/my-profile", {"message": "Profile not found"}, status=404)

    resp = await client.get("/api/v1/dashboard/", headers=auth_headers("hr"))

    assert resp.status_code == 200
    view = resp.json()
    assert view["display_name"] == "meera@example.com"
    assert view["hr"]["total_employees"] == 0
    assert view["announcements"] == []


async def test_manager_dashboard_with_pending_profiles(client, backend):
    backend.on("GET", "/api/dashboard/stats", {
        "teamSize": 8,
        "teamPresent": 6,
        "attendancePercentage": 75,
        "departmentDistribution": {"IT": 5, "Unassigned": 3},
        "recentLeaves": [{"_id": "l-1", "leaveType": "PL", "status": "Pending", "employeeId": {"employeeId": "EMP9"}}],
    })
    backend.on("GET", "/api/engagement/announcements", [])
    backend.on("GET", "/api/profile/my-profile", {})
    backend.on("GET", "/api/hr-profile/pending-approvals", [
        {"_id": "h-1", "hrId": "HR001", "personalInfo": {"fullName": "Meera Iyer"}, "profileStatus": "Submitted"},
    ])

    resp = await client.get("/api/v1/dashboard/", headers=auth_headers("manager"))

    manager = resp.json()["manager"]
    assert manager["team_size"] == 8
    assert manager["attendance_color"] == "yellow"
    assert manager["department_distribution"] == [
        {"name": "IT", "value": 5, "color": None},
        {"name": "Unassigned", "value": 3, "color": None},
    ]
    assert manager["recent_leaves"][0]["who"] == "EMP9"
    assert manager["pending_hr_profiles"][0]["full_name"] == "Meera Iyer"


async def test_admin_attendance_and_hr_profile_queue(session_for, backend):
    backend.on("GET", "/api/dashboard/stats", {"attendancePercentage": "92.5", "totalUsers": 40})
    backend.on("GET", "/api/engagement/announcements", [])
    backend.on("GET", "/api/hr-profile/my-profile", {"personalInfo": {}})
    backend.on("GET", "/api/hr-profile/pending-approvals", [
        {"_id": "h-2", "hrId": "HR002", "personalInfo": {"fullName": "Dev Patel"}, "profileStatus": "Submitted"},
    ])
    page = DashboardPage(session_for("admin"))

    await page.load()
    view = page.to_view(NOW)

    assert view.today == "Sunday, October 18, 2026"
    assert view.admin.attendance_percentage == 92.5
    assert view.admin.attendance_color == "green"
    assert view.admin.total_users == 40
    assert [row.id for row in view.admin.pending_hr_profiles] == ["h-2"]
    assert view.admin.pending_hr_profiles[0].can_decide


async def test_hr_profile_decision_refetches_queue(client, backend):
    backend.on("GET", "/api/dashboard/stats", {})
    backend.on("GET", "/api/engagement/announcements", [])
    backend.on("GET", "/api/profile/my-profile", {})
    backend.on("GET", "/api/hr-profile/pending-approvals", [])
    backend.on("PUT", "/api/hr-profile/h-1/approve", {"message": "ok"})

    resp = await client.post(
        "/api/v1/dashboard/hr-profiles/h-1/decision",
        json={"status": "Approved"},
        headers=auth_headers("manager"),
    )

    assert resp.status_code == 200
    assert resp.json()["notices"][0]["message"] == "HR profile approved successfully"
    assert len(backend.calls("GET", "/api/hr-profile/pending-approvals")) == 2


async def test_hr_profile_decision_failure(client, backend):
    backend.on("GET", "/api/dashboard/stats", {})
    backend.on("GET", "/api/engagement/announcements", [])
    backend.on("GET", "/api/profile/my-profile", {})
    backend.on("GET", "/api/hr-profile/pending-approvals", [])
    backend.on("PUT", "/api/hr-profile/h-1/approve", {}, status=500)

    resp = await client.post(
        "/api/v1/dashboard/hr-profiles/h-1/decision",
        json={"status": "Approved"},
        headers=auth_headers("manager"),
    )

    assert resp.status_code == 500
    assert resp.json()["notices"][0]["message"] == "Failed to approve HR profile"


async def test_admin_decision_refreshes_visible_queue(client, backend):
    queue = [[{"_id": "h-2", "profileStatus": "Submitted"}], []]
    backend.on("GET", "/api/dashboard/stats", {})
    backend.on("GET", "/api/engagement/announcements", [])
    backend.on("GET", "/api/hr-profile/my-profile", {})
    backend.on(
        "GET", "/api/hr-profile/pending-approvals",
        handler=lambda request: httpx.Response(200, json=queue.pop(0)),
    )
    backend.on("PUT", "/api/hr-profile/h-2/approve", {"message": "ok"})

    resp = await client.post(
        "/api/v1/dashboard/hr-profiles/h-2/decision",
        json={"status": "Approved"},
        headers=auth_headers("admin"),
    )

    assert resp.status_code == 200
    assert resp.json()["admin"]["pending_hr_profiles"] == []
    assert len(backend.calls("GET", "/api/hr-profile/pending-approvals")) == 2
